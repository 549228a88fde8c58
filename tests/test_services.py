import logging
import threading
from decimal import Decimal

from ledger.config import Settings
from ledger.domain import ErrorKind
from ledger.services import LedgerService


def test_service_threads_snapshot_between_calls():
    svc = LedgerService()
    first = svc.snapshot
    assert svc.set_budget("Food", 100).is_right()
    assert svc.snapshot is not first
    assert svc.add_transaction("2024-01-01", "Food", "60").is_right()
    assert svc.snapshot.budgets[0].spent == Decimal("60")

    before = svc.snapshot
    outcome = svc.add_transaction("2024-01-02", "Food", "50")
    assert outcome.get_error().kind is ErrorKind.BUDGET_EXCEEDED
    assert svc.snapshot is before


def test_service_reports():
    svc = LedgerService()
    svc.add_income("Salary", 500)
    svc.add_income("Side", 500)
    svc.set_savings_goal("Car", 1000)
    rec = svc.savings_recommendation().get_or_else(None)
    assert rec.weekly_income == Decimal("250")
    assert rec.weekly_recommendation == Decimal("250")

    assert svc.weekly_report().is_none()
    svc.set_budget("Food", 100)
    svc.add_transaction("2024-01-10", "Food", 10)
    assert svc.weekly_report().get_or_else(None)[0].week == 0
    assert svc.spending_summary().total_spent == Decimal("10")
    assert len(svc.daily_transactions("2024-01-10").get_or_else(None)) == 1


def test_service_uses_settings():
    svc = LedgerService(Settings(near_limit_percent=Decimal("50"), over_limit_percent=Decimal("60"),
                                 weeks_per_month=2))
    svc.set_budget("Food", 100)
    outcome = svc.add_transaction("2024-01-01", "Food", 55)
    assert outcome.get_or_else(None).alerts[0].level.value == "near_limit"
    assert len(svc.alerts()) == 1

    svc.set_savings_goal("Trip", 100)
    assert svc.savings_recommendation().get_or_else(None).weekly_recommendation == Decimal("50")


def test_service_logs_outcomes_and_alerts(caplog):
    svc = LedgerService()
    with caplog.at_level(logging.INFO, logger="ledger"):
        svc.add_transaction("2024-01-01", "Travel", 10)
        svc.set_budget("Food", 100)
        svc.add_transaction("2024-01-01", "Food", 95)

    messages = [r.getMessage() for r in caplog.records]
    assert any("budget_missing" in m for m in messages)
    assert any(m.startswith("Alert: You have spent 95.00%") for m in messages)


def test_service_import_and_export(tmp_path):
    svc = LedgerService()
    svc.set_budget("Food", 100)
    svc.add_transaction("2024-01-01", "Food", 30)
    path = str(tmp_path / "tx.json")
    assert svc.export_transactions(path).is_right()

    other = LedgerService()
    other.set_budget("Food", 50)
    assert other.import_file(path).is_right()
    assert other.snapshot.budgets[0].spent == Decimal("30")
    assert other.import_file(str(tmp_path / "missing.json")).get_error().kind is ErrorKind.FILE_NOT_FOUND

    assert svc.export_file(str(tmp_path / "report.json")).is_right()


def test_service_serializes_concurrent_callers():
    svc = LedgerService()
    svc.set_budget("Food", 1000)

    def spend():
        for _ in range(50):
            svc.add_transaction("2024-01-01", "Food", 1)

    threads = [threading.Thread(target=spend) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(svc.snapshot.transactions) == 200
    assert svc.snapshot.budgets[0].spent == Decimal("200")


def test_service_budget_status_and_report_preview(tmp_path):
    svc = LedgerService(Settings(near_limit_percent=Decimal("50"), over_limit_percent=Decimal("60")))
    svc.set_budget("Food", 100)
    svc.add_transaction("2024-01-01", "Food", 55)
    assert svc.budget_status("Food").value == "near_limit"
    assert svc.budget_status("Rent").value == "unset"

    path = str(tmp_path / "report.json")
    svc.export_file(path)
    report = svc.load_report(path).get_or_else(None)
    assert report.budgets[0].spent == Decimal("55")
