import json
import os
from decimal import Decimal

from ledger.domain import ErrorKind, LedgerSnapshot
from ledger.storage import atomic_write, export_report, export_transactions, load_report, load_transactions
from ledger.transforms import record_transaction, set_budget, set_savings_goal


def sample_snapshot():
    snap, _ = set_budget(LedgerSnapshot.empty(), "Food", 100)
    snap, _ = set_savings_goal(snap, "Car", 1000)
    snap, _ = record_transaction(snap, "2024-01-03", "Food", 20)
    snap, _ = record_transaction(snap, "2024-01-10", "Food", 40)
    return snap


def test_export_report_writes_document(tmp_path):
    path = tmp_path / "report.json"
    outcome = export_report(str(path), sample_snapshot())
    assert outcome.is_right()

    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["Budgets"] == [{"Category": "Food", "Limit": 100, "Spent": 60}]
    assert doc["SavingsGoals"] == [{"Goal": "Car", "TargetAmount": 1000, "SavedAmount": 0}]
    assert doc["WeeklySpending"] == [{"Week": 0, "Total": 40}, {"Week": 1, "Total": 20}]
    assert os.listdir(tmp_path) == ["report.json"]


def test_export_then_import_transactions(tmp_path):
    path = str(tmp_path / "transactions.json")
    snap = sample_snapshot()
    assert export_transactions(path, snap).is_right()
    assert load_transactions(path).get_or_else(None) == snap.transactions


def test_export_to_missing_directory_is_io_error(tmp_path):
    outcome = export_report(str(tmp_path / "nope" / "report.json"), sample_snapshot())
    assert outcome.get_error().kind is ErrorKind.IO_ERROR


def test_export_blank_path():
    assert export_report("  ", sample_snapshot()).get_error().kind is ErrorKind.INVALID_FIELD


def test_failed_write_keeps_previous_file(tmp_path, monkeypatch):
    path = tmp_path / "report.json"
    path.write_text("previous", encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", broken_replace)
    outcome = export_report(str(path), sample_snapshot())

    assert outcome.get_error().kind is ErrorKind.IO_ERROR
    assert path.read_text(encoding="utf-8") == "previous"
    assert os.listdir(tmp_path) == ["report.json"]


def test_atomic_write_replaces_existing(tmp_path):
    path = tmp_path / "out.json"
    path.write_bytes(b"old")
    atomic_write(str(path), b"new")
    assert path.read_bytes() == b"new"


def test_load_missing_file(tmp_path):
    result = load_transactions(str(tmp_path / "missing.json"))
    assert result.get_error().kind is ErrorKind.FILE_NOT_FOUND


def test_load_malformed_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('[{"Date": "2024-01-01", "Category": "Food"}]', encoding="utf-8")
    assert load_transactions(str(path)).get_error().kind is ErrorKind.MALFORMED_INPUT


def test_load_valid_file(tmp_path):
    path = tmp_path / "in.json"
    path.write_text('[{"Date": "2024-01-01", "Category": "Food", "Amount": 9.99}]', encoding="utf-8")
    loaded = load_transactions(str(path)).get_or_else(None)
    assert loaded[0].amount == Decimal("9.99")


def test_load_report_reads_back_export(tmp_path):
    path = str(tmp_path / "report.json")
    snap = sample_snapshot()
    export_report(path, snap)
    report = load_report(path).get_or_else(None)
    assert report.budgets == snap.budgets
    assert report.savings_goals == snap.savings_goals
    assert [w.week for w in report.weekly_spending] == [0, 1]

    assert load_report(str(tmp_path / "missing.json")).get_error().kind is ErrorKind.FILE_NOT_FOUND
    (tmp_path / "tx.json").write_text("[]", encoding="utf-8")
    assert load_report(str(tmp_path / "tx.json")).get_error().kind is ErrorKind.MALFORMED_INPUT
