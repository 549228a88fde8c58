import json
import os

from streamlit.testing.v1 import AppTest

APP = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "app", "main.py")


def files_page(monkeypatch, tmp_path):
    monkeypatch.setenv("LEDGER_DATA_DIR", str(tmp_path))
    at = AppTest.from_file(APP, default_timeout=60)
    at.run()
    at.sidebar.radio[0].set_value("📂 Files").run()
    return at


def test_export_transactions_has_its_own_path(monkeypatch, tmp_path):
    at = files_page(monkeypatch, tmp_path)
    target = tmp_path / "exported.json"
    at.text_input(key="tx_export_path").set_value(str(target)).run()
    at.button(key="export_transactions").click().run()

    assert not at.exception
    assert json.loads(target.read_text(encoding="utf-8")) == []
    assert not (tmp_path / "transactions.json").exists()


def test_report_preview(monkeypatch, tmp_path):
    at = files_page(monkeypatch, tmp_path)
    ledger = at.session_state["ledger"]
    ledger.set_budget("Food", 100)
    ledger.add_transaction("2024-01-01", "Food", 40)

    at.button(key="export_report").click().run()
    at.button(key="load_report").click().run()

    assert not at.exception
    assert len(at.error) == 0
    assert len(at.table) == 3
    assert (tmp_path / "report.json").exists()
