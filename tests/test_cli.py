from app.cli import LedgerShell
from ledger.services import LedgerService


def run_shell(inputs, service=None):
    feed = iter(inputs)
    out = []

    def read(prompt):
        try:
            return next(feed)
        except StopIteration:
            raise EOFError

    shell = LedgerShell(service or LedgerService(), read=read, write=out.append)
    shell.run()
    return out


def test_budget_and_transaction_flow():
    out = run_shell([
        "3", "Food", "100",
        "1", "2024-01-01", "Food", "60",
        "1", "2024-01-02", "Food", "50",
        "1", "2024-01-02", "Travel", "5",
        "11",
    ])
    assert "Budget set for category 'Food': Limit = 100.00" in out
    assert any(line.startswith("Transaction added: 2024-01-01 Food 60") for line in out)
    assert any("exceeds the budget" in line for line in out)
    assert any("No budget set for category 'Travel'" in line for line in out)
    assert out[-1] == "Goodbye!"


def test_reports():
    out = run_shell([
        "7",
        "2", "Salary", "500",
        "2", "Bonus", "500",
        "4", "Car", "1000",
        "9",
        "3", "Food", "100",
        "1", "2024-01-10", "Food", "85",
        "1", "2024-01-03", "Food", "5",
        "7",
        "8",
        "10", "2024-01-03",
        "10", "2024-02-01",
        "11",
    ])
    assert "No weekly spending data available." in out
    assert "Total weekly income: 250.00" in out
    assert "Recommended weekly savings for your goals: 250.00" in out
    assert any(line.startswith("Warning: You have spent 85.00%") for line in out)
    assert "Week 0: 5.00" in out and "Week 1: 85.00" in out
    assert "Total Spent: 90.00" in out
    assert "Category 'Food': 90.00" in out
    assert "Category: Food, Amount: 5.00" in out
    assert "No transactions found for 2024-02-01." in out


def test_invalid_option_and_bad_amount():
    out = run_shell(["42", "2", "Salary", "lots", "11"])
    assert "Invalid option. Please choose again." in out
    assert any("Amount must be a number." in line for line in out)


def test_goals_met_and_end_of_input():
    out = run_shell(["9"])
    assert "You have already met your savings goals." in out
    assert out[-1] == "Goodbye!"


def test_end_of_input_inside_a_command():
    svc = LedgerService()
    out = run_shell(["3", "Food", "100", "1", "2024-01-01"], svc)
    assert out[-1] == "Goodbye!"
    assert svc.snapshot.transactions == ()
    assert len(svc.snapshot.budgets) == 1


def test_export_import_round_trip(tmp_path):
    report = str(tmp_path / "report.json")
    tx_file = tmp_path / "tx.json"
    tx_file.write_text('[{"Date": "2024-01-05", "Category": "Food", "Amount": 12}]', encoding="utf-8")
    svc = LedgerService()
    out = run_shell(["5", str(tx_file), "6", report, "11"], svc)
    assert "Imported 1 transactions" in out
    assert f"Report exported to {report}" in out
    assert svc.snapshot.transactions[0].amount == 12
