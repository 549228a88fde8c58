"""Interactive numbered-menu shell over a LedgerService."""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from typing import Callable

from ledger.config import configure_logging, load_settings
from ledger.services import LedgerService

MENU = """
Options:
1. Add transaction
2. Add income
3. Set budget
4. Set savings goal
5. Import transactions from file
6. Export report to file
7. Generate weekly report
8. Generate spending summary
9. Recommend weekly savings
10. View daily transactions
11. Exit"""


class LedgerShell:

    def __init__(self, service: LedgerService, read: Callable[[str], str] = input, write: Callable[[str], None] = print):
        self.service = service
        self.read = read
        self.write = write
        self.commands = {
            "1": self.add_transaction,
            "2": self.add_income,
            "3": self.set_budget,
            "4": self.set_savings_goal,
            "5": self.import_file,
            "6": self.export_file,
            "7": self.weekly_report,
            "8": self.spending_summary,
            "9": self.savings_recommendation,
            "10": self.daily_transactions,
        }

    def _report(self, outcome) -> None:
        if outcome.is_left():
            self.write(str(outcome.get_error()))
            return
        accepted = outcome.get_or_else(None)
        self.write(accepted.description)
        for alert in accepted.alerts:
            self.write(alert.message())

    def add_transaction(self) -> None:
        date = self.read("Enter date (yyyy-MM-dd): ")
        category = self.read("Enter category: ")
        amount = self.read("Enter amount: ")
        self._report(self.service.add_transaction(date, category, amount))

    def add_income(self) -> None:
        source = self.read("Enter source of income: ")
        amount = self.read("Enter amount of income: ")
        self._report(self.service.add_income(source, amount))

    def set_budget(self) -> None:
        category = self.read("Enter category: ")
        limit = self.read("Enter limit: ")
        self._report(self.service.set_budget(category, limit))

    def set_savings_goal(self) -> None:
        goal = self.read("Enter savings goal: ")
        target = self.read("Enter target amount: ")
        self._report(self.service.set_savings_goal(goal, target))

    def import_file(self) -> None:
        path = self.read("Enter file path to import from: ")
        self._report(self.service.import_file(path))

    def export_file(self) -> None:
        path = self.read("Enter file path to export to: ")
        self._report(self.service.export_file(path))

    def weekly_report(self) -> None:
        weeks = self.service.weekly_report()
        if weeks.is_none():
            self.write("No weekly spending data available.")
            return
        self.write("\nWeekly Spending Report:")
        for w in weeks.get_or_else(()):
            self.write(f"Week {w.week}: {w.total:.2f}")

    def spending_summary(self) -> None:
        summary = self.service.spending_summary()
        self.write("\nSpending Summary:")
        self.write(f"Total Spent: {summary.total_spent:.2f}")
        for category, amount in summary.by_category.items():
            self.write(f"Category '{category}': {amount:.2f}")

    def savings_recommendation(self) -> None:
        rec = self.service.savings_recommendation()
        if rec.is_none():
            self.write("You have already met your savings goals.")
            return
        r = rec.get_or_else(None)
        self.write(f"Total weekly income: {r.weekly_income:.2f}")
        self.write(f"Recommended weekly savings for your goals: {r.weekly_recommendation:.2f}")

    def daily_transactions(self) -> None:
        date = self.read("Enter date (yyyy-MM-dd): ")
        result = self.service.daily_transactions(date)
        if result.is_left():
            self.write(str(result.get_error()))
            return
        found = result.get_or_else(())
        if not found:
            self.write(f"No transactions found for {date}.")
            return
        self.write(f"\nTransactions on {date}:")
        for t in found:
            self.write(f"Category: {t.category}, Amount: {t.amount:.2f}")

    def run(self) -> None:
        while True:
            self.write(MENU)
            try:
                choice = self.read("").strip()
            except EOFError:
                choice = "11"
            if choice == "11":
                self.write("Goodbye!")
                return
            command = self.commands.get(choice)
            if command is None:
                self.write("Invalid option. Please choose again.")
                continue
            try:
                command()
            except EOFError:
                # input ended half way through a command; nothing was applied
                self.write("Goodbye!")
                return


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    LedgerShell(LedgerService(settings)).run()


if __name__ == "__main__":
    main()
