import logging
import threading
from typing import Callable, Optional, Tuple

from ledger import aggregation, storage, transforms
from ledger.alerts import Alert, BudgetStatus, budget_status, evaluate_budgets
from ledger.config import Settings
from ledger.domain import (
    Accepted, LedgerSnapshot, Rejected, Report, SavingsRecommendation, SpendingSummary, Transaction, WeeklySpending,
)
from ledger.functional import Either, Maybe

logger = logging.getLogger(__name__)

Outcome = Either[Rejected, Accepted]


class LedgerService:
    """Holds one ledger snapshot for a session and applies transitions to it.

    The transitions themselves are pure; this class only sequences them,
    swaps the held snapshot and logs. A lock serializes callers so one
    service can be shared by a threaded host.
    """

    def __init__(self, settings: Optional[Settings] = None, snapshot: Optional[LedgerSnapshot] = None):
        self.settings = settings or Settings()
        self._snapshot = snapshot or LedgerSnapshot.empty()
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> LedgerSnapshot:
        return self._snapshot

    def _apply(self, name: str, step: Callable[[LedgerSnapshot], transforms.Step]) -> Outcome:
        with self._lock:
            new_snapshot, outcome = step(self._snapshot)
            self._snapshot = new_snapshot
            budgets = new_snapshot.budgets

        if outcome.is_left():
            err = outcome.get_error()
            logger.warning("%s rejected [%s]: %s", name, err.kind.value, err.reason)
            return outcome

        logger.info("%s: %s", name, outcome.get_or_else(None).description)
        for alert in evaluate_budgets(budgets, self.settings.near_limit_percent, self.settings.over_limit_percent):
            logger.warning(alert.message())
        return outcome

    # --- mutators

    def add_transaction(self, date: str, category: str, amount) -> Outcome:
        s = self.settings
        return self._apply("add_transaction", lambda snap: transforms.record_transaction(
            snap, date, category, amount, s.near_limit_percent, s.over_limit_percent))

    def add_income(self, source: str, amount) -> Outcome:
        return self._apply("add_income", lambda snap: transforms.record_income(snap, source, amount))

    def set_budget(self, category: str, limit) -> Outcome:
        s = self.settings
        return self._apply("set_budget", lambda snap: transforms.set_budget(
            snap, category, limit, s.near_limit_percent, s.over_limit_percent))

    def set_savings_goal(self, name: str, target_amount) -> Outcome:
        return self._apply("set_savings_goal", lambda snap: transforms.set_savings_goal(snap, name, target_amount))

    def import_file(self, path: str) -> Outcome:
        loaded = storage.load_transactions(path)
        if loaded.is_left():
            logger.warning("import_file rejected [%s]: %s", loaded.get_error().kind.value, loaded.get_error().reason)
            return loaded
        imported = loaded.get_or_else(())
        return self._apply("import_file", lambda snap: transforms.import_transactions(snap, imported))

    # --- reports

    def export_file(self, path: str) -> Outcome:
        return storage.export_report(path, self._snapshot, self.settings.json_indent)

    def export_transactions(self, path: str) -> Outcome:
        return storage.export_transactions(path, self._snapshot, self.settings.json_indent)

    def weekly_report(self) -> Maybe[Tuple[WeeklySpending, ...]]:
        return aggregation.weekly_report(self._snapshot)

    def spending_summary(self) -> SpendingSummary:
        return aggregation.spending_summary(self._snapshot)

    def savings_recommendation(self) -> Maybe[SavingsRecommendation]:
        return aggregation.recommend_weekly_savings(self._snapshot, self.settings.weeks_per_month)

    def daily_transactions(self, date: str) -> Either[Rejected, Tuple[Transaction, ...]]:
        return aggregation.daily_transactions(self._snapshot, date)

    def alerts(self) -> Tuple[Alert, ...]:
        return evaluate_budgets(
            self._snapshot.budgets, self.settings.near_limit_percent, self.settings.over_limit_percent
        )

    def budget_status(self, category: str) -> BudgetStatus:
        return budget_status(
            self._snapshot, category, self.settings.near_limit_percent, self.settings.over_limit_percent
        )

    def load_report(self, path: str) -> Either[Rejected, Report]:
        return storage.load_report(path)
