from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from ledger.domain import Budget, LedgerSnapshot
from ledger.functional import safe_budget

__all__ = ['AlertLevel', 'Alert', 'BudgetStatus', 'utilization', 'evaluate_utilization',
           'evaluate_budgets', 'budget_status']

NEAR_LIMIT_PERCENT = Decimal("80")
OVER_LIMIT_PERCENT = Decimal("90")


class AlertLevel(str, Enum):
    NEAR_LIMIT = "near_limit"
    OVER_LIMIT = "over_limit"


class BudgetStatus(str, Enum):
    UNSET = "unset"
    ACTIVE = "active"
    NEAR_LIMIT = "near_limit"
    OVER_LIMIT = "over_limit"


class Alert(NamedTuple):
    category: str
    level: AlertLevel
    percent: Decimal

    def message(self) -> str:
        if self.level is AlertLevel.OVER_LIMIT:
            return (f"Alert: You have spent {self.percent:.2f}% of your budget for category "
                    f"'{self.category}'. You are nearing your limit!")
        return (f"Warning: You have spent {self.percent:.2f}% of your budget for category "
                f"'{self.category}'. You are over 80% of the budget.")


def utilization(budget: Budget) -> Decimal:
    return budget.spent / budget.limit * 100


def evaluate_utilization(
    budget: Budget,
    near: Decimal = NEAR_LIMIT_PERCENT,
    over: Decimal = OVER_LIMIT_PERCENT,
) -> Optional[Alert]:
    pct = utilization(budget)
    if pct >= over:
        return Alert(budget.category, AlertLevel.OVER_LIMIT, pct)
    if pct >= near:
        return Alert(budget.category, AlertLevel.NEAR_LIMIT, pct)
    return None


def evaluate_budgets(
    budgets: Tuple[Budget, ...],
    near: Decimal = NEAR_LIMIT_PERCENT,
    over: Decimal = OVER_LIMIT_PERCENT,
) -> Tuple[Alert, ...]:
    alerts = (evaluate_utilization(b, near, over) for b in budgets)
    return tuple(a for a in alerts if a is not None)


def budget_status(
    snapshot: LedgerSnapshot,
    category: str,
    near: Decimal = NEAR_LIMIT_PERCENT,
    over: Decimal = OVER_LIMIT_PERCENT,
) -> BudgetStatus:
    found = safe_budget(snapshot.budgets, category)
    if found.is_none():
        return BudgetStatus.UNSET
    alert = evaluate_utilization(found.get_or_else(None), near, over)
    if alert is None:
        return BudgetStatus.ACTIVE
    return BudgetStatus(alert.level.value)
