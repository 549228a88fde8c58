from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Tuple


@dataclass(frozen=True)
class Transaction:
    date: str          # normalized "YYYY-MM-DD"
    category: str
    amount: Decimal    # always > 0


@dataclass(frozen=True)
class IncomeEntry:
    source: str
    amount: Decimal


# One per category; spent is re-derived whenever the budget is (re)set
@dataclass(frozen=True)
class Budget:
    category: str
    limit: Decimal
    spent: Decimal = Decimal("0")


@dataclass(frozen=True)
class SavingsGoal:
    name: str
    target_amount: Decimal
    saved_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class WeeklySpending:
    week: int
    total: Decimal


@dataclass(frozen=True)
class SpendingSummary:
    total_spent: Decimal
    by_category: Dict[str, Decimal]


@dataclass(frozen=True)
class SavingsRecommendation:
    total_income: Decimal
    remaining: Decimal
    weekly_income: Decimal
    weekly_recommendation: Decimal


@dataclass(frozen=True)
class Report:
    budgets: Tuple[Budget, ...]
    savings_goals: Tuple[SavingsGoal, ...]
    weekly_spending: Tuple[WeeklySpending, ...]


@dataclass(frozen=True)
class LedgerSnapshot:
    transactions: Tuple[Transaction, ...] = ()    # most recent first
    income_entries: Tuple[IncomeEntry, ...] = ()  # most recent first
    budgets: Tuple[Budget, ...] = ()
    savings_goals: Tuple[SavingsGoal, ...] = ()

    @classmethod
    def empty(cls) -> "LedgerSnapshot":
        return cls()


class ErrorKind(str, Enum):
    INVALID_FIELD = "invalid_field"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE = "invalid_date"
    BUDGET_MISSING = "budget_missing"
    BUDGET_EXCEEDED = "budget_exceeded"
    FILE_NOT_FOUND = "file_not_found"
    MALFORMED_INPUT = "malformed_input"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class Rejected:
    kind: ErrorKind
    reason: str

    def __str__(self) -> str:
        return f"Error ({self.kind.value}): {self.reason}"


@dataclass(frozen=True)
class Accepted:
    description: str
    alerts: tuple = field(default=())

    def __str__(self) -> str:
        return self.description
