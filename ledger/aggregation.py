from collections import defaultdict
from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Dict, Iterable, Tuple

from ledger.domain import (
    LedgerSnapshot, Rejected, SavingsRecommendation, SpendingSummary, Transaction, WeeklySpending,
)
from ledger.functional import Either, Maybe, Nothing, Some
from ledger.validation import parse_date

WEEKS_PER_MONTH = 4

ZERO = Decimal("0")


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return reduce(lambda acc, a: acc + a, amounts, ZERO)


def total_spent(snapshot: LedgerSnapshot, category: str) -> Decimal:
    return _sum(t.amount for t in snapshot.transactions if t.category == category)


def total_income(snapshot: LedgerSnapshot) -> Decimal:
    return _sum(i.amount for i in snapshot.income_entries)


def _as_date(text: str) -> date:
    return date.fromisoformat(text)


def weekly_spending(snapshot: LedgerSnapshot) -> Tuple[WeeklySpending, ...]:
    """Bucket transactions into weeks counted back from the most recently added one.

    The head of the transaction list is the anchor, not the earliest date.
    Buckets come out in order of first occurrence.
    """
    if not snapshot.transactions:
        return ()

    reference = _as_date(snapshot.transactions[0].date)
    totals: Dict[int, Decimal] = {}
    for t in snapshot.transactions:
        week = abs((_as_date(t.date) - reference).days) // 7
        totals[week] = totals.get(week, ZERO) + t.amount

    return tuple(WeeklySpending(week=w, total=total) for w, total in totals.items())


def weekly_report(snapshot: LedgerSnapshot) -> Maybe[Tuple[WeeklySpending, ...]]:
    weeks = weekly_spending(snapshot)
    return Some(weeks) if weeks else Nothing()


def spending_summary(snapshot: LedgerSnapshot) -> SpendingSummary:
    by_category: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in snapshot.transactions:
        by_category[t.category] += t.amount

    return SpendingSummary(
        total_spent=_sum(t.amount for t in snapshot.transactions),
        by_category=dict(sorted(by_category.items())),
    )


def recommend_weekly_savings(
    snapshot: LedgerSnapshot, weeks: int = WEEKS_PER_MONTH
) -> Maybe[SavingsRecommendation]:
    """Spread the outstanding goal amount over a fixed horizon.

    Nothing means every goal is already met (or no goal is set).
    """
    income = total_income(snapshot)
    target = _sum(g.target_amount for g in snapshot.savings_goals)
    saved = _sum(g.saved_amount for g in snapshot.savings_goals)
    remaining = target - saved

    if remaining <= 0:
        return Nothing()

    return Some(SavingsRecommendation(
        total_income=income,
        remaining=remaining,
        weekly_income=income / weeks,
        weekly_recommendation=remaining / weeks,
    ))


def daily_transactions(snapshot: LedgerSnapshot, day: str) -> Either[Rejected, Tuple[Transaction, ...]]:
    return parse_date(day).map(
        lambda d: tuple(t for t in snapshot.transactions if _as_date(t.date) == d)
    )
