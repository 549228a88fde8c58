"""Pure state transitions over a LedgerSnapshot.

Every function returns ``(snapshot, outcome)``. On rejection the input
snapshot object itself is returned, so callers may test ``new is old``.
"""
from dataclasses import replace
from decimal import Decimal
from functools import reduce
from typing import Tuple

from ledger.alerts import NEAR_LIMIT_PERCENT, OVER_LIMIT_PERCENT, evaluate_utilization
from ledger.domain import (
    Accepted, Budget, ErrorKind, IncomeEntry, LedgerSnapshot, Rejected, SavingsGoal, Transaction,
)
from ledger.functional import Either, Left, Right, safe_budget, safe_goal
from ledger.validation import normalize_date, parse_date, require_non_empty, require_positive

Outcome = Either[Rejected, Accepted]
Step = Tuple[LedgerSnapshot, Outcome]


def _sum_category(trans: Tuple[Transaction, ...], category: str) -> Decimal:
    return reduce(
        lambda acc, t: acc + t.amount if t.category == category else acc, trans, Decimal("0")
    )


def _alerts_for(budget: Budget, near: Decimal, over: Decimal) -> tuple:
    alert = evaluate_utilization(budget, near, over)
    return () if alert is None else (alert,)


def _rejected(snapshot: LedgerSnapshot, error: Rejected) -> Step:
    return snapshot, Left(error)


def record_transaction(
    snapshot: LedgerSnapshot,
    date: str,
    category: str,
    amount,
    near: Decimal = NEAR_LIMIT_PERCENT,
    over: Decimal = OVER_LIMIT_PERCENT,
) -> Step:
    checked = (
        require_non_empty(date, "Date")
        .bind(lambda _: require_non_empty(category, "Category"))
        .bind(lambda _: require_positive(amount, "Amount"))
    )
    if checked.is_left():
        return _rejected(snapshot, checked.get_error())
    value = checked.get_or_else(None)

    parsed = parse_date(date)
    if parsed.is_left():
        return _rejected(snapshot, parsed.get_error())

    found = safe_budget(snapshot.budgets, category)
    if found.is_none():
        return _rejected(snapshot, Rejected(
            ErrorKind.BUDGET_MISSING,
            f"No budget set for category '{category}'. Please set a budget first.",
        ))
    budget = found.get_or_else(None)

    # equality with the limit is allowed
    if _sum_category(snapshot.transactions, category) + value > budget.limit:
        return _rejected(snapshot, Rejected(
            ErrorKind.BUDGET_EXCEEDED,
            f"Transaction exceeds the budget for category '{category}'.",
        ))

    transaction = Transaction(
        date=normalize_date(parsed.get_or_else(None)), category=category, amount=value
    )
    updated = replace(budget, spent=budget.spent + value)
    new_snapshot = replace(
        snapshot,
        transactions=(transaction,) + snapshot.transactions,
        budgets=tuple(updated if b.category == category else b for b in snapshot.budgets),
    )
    return new_snapshot, Right(Accepted(
        f"Transaction added: {transaction.date} {category} {value}",
        _alerts_for(updated, near, over),
    ))


def record_income(snapshot: LedgerSnapshot, source: str, amount) -> Step:
    checked = require_non_empty(source, "Source").bind(lambda _: require_positive(amount, "Amount"))
    if checked.is_left():
        return _rejected(snapshot, checked.get_error())

    income = IncomeEntry(source=source, amount=checked.get_or_else(None))
    new_snapshot = replace(snapshot, income_entries=(income,) + snapshot.income_entries)
    return new_snapshot, Right(Accepted(f"Income added: {source} {income.amount}"))


def set_budget(
    snapshot: LedgerSnapshot,
    category: str,
    limit,
    near: Decimal = NEAR_LIMIT_PERCENT,
    over: Decimal = OVER_LIMIT_PERCENT,
) -> Step:
    checked = require_non_empty(category, "Category").bind(lambda _: require_positive(limit, "Limit"))
    if checked.is_left():
        return _rejected(snapshot, checked.get_error())

    budget = Budget(
        category=category,
        limit=checked.get_or_else(None),
        spent=_sum_category(snapshot.transactions, category),
    )
    others = tuple(b for b in snapshot.budgets if b.category != category)
    new_snapshot = replace(snapshot, budgets=(budget,) + others)
    return new_snapshot, Right(Accepted(
        f"Budget set for category '{category}': Limit = {budget.limit:.2f}",
        _alerts_for(budget, near, over),
    ))


def set_savings_goal(snapshot: LedgerSnapshot, name: str, target_amount) -> Step:
    # Re-setting a goal starts it again from zero saved.
    checked = (
        require_non_empty(name, "Goal")
        .bind(lambda _: require_positive(target_amount, "Target Amount"))
    )
    if checked.is_left():
        return _rejected(snapshot, checked.get_error())

    goal = SavingsGoal(name=name, target_amount=checked.get_or_else(None))
    others = tuple(g for g in snapshot.savings_goals if g.name != name)
    new_snapshot = replace(snapshot, savings_goals=(goal,) + others)
    description = f"Savings goal set for '{name}': Target = {goal.target_amount:.2f}"
    previous = safe_goal(snapshot.savings_goals, name)
    if previous.is_some():
        old = previous.get_or_else(None)
        description += f" (replaces target {old.target_amount:.2f}, saved {old.saved_amount:.2f})"
    return new_snapshot, Right(Accepted(description))


def import_transactions(snapshot: LedgerSnapshot, transactions: Tuple[Transaction, ...]) -> Step:
    """Replace the transaction list wholesale and re-derive every budget's spent."""
    trans = tuple(transactions)
    budgets = tuple(replace(b, spent=_sum_category(trans, b.category)) for b in snapshot.budgets)
    new_snapshot = replace(snapshot, transactions=trans, budgets=budgets)
    return new_snapshot, Right(Accepted(f"Imported {len(trans)} transactions"))
