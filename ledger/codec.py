"""JSON wire format for exported reports and transaction imports.

Field names are fixed (``Budgets``, ``SavingsGoals``, ``WeeklySpending`` for
reports; ``Date``, ``Category``, ``Amount`` for transactions). Amounts are
emitted as JSON numbers written digit for digit from the Decimal value and
read back as Decimal, so no precision is lost between export and import.
"""
import json
from decimal import Decimal
from typing import Any, Callable, Dict, List, Tuple, Union

from ledger.domain import (
    Budget, ErrorKind, Rejected, Report, SavingsGoal, Transaction, WeeklySpending,
)
from ledger.functional import Either, Left, Right, sequence
from ledger.validation import normalize_date, parse_date, require_non_empty, require_positive

JSON_INDENT = 2

Raw = Union[bytes, str]


def _number(value: Decimal) -> Union[int, Decimal]:
    if value == value.to_integral_value():
        return int(value)
    return value


def _render(value: Any, indent: int, level: int = 0) -> str:
    # Same layout as json.dumps(indent=...), but Decimals go out as their exact text.
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (dict, list)):
        if not value:
            return "{}" if isinstance(value, dict) else "[]"
        pad = " " * (indent * (level + 1))
        if isinstance(value, dict):
            parts = [f"{pad}{json.dumps(k, ensure_ascii=False)}: {_render(v, indent, level + 1)}"
                     for k, v in value.items()]
            opening, closing = "{", "}"
        else:
            parts = [f"{pad}{_render(v, indent, level + 1)}" for v in value]
            opening, closing = "[", "]"
        return opening + "\n" + ",\n".join(parts) + "\n" + " " * (indent * level) + closing
    return json.dumps(value, ensure_ascii=False)


def _dump(doc: Any, indent: int) -> bytes:
    return _render(doc, indent).encode("utf-8")


def budget_to_dict(b: Budget) -> Dict[str, Any]:
    return {"Category": b.category, "Limit": _number(b.limit), "Spent": _number(b.spent)}


def goal_to_dict(g: SavingsGoal) -> Dict[str, Any]:
    return {
        "Goal": g.name,
        "TargetAmount": _number(g.target_amount),
        "SavedAmount": _number(g.saved_amount),
    }


def week_to_dict(w: WeeklySpending) -> Dict[str, Any]:
    return {"Week": w.week, "Total": _number(w.total)}


def transaction_to_dict(t: Transaction) -> Dict[str, Any]:
    return {"Date": t.date, "Category": t.category, "Amount": _number(t.amount)}


def encode_report(
    budgets: Tuple[Budget, ...],
    savings_goals: Tuple[SavingsGoal, ...],
    weekly_spending: Tuple[WeeklySpending, ...],
    indent: int = JSON_INDENT,
) -> bytes:
    doc = {
        "Budgets": [budget_to_dict(b) for b in budgets],
        "SavingsGoals": [goal_to_dict(g) for g in savings_goals],
        "WeeklySpending": [week_to_dict(w) for w in weekly_spending],
    }
    return _dump(doc, indent)


def encode_transactions(transactions: Tuple[Transaction, ...], indent: int = JSON_INDENT) -> bytes:
    return _dump([transaction_to_dict(t) for t in transactions], indent)


# --- decoding


def _malformed(reason: str) -> Left:
    return Left(Rejected(ErrorKind.MALFORMED_INPUT, reason))


def _load(data: Raw) -> Either[Rejected, Any]:
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        return Right(json.loads(text, parse_float=Decimal))
    except UnicodeDecodeError as exc:
        return _malformed(f"Document is not UTF-8: {exc.reason}")
    except json.JSONDecodeError as exc:
        return _malformed(f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, Decimal)) and not isinstance(value, bool)


def _field(item: Dict[str, Any], key: str, check: Callable[[Any], bool], where: str) -> Either[Rejected, Any]:
    if key not in item:
        return _malformed(f"{where} is missing field '{key}'.")
    if not check(item[key]):
        return _malformed(f"{where} has a wrong type for field '{key}'.")
    return Right(item[key])


def _revalidate(result: Either[Rejected, Any], where: str) -> Either[Rejected, Any]:
    if result.is_left():
        return _malformed(f"{where}: {result.get_error().reason}")
    return result


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _transaction(item: Any, idx: int) -> Either[Rejected, Transaction]:
    where = f"Transaction at index {idx}"
    if not isinstance(item, dict):
        return _malformed(f"{where} must be an object.")

    fields = sequence((
        _field(item, "Date", _is_str, where),
        _field(item, "Category", _is_str, where),
        _field(item, "Amount", _is_number, where),
    ))
    if fields.is_left():
        return fields
    date_text, category, amount = fields.get_or_else(None)

    checked = sequence((
        _revalidate(parse_date(date_text), where),
        _revalidate(require_non_empty(category, "Category"), where),
        _revalidate(require_positive(amount, "Amount"), where),
    ))
    return checked.map(lambda v: Transaction(date=normalize_date(v[0]), category=v[1], amount=v[2]))


def _items(doc: Any, what: str) -> Either[Rejected, List[Any]]:
    if not isinstance(doc, list):
        return _malformed(f"{what} must be an array.")
    return Right(doc)


def decode_transactions(data: Raw) -> Either[Rejected, Tuple[Transaction, ...]]:
    return (
        _load(data)
        .bind(lambda doc: _items(doc, "Transaction document"))
        .bind(lambda items: sequence(_transaction(item, i) for i, item in enumerate(items)))
    )


def _record(item: Any, idx: int, section: str, spec: Tuple[Tuple[str, Callable[[Any], bool]], ...],
            build: Callable[..., Any]) -> Either[Rejected, Any]:
    where = f"{section} entry at index {idx}"
    if not isinstance(item, dict):
        return _malformed(f"{where} must be an object.")
    return sequence(_field(item, key, check, where) for key, check in spec).map(lambda v: build(*v))


def _section(doc: Dict[str, Any], section: str, spec, build) -> Either[Rejected, Tuple[Any, ...]]:
    if section not in doc:
        return _malformed(f"Report is missing '{section}'.")
    return _items(doc[section], section).bind(
        lambda items: sequence(_record(item, i, section, spec, build) for i, item in enumerate(items))
    )


def _to_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _report(doc: Any) -> Either[Rejected, Report]:
    if not isinstance(doc, dict):
        return _malformed("Report document must be an object.")

    budgets = _section(
        doc, "Budgets",
        (("Category", _is_str), ("Limit", _is_number), ("Spent", _is_number)),
        lambda c, lim, s: Budget(c, _to_decimal(lim), _to_decimal(s)),
    )
    goals = _section(
        doc, "SavingsGoals",
        (("Goal", _is_str), ("TargetAmount", _is_number), ("SavedAmount", _is_number)),
        lambda n, t, s: SavingsGoal(n, _to_decimal(t), _to_decimal(s)),
    )
    weeks = _section(
        doc, "WeeklySpending",
        (("Week", _is_int), ("Total", _is_number)),
        lambda w, t: WeeklySpending(w, _to_decimal(t)),
    )
    return sequence((budgets, goals, weeks)).map(lambda parts: Report(*parts))


def decode_report(data: Raw) -> Either[Rejected, Report]:
    return _load(data).bind(_report)
