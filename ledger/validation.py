"""Input guards run at the start of every mutating operation.

Each guard returns an Either so callers can chain them with ``bind`` and
never touch state until every field has passed.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

import pandas as pd

from ledger.domain import ErrorKind, Rejected
from ledger.functional import Either, Left, Right

DATE_FORMAT = "%Y-%m-%d"


def require_non_empty(text: Any, field_name: str) -> Either[Rejected, str]:
    if not isinstance(text, str) or not text.strip():
        return Left(Rejected(ErrorKind.INVALID_FIELD, f"{field_name} cannot be empty or whitespace."))
    return Right(text)


def to_decimal(value: Any) -> Decimal:
    """Read ints, floats, Decimals and numeric strings as Decimal.

    Raises InvalidOperation for anything else (bools included).
    """
    if isinstance(value, bool):
        raise InvalidOperation(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value).strip())


def require_positive(value: Any, field_name: str) -> Either[Rejected, Decimal]:
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Left(Rejected(ErrorKind.INVALID_AMOUNT, f"{field_name} must be a number."))
    if not amount.is_finite() or amount <= 0:
        return Left(Rejected(ErrorKind.INVALID_AMOUNT, f"{field_name} must be greater than zero."))
    return Right(amount)


def _parse(text: str) -> Either[Rejected, date]:
    try:
        ts = pd.to_datetime(text.strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        ts = pd.NaT
    if pd.isna(ts):
        return Left(Rejected(ErrorKind.INVALID_DATE, f"'{text}' is not a valid date."))
    return Right(ts.date())


def parse_date(text: Any, field_name: str = "Date") -> Either[Rejected, date]:
    """Parse a free-form date string ("2024-01-05", "Jan 5 2024", "2024/01/05")."""
    return require_non_empty(text, field_name).bind(_parse)


def normalize_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)
