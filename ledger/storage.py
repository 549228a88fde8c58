"""Blocking, all-or-nothing file access for report export and transaction import."""
import logging
import os
import tempfile
from typing import Tuple

from ledger.aggregation import weekly_spending
from ledger.codec import JSON_INDENT, decode_report, decode_transactions, encode_report, encode_transactions
from ledger.domain import Accepted, ErrorKind, LedgerSnapshot, Rejected, Report, Transaction
from ledger.functional import Either, Left, Right
from ledger.validation import require_non_empty

logger = logging.getLogger(__name__)


def atomic_write(path: str, content: bytes) -> None:
    """Write to a temp file beside ``path``, fsync it, then rename into place.

    On any failure the temp file is removed and the previous file at ``path``
    is left as it was. Raises OSError.
    """
    target_dir = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=target_dir)
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise


def _write(path: str, content: bytes, what: str) -> Either[Rejected, Accepted]:
    checked = require_non_empty(path, "File Path")
    if checked.is_left():
        return checked
    try:
        atomic_write(path, content)
    except OSError as exc:
        logger.exception("Failed to export %s to %s", what, path)
        return Left(Rejected(ErrorKind.IO_ERROR, f"Could not write {path}: {exc.strerror or exc}"))
    logger.info("Exported %s to %s (%d bytes)", what, path, len(content))
    return Right(Accepted(f"{what.capitalize()} exported to {path}"))


def export_report(path: str, snapshot: LedgerSnapshot, indent: int = JSON_INDENT) -> Either[Rejected, Accepted]:
    content = encode_report(snapshot.budgets, snapshot.savings_goals, weekly_spending(snapshot), indent)
    return _write(path, content, "report")


def export_transactions(path: str, snapshot: LedgerSnapshot, indent: int = JSON_INDENT) -> Either[Rejected, Accepted]:
    return _write(path, encode_transactions(snapshot.transactions, indent), "transactions")


def _read(path: str) -> Either[Rejected, bytes]:
    checked = require_non_empty(path, "File Path")
    if checked.is_left():
        return checked
    if not os.path.isfile(path):
        return Left(Rejected(ErrorKind.FILE_NOT_FOUND, f"File not found: {path}"))
    try:
        with open(path, "rb") as f:
            return Right(f.read())
    except OSError as exc:
        logger.exception("Failed to read %s", path)
        return Left(Rejected(ErrorKind.IO_ERROR, f"Could not read {path}: {exc.strerror or exc}"))


def load_report(path: str) -> Either[Rejected, Report]:
    """Read back a report written by export_report."""
    return _read(path).bind(decode_report)


def load_transactions(path: str) -> Either[Rejected, Tuple[Transaction, ...]]:
    result = _read(path).bind(decode_transactions)
    if result.is_left():
        logger.warning("Rejected import from %s: %s", path, result.get_error().reason)
    else:
        logger.info("Loaded %d transactions from %s", len(result.get_or_else(())), path)
    return result
