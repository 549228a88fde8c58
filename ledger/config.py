"""Runtime settings for the ledger front-ends.

Values come from ``LEDGER_*`` environment variables, falling back to the
defaults below. The pure ledger functions never read settings themselves;
the service layer passes the relevant values in.
"""
import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

from ledger.alerts import NEAR_LIMIT_PERCENT, OVER_LIMIT_PERCENT
from ledger.aggregation import WEEKS_PER_MONTH
from ledger.codec import JSON_INDENT

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    near_limit_percent: Decimal = NEAR_LIMIT_PERCENT
    over_limit_percent: Decimal = OVER_LIMIT_PERCENT
    weeks_per_month: int = WEEKS_PER_MONTH
    report_path: str = "data/report.json"
    transactions_path: str = "data/transactions.json"
    json_indent: int = JSON_INDENT
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not (0 < self.near_limit_percent <= self.over_limit_percent):
            raise ValueError("near_limit_percent must be positive and not above over_limit_percent")
        if not isinstance(self.weeks_per_month, int) or self.weeks_per_month <= 0:
            raise ValueError("weeks_per_month must be a positive integer")
        if not self.report_path or not self.transactions_path:
            raise ValueError("report_path and transactions_path must be non-empty")
        if not isinstance(self.json_indent, int) or self.json_indent < 0:
            raise ValueError("json_indent must be a non-negative integer")
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ValueError(f"unknown log_level: {self.log_level}")


def _env_decimal(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    data_dir = Path(os.getenv("LEDGER_DATA_DIR", "data"))
    return Settings(
        near_limit_percent=_env_decimal("LEDGER_NEAR_LIMIT_PERCENT", NEAR_LIMIT_PERCENT),
        over_limit_percent=_env_decimal("LEDGER_OVER_LIMIT_PERCENT", OVER_LIMIT_PERCENT),
        weeks_per_month=_env_int("LEDGER_WEEKS_PER_MONTH", WEEKS_PER_MONTH),
        report_path=os.getenv("LEDGER_REPORT_PATH", str(data_dir / "report.json")),
        transactions_path=os.getenv("LEDGER_TRANSACTIONS_PATH", str(data_dir / "transactions.json")),
        json_indent=_env_int("LEDGER_JSON_INDENT", JSON_INDENT),
        log_level=os.getenv("LEDGER_LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("ledger").setLevel(level.upper())
