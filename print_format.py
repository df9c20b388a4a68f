"""Formatting helpers shared by the print views, PDFs and API payloads."""

from datetime import date, datetime
from typing import Any, Optional

from config import CURRENCY
from utils import to_float


MISSING = "—"

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y",
)


def parse_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value or "").strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _local(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        return dt.astimezone()
    return dt


def format_date(value: Any) -> str:
    """DD/MM/YYYY, or the input unchanged when it is not a date."""
    if value is None or value == "":
        return MISSING
    dt = parse_date(value)
    if dt is None:
        return str(value)
    dt = _local(dt)
    return f"{dt.day:02d}/{dt.month:02d}/{dt.year}"


def format_datetime(value: Any) -> str:
    dt = parse_date(value)
    if dt is None:
        return str(value or MISSING)
    return _local(dt).strftime("%d/%m/%Y, %H:%M:%S")


def format_money(value: Any, symbol: str = CURRENCY, spaced: bool = False) -> str:
    amount = to_float(value) + 0.0  # no "-0.00"
    sep = " " if spaced else ""
    return f"{symbol}{sep}{amount:,.2f}"


def format_balance(value: Any, symbol: str = CURRENCY) -> str:
    """Negative balances are shown as (magnitude), never with a minus sign."""
    amount = to_float(value)
    if amount >= 0:
        return format_money(amount, symbol)
    return f"({format_money(abs(amount), symbol)})"


def balance_marker(value: Any) -> str:
    return "CR" if to_float(value) >= 0 else "DB"
