"""Record normalisation for Clarity.

Every fetched transaction passes through :func:`normalize_transactions` before
any aggregation, so downstream code only ever sees finite, non-negative float
amounts, naive local timestamps and lower-case transaction types.
"""

from __future__ import annotations

import math
import numbers
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Any, Iterable, Literal, Mapping, TypedDict

import pandas as pd

from . import utils
from .logging_setup import get_logger

logger = get_logger(__name__)

TransactionType = Literal["income", "expense"]

TRANSACTION_TYPES: tuple[TransactionType, ...] = ("income", "expense")
TRANSACTION_COLUMNS = ["id", "amount", "category", "description", "date", "type"]

# Offered by the entry form per type; the core never validates against these.
SUGGESTED_CATEGORIES: dict[TransactionType, tuple[str, ...]] = {
    "expense": (
        "Food",
        "Transport",
        "Utilities",
        "Entertainment",
        "Shopping",
        "Health",
        "Education",
        "Travel",
        "Groceries",
        "Other",
    ),
    "income": (
        "Salary",
        "Freelance",
        "Investments",
        "Business",
        "Gift",
        "Rental",
        "Refunds",
        "Other",
    ),
}


class Transaction(TypedDict):
    id: str
    amount: float
    category: str
    description: str
    date: pd.Timestamp
    type: TransactionType


class NewTransaction(TypedDict, total=False):
    amount: Any
    category: str
    description: str
    date: Any
    type: str


def _parse_amount(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, str):
            amount = float(value.strip())
        elif isinstance(value, Decimal):
            amount = float(value)
        else:
            amount = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def to_amount(value: Any) -> float:
    """Coerce a raw amount into a finite, non-negative float.

    Text is parsed after stripping whitespace. ``None``, empty strings,
    non-numeric text, NaN and infinities all become ``0.0``; negative numbers
    are taken by magnitude because the sign lives in the transaction type.
    """

    amount = _parse_amount(value)
    if amount is None:
        return 0.0
    return abs(amount)


def to_timestamp(value: Any, tz: tzinfo | str | None = None) -> pd.Timestamp:
    """Parse ``value`` into a naive local :class:`pandas.Timestamp`.

    Aware values are converted to ``tz`` (the system timezone when omitted)
    before the offset is dropped, so calendar-day comparisons use local dates.
    Plain numbers are millisecond epochs in UTC, as JavaScript clients send
    them. Anything unparseable returns ``NaT``.
    """

    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        return pd.NaT
    try:
        if isinstance(value, numbers.Real):
            ts = pd.Timestamp(value, unit="ms", tz="UTC")
        else:
            ts = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return pd.NaT
    if pd.isna(ts):
        return pd.NaT
    if ts.tzinfo is not None:
        if tz is None:
            local = ts.to_pydatetime().astimezone()
            ts = pd.Timestamp(local.replace(tzinfo=None))
        else:
            ts = ts.tz_convert(tz).tz_localize(None)
    return ts


def now_timestamp(now: Any = None, tz: tzinfo | str | None = None) -> pd.Timestamp:
    """Return ``now`` as a naive local timestamp, defaulting to the current time."""

    if now is None:
        return pd.Timestamp(datetime.now())
    reference = to_timestamp(now, tz)
    if pd.isna(reference):
        raise ValueError(f"Invalid reference time: {now!r}")
    return reference


def _text(value: Any) -> str:
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return ""
    return str(value)


def normalize_transactions(
    transactions: Iterable[Mapping[str, Any]] | pd.DataFrame,
    *,
    tz: tzinfo | str | None = None,
) -> pd.DataFrame:
    """Return a normalised copy of ``transactions`` ready for aggregation.

    The frame always carries the transaction columns plus ``day`` (local
    midnight) and ``month`` (first of the month). Extra input columns are kept.
    Normalising an already normalised frame returns an equal frame.
    """

    df = utils.ensure_dataframe(transactions)
    for column in TRANSACTION_COLUMNS:
        if column not in df:
            df[column] = None

    parsed = [_parse_amount(value) for value in df["amount"]]
    coerced = sum(1 for value in parsed if value is None)
    if coerced:
        logger.debug("Coerced %d unparseable amounts to 0", coerced)
    df["amount"] = pd.Series(
        [abs(value) if value is not None else 0.0 for value in parsed],
        index=df.index,
        dtype=float,
    )

    df["date"] = pd.to_datetime(
        pd.Series([to_timestamp(value, tz) for value in df["date"]], index=df.index, dtype=object)
    )
    df["type"] = pd.Series(
        [_text(value).strip().lower() for value in df["type"]], index=df.index, dtype=object
    )
    for column in ("id", "category", "description"):
        df[column] = pd.Series([_text(value) for value in df[column]], index=df.index, dtype=object)

    df["day"] = df["date"].dt.normalize()
    df["month"] = df["date"].dt.to_period("M").dt.to_timestamp()
    return df


def suggested_categories(txn_type: TransactionType) -> tuple[str, ...]:
    """Return the category suggestions offered for ``txn_type``."""

    return SUGGESTED_CATEGORIES.get(txn_type, ())
