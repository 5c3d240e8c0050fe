"""Shared utilities for the Clarity analytics package."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

import pandas as pd


def ensure_dataframe(transactions: Iterable[Mapping] | pd.DataFrame) -> pd.DataFrame:
    """Ensure the input payload is normalised to a :class:`pandas.DataFrame`."""

    if isinstance(transactions, pd.DataFrame):
        return transactions.copy()

    # Object dtype keeps integer ids and other raw values from being upcast to float.
    return pd.DataFrame(list(transactions), dtype=object)


def format_currency(value: float, currency: str = "$") -> str:
    """Return a human-readable currency string."""

    return f"{currency}{value:,.2f}"


def format_amount(value: float) -> str:
    """Return ``value`` as plain decimal text (``500``, ``12.5``, ``0.0001``)."""

    text = format(Decimal(repr(float(value))).normalize(), "f")
    return "0" if text in {"-0", ""} else text
