"""Demo and synthetic transaction data for Clarity.

The generator produces deterministic income/expense ledgers ending at a given
day: a monthly salary, scheduled bills and Poisson-distributed everyday spend.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any
from uuid import UUID

import numpy as np
import pandas as pd

from . import features

DEFAULT_DATASET_ROWS = 500
DEFAULT_SAMPLE_ROWS = 60
DEFAULT_SEED = 7


@dataclass(frozen=True)
class CategoryProfile:
    """Static metadata for a category of generated transactions."""

    category: str
    descriptions: tuple[str, ...]
    amount_range: tuple[float, float]
    txn_type: features.TransactionType = "expense"


def _profile_catalogue() -> dict[str, CategoryProfile]:
    profiles = [
        CategoryProfile("Salary", ("Monthly Salary",), (2400.0, 2600.0), "income"),
        CategoryProfile("Freelance", ("Design contract", "Consulting invoice"), (150.0, 650.0), "income"),
        CategoryProfile("Refunds", ("Store refund", "Airline refund"), (15.0, 120.0), "income"),
        CategoryProfile("Utilities", ("Electric Bill", "Water Bill", "Internet"), (40.0, 140.0)),
        CategoryProfile("Groceries", ("Weekly supply", "Corner shop", "Farmers market"), (12.0, 95.0)),
        CategoryProfile("Food", ("Lunch", "Coffee", "Takeaway"), (4.0, 35.0)),
        CategoryProfile("Transport", ("Metro card", "Taxi", "Fuel"), (3.0, 60.0)),
        CategoryProfile("Entertainment", ("Cinema", "Streaming", "Concert"), (8.0, 80.0)),
        CategoryProfile("Shopping", ("Clothes", "Books", "Electronics"), (10.0, 220.0)),
        CategoryProfile("Health", ("Pharmacy", "Gym membership"), (9.0, 70.0)),
    ]
    return {profile.category: profile for profile in profiles}


CATALOGUE = _profile_catalogue()

DAILY_SPEND_CATEGORIES = ("Groceries", "Food", "Transport", "Entertainment", "Shopping", "Health")
OCCASIONAL_INCOME_CATEGORIES = ("Freelance", "Refunds")


def _uuid4_from_rng(rng: np.random.Generator) -> str:
    raw = bytearray(rng.bytes(16))
    raw[6] = (raw[6] & 0x0F) | 0x40  # version 4
    raw[8] = (raw[8] & 0x3F) | 0x80  # variant 10
    return str(UUID(bytes=bytes(raw)))


def _build_transaction(
    profile: CategoryProfile,
    *,
    when: date,
    rng: np.random.Generator,
) -> dict[str, Any]:
    low, high = profile.amount_range
    hour = int(rng.integers(7, 22))
    minute = int(rng.integers(0, 60))
    return {
        "id": _uuid4_from_rng(rng),
        "amount": round(float(rng.uniform(low, high)), 2),
        "category": profile.category,
        "description": str(rng.choice(profile.descriptions)),
        "date": pd.Timestamp(datetime(when.year, when.month, when.day, hour, minute)),
        "type": profile.txn_type,
    }


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - date(year, month, 1)).days


def _generate_month_transactions(
    year: int,
    month: int,
    rng: np.random.Generator,
    *,
    last_day: date,
) -> list[dict[str, Any]]:
    transactions: list[dict[str, Any]] = []
    month_start = date(year, month, 1)
    days = _days_in_month(year, month)

    scheduled = [
        (CATALOGUE["Salary"], month_start),
        (CATALOGUE["Utilities"], month_start + timedelta(days=9)),
        (CATALOGUE["Utilities"], month_start + timedelta(days=14)),
    ]
    for profile, when in scheduled:
        if when <= last_day:
            transactions.append(_build_transaction(profile, when=when, rng=rng))

    for offset in range(days):
        current_day = month_start + timedelta(days=offset)
        if current_day > last_day:
            break
        lam = 1.2 if current_day.weekday() < 5 else 2.0
        for _ in range(int(rng.poisson(lam))):
            profile = CATALOGUE[str(rng.choice(DAILY_SPEND_CATEGORIES))]
            transactions.append(_build_transaction(profile, when=current_day, rng=rng))

    if rng.random() < 0.5:
        when = month_start + timedelta(days=int(rng.integers(0, days)))
        if when <= last_day:
            profile = CATALOGUE[str(rng.choice(OCCASIONAL_INCOME_CATEGORIES))]
            transactions.append(_build_transaction(profile, when=when, rng=rng))

    return transactions


def generate_transactions(
    rows: int = DEFAULT_DATASET_ROWS,
    *,
    seed: int | None = DEFAULT_SEED,
    end: date | datetime | None = None,
) -> pd.DataFrame:
    """Generate the ``rows`` most recent transactions of a ledger ending on ``end``.

    The result is sorted newest first and is identical for the same
    ``rows``, ``seed`` and ``end``.
    """

    if rows <= 0:
        raise ValueError("rows must be positive")

    last_day = pd.Timestamp(end if end is not None else datetime.now()).date()
    rng = np.random.default_rng(seed)

    transactions: list[dict[str, Any]] = []
    year, month = last_day.year, last_day.month
    while len(transactions) < rows:
        transactions.extend(_generate_month_transactions(year, month, rng, last_day=last_day))
        month -= 1
        if month < 1:
            month = 12
            year -= 1

    df = pd.DataFrame(transactions, columns=features.TRANSACTION_COLUMNS)
    df = df.sort_values(["date", "id"], ascending=[False, True], kind="stable")
    return df.head(rows).reset_index(drop=True)


def generate_sample_transactions(
    rows: int = DEFAULT_SAMPLE_ROWS,
    seed: int | None = DEFAULT_SEED,
    end: date | datetime | None = None,
) -> pd.DataFrame:
    """Return a smaller sample for quick visualisation or tests."""

    return generate_transactions(rows=rows, seed=seed, end=end)


def demo_transactions(now: datetime | None = None) -> list[dict[str, Any]]:
    """The three starter records shown in demo mode, dated relative to ``now``."""

    reference = now or datetime.now()
    return [
        {
            "id": "1",
            "amount": 2500,
            "category": "Salary",
            "description": "Monthly Salary",
            "date": reference.isoformat(),
            "type": "income",
        },
        {
            "id": "2",
            "amount": 45,
            "category": "Groceries",
            "description": "Weekly supply",
            "date": (reference - timedelta(days=1)).isoformat(),
            "type": "expense",
        },
        {
            "id": "3",
            "amount": 120,
            "category": "Utilities",
            "description": "Electric Bill",
            "date": (reference - timedelta(days=2)).isoformat(),
            "type": "expense",
        },
    ]


def write_synthetic_csv(
    path: str | Path,
    *,
    rows: int = DEFAULT_DATASET_ROWS,
    seed: int | None = DEFAULT_SEED,
    end: date | datetime | None = None,
) -> Path:
    """Persist a generated ledger in the CSV source layout."""

    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    df = generate_transactions(rows=rows, seed=seed, end=end)
    df.assign(date=df["date"].dt.strftime("%Y-%m-%dT%H:%M:%S")).to_csv(output, index=False)
    return output
