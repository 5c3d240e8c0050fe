"""Insights and aggregation helpers for Clarity.

All functions accept raw records or an already normalised frame, run them
through :func:`clarity.features.normalize_transactions` and return plain
dict/list payloads ready for charts and tables. None of them raise on bad data.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Literal, Mapping, TypedDict

import pandas as pd

from . import features
from .features import TransactionType

DEFAULT_WINDOW_DAYS = 7

HealthStatus = Literal["healthy", "saving", "overspending"]


class TransactionSummary(TypedDict):
    balance: float
    income: float
    expense: float


class DayBucket(TypedDict):
    label: str
    date: str
    income: float
    expense: float


class CategoryBucket(TypedDict):
    name: str
    total: float
    share: float


class SavingsHealth(TypedDict):
    status: HealthStatus
    message: str


class DashboardPayload(TypedDict):
    summary: TransactionSummary
    daily_activity: list[DayBucket]
    categories: dict[str, list[CategoryBucket]]
    savings_rate: int
    savings_health: SavingsHealth


Transactions = Iterable[Mapping[str, Any]] | pd.DataFrame


def _frame(transactions: Transactions) -> pd.DataFrame:
    return features.normalize_transactions(transactions)


def _type_total(df: pd.DataFrame, txn_type: str) -> float:
    return float(df.loc[df["type"] == txn_type, "amount"].sum())


def summarize(transactions: Transactions) -> TransactionSummary:
    """Reduce transactions into balance, income and expense totals."""

    df = _frame(transactions)
    income = _type_total(df, "income")
    expense = _type_total(df, "expense")
    return {"balance": income - expense, "income": income, "expense": expense}


def daily_activity(
    transactions: Transactions,
    now: Any = None,
    window: int = DEFAULT_WINDOW_DAYS,
) -> list[DayBucket]:
    """Return ``window`` zero-filled day buckets ending on the day of ``now``.

    Buckets run oldest to newest. A transaction lands in the bucket whose local
    calendar date it shares, regardless of time of day.
    """

    if window < 1:
        raise ValueError("window must be at least 1 day")

    df = _frame(transactions)
    reference = features.now_timestamp(now).normalize()
    days = pd.date_range(end=reference, periods=window, freq="D")

    records: list[DayBucket] = []
    for day in days:
        bucket = df.loc[df["day"] == day]
        records.append(
            {
                "label": day.strftime("%a"),
                "date": day.strftime("%Y-%m-%d"),
                "income": _type_total(bucket, "income"),
                "expense": _type_total(bucket, "expense"),
            }
        )
    return records


def category_breakdown(
    transactions: Transactions,
    txn_type: TransactionType = "expense",
) -> list[CategoryBucket]:
    """Rank categories of one transaction type by total amount, largest first.

    Categories are matched exactly (case-sensitive). Equal totals keep the order
    in which the categories first appear.
    """

    if txn_type not in features.TRANSACTION_TYPES:
        raise ValueError(f"txn_type must be one of {features.TRANSACTION_TYPES}, got {txn_type!r}")

    df = _frame(transactions)
    subset = df.loc[df["type"] == txn_type]
    if subset.empty:
        return []

    totals = (
        subset.groupby("category", sort=False)["amount"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    overall = float(totals.sum())
    return [
        {
            "name": str(name),
            "total": float(value),
            "share": float(value / overall) if overall else 0.0,
        }
        for name, value in totals.items()
    ]


def current_month(transactions: Transactions, now: Any = None) -> pd.DataFrame:
    """Return the transactions dated in the calendar month of ``now``."""

    df = _frame(transactions)
    reference = features.now_timestamp(now)
    mask = (df["date"].dt.year == reference.year) & (df["date"].dt.month == reference.month)
    return df.loc[mask].copy()


def savings_rate(transactions: Transactions, now: Any = None) -> int:
    """Percentage of current-month income not spent, clamped to ``[0, 100]``.

    Zero income reports 0 whatever the spending; overspending also reports 0.
    """

    totals = summarize(current_month(transactions, now))
    income = totals["income"]
    if income == 0:
        return 0
    raw = 100.0 * (income - totals["expense"]) / income
    return int(min(100, max(0, math.floor(raw + 0.5))))


def savings_health(rate: int) -> SavingsHealth:
    """Describe a savings rate the way the dashboard presents it."""

    if rate > 20:
        return {
            "status": "healthy",
            "message": "Great job! You're saving a healthy portion of your income.",
        }
    if rate > 0:
        return {
            "status": "saving",
            "message": "You're saving, but try to cut back on discretionary spending.",
        }
    return {
        "status": "overspending",
        "message": "You're spending more than you earn this month.",
    }


def calculate_kpis(
    transactions: Transactions,
    now: Any = None,
    window: int = DEFAULT_WINDOW_DAYS,
) -> DashboardPayload:
    """Compute every dashboard view from one normalised pass over the data."""

    df = _frame(transactions)
    reference = features.now_timestamp(now)
    rate = savings_rate(df, reference)

    return {
        "summary": summarize(df),
        "daily_activity": daily_activity(df, reference, window),
        "categories": {
            txn_type: category_breakdown(df, txn_type) for txn_type in features.TRANSACTION_TYPES
        },
        "savings_rate": rate,
        "savings_health": savings_health(rate),
    }
