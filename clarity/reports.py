"""Monthly report grouping and CSV export for Clarity."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterable, Literal, Mapping, TypedDict

import pandas as pd

from . import features, utils
from .logging_setup import get_logger

logger = get_logger(__name__)

CSV_HEADER = ["ID", "Date", "Type", "Category", "Amount", "Description"]

# Display-only estimate; the exported file size is never measured.
APPROX_MB_PER_TRANSACTION = 0.05


class MonthlyReportGroup(TypedDict):
    month_label: str
    month: str
    transactions: list[dict[str, Any]]
    count: int
    approximate_size_mb: float
    size_label: str
    status: Literal["Ready"]


Transactions = Iterable[Mapping[str, Any]] | pd.DataFrame


def approximate_size_mb(count: int) -> float:
    """Approximate report size in MB for ``count`` transactions."""

    return round(count * APPROX_MB_PER_TRANSACTION, 2)


def monthly_reports(transactions: Transactions) -> list[MonthlyReportGroup]:
    """Group transactions by calendar month, newest month first.

    Undated transactions belong to no month and are left out.
    """

    df = features.normalize_transactions(transactions)
    dated = df.dropna(subset=["date"])
    if dated.empty:
        return []

    groups: list[MonthlyReportGroup] = []
    for month, bucket in dated.groupby("month", sort=True):
        bucket = bucket.sort_values("date", ascending=False, kind="stable")
        records = bucket[features.TRANSACTION_COLUMNS].to_dict("records")
        size = approximate_size_mb(len(records))
        groups.append(
            {
                "month_label": month.strftime("%B %Y"),
                "month": month.strftime("%Y-%m"),
                "transactions": records,
                "count": len(records),
                "approximate_size_mb": size,
                "size_label": f"{size:.2f} MB",
                "status": "Ready",
            }
        )
    groups.reverse()
    return groups


def _iso_date(value: Any) -> str:
    return "" if pd.isna(value) else value.strftime("%Y-%m-%d")


def export_rows(transactions: Transactions) -> pd.DataFrame:
    """Return the export table with one row per transaction, all fields as text."""

    df = features.normalize_transactions(transactions)
    return pd.DataFrame(
        {
            "ID": [str(value) for value in df["id"]],
            "Date": [_iso_date(value) for value in df["date"]],
            "Type": [str(value) for value in df["type"]],
            "Category": [str(value) for value in df["category"]],
            "Amount": [utils.format_amount(value) for value in df["amount"]],
            "Description": [str(value) for value in df["description"]],
        },
        columns=CSV_HEADER,
    )


def export_csv(transactions: Transactions) -> str:
    """Serialise transactions as comma-separated text.

    Rows are joined with ``\\n`` and the document has no trailing newline.
    Fields holding a comma, a double quote or a line break are wrapped in
    quotes with inner quotes doubled, so any standard CSV reader recovers
    the original text.
    """

    text = export_rows(transactions).to_csv(index=False, lineterminator="\n")
    return text.removesuffix("\n")


def report_filename(month_label: str) -> str:
    """File name offered for a month's report, e.g. ``clarity_report_October_2023.csv``."""

    slug = re.sub(r"\s+", "_", month_label.strip())
    return f"clarity_report_{slug}.csv"


def write_reports(transactions: Transactions, directory: str | Path) -> list[Path]:
    """Write one CSV per monthly group into ``directory`` and return the paths."""

    output = Path(directory)
    output.mkdir(parents=True, exist_ok=True)

    paths: list[Path] = []
    for group in monthly_reports(transactions):
        path = output / report_filename(group["month_label"])
        path.write_text(export_csv(group["transactions"]), encoding="utf-8", newline="")
        logger.info("Wrote %s (%d transactions)", path, group["count"])
        paths.append(path)
    return paths
