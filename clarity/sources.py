"""Transaction sources: where the analytics engine gets its records from.

Two sources are provided, an in-memory demo ledger and a CSV file. Which one
is used is decided once, from :class:`clarity.config.Settings`, by
:func:`make_source`.
"""

from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol

import pandas as pd
from filelock import FileLock

from . import features, synth
from .config import Settings
from .features import NewTransaction, Transaction
from .logging_setup import get_logger
from .pagination import sort_newest_first

logger = get_logger(__name__)

CSV_COLUMNS = features.TRANSACTION_COLUMNS
LOCK_TIMEOUT_SECONDS = 5


class TransactionSource(Protocol):
    def fetch_transactions(self) -> pd.DataFrame: ...

    def add_transaction(self, transaction: NewTransaction) -> Transaction: ...

    def delete_transaction(self, txn_id: str) -> bool: ...


def _prepare_new(transaction: Mapping[str, Any], txn_id: str) -> Transaction:
    txn_type = str(transaction.get("type", "")).strip().lower()
    if txn_type not in features.TRANSACTION_TYPES:
        raise ValueError(
            f"type must be one of {features.TRANSACTION_TYPES}, got {transaction.get('type')!r}"
        )
    date = features.to_timestamp(transaction.get("date"))
    if pd.isna(date):
        date = pd.Timestamp(datetime.now())
    return {
        "id": txn_id,
        "amount": features.to_amount(transaction.get("amount")),
        "category": str(transaction.get("category") or ""),
        "description": str(transaction.get("description") or ""),
        "date": date,
        "type": txn_type,
    }


def _fetched(records: Iterable[Mapping[str, Any]] | pd.DataFrame) -> pd.DataFrame:
    df = sort_newest_first(features.normalize_transactions(records))
    return df.reset_index(drop=True)


class DemoTransactionSource:
    """In-memory ledger used when demo mode is switched on."""

    def __init__(self, transactions: Iterable[Mapping[str, Any]] | pd.DataFrame | None = None) -> None:
        if transactions is None:
            records = synth.demo_transactions()
        elif isinstance(transactions, pd.DataFrame):
            records = transactions.to_dict("records")
        else:
            records = [dict(record) for record in transactions]
        self._records: list[dict[str, Any]] = records

    def fetch_transactions(self) -> pd.DataFrame:
        return _fetched(list(self._records))

    def add_transaction(self, transaction: NewTransaction) -> Transaction:
        record = _prepare_new(transaction, uuid.uuid4().hex[:9])
        self._records.insert(0, dict(record))
        logger.info("Added demo %s transaction %s", record["type"], record["id"])
        return record

    def delete_transaction(self, txn_id: str) -> bool:
        kept = [record for record in self._records if str(record.get("id")) != str(txn_id)]
        removed = len(self._records) - len(kept)
        self._records[:] = kept
        if removed:
            logger.info("Deleted demo transaction %s", txn_id)
        return bool(removed)


class CsvTransactionSource:
    """Transactions stored as rows of a CSV file, one file per user."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = FileLock(f"{self.path}.lock", timeout=LOCK_TIMEOUT_SECONDS)

    def _ensure_file(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            pd.DataFrame(columns=CSV_COLUMNS).to_csv(self.path, index=False)

    def fetch_transactions(self) -> pd.DataFrame:
        self._ensure_file()
        # Everything is read as text; amounts are coerced by the normaliser.
        raw = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        logger.info("Fetched %d transactions from %s", len(raw), self.path)
        return _fetched(raw)

    def add_transaction(self, transaction: NewTransaction) -> Transaction:
        record = _prepare_new(transaction, str(uuid.uuid4()))
        row = dict(record)
        row["date"] = record["date"].isoformat()
        with self._lock:
            self._ensure_file()
            pd.DataFrame([row], columns=CSV_COLUMNS).to_csv(
                self.path,
                mode="a",
                index=False,
                header=os.path.getsize(self.path) == 0,
            )
        logger.info("Added %s transaction %s to %s", record["type"], record["id"], self.path)
        return record

    def delete_transaction(self, txn_id: str) -> bool:
        """Remove the row with id ``txn_id``; returns whether one was found."""

        with self._lock:
            self._ensure_file()
            raw = pd.read_csv(self.path, dtype=str, keep_default_na=False)
            kept = raw.loc[raw["id"] != str(txn_id)]
            if len(kept) == len(raw):
                return False
            kept.to_csv(self.path, index=False)
        logger.info("Deleted transaction %s from %s", txn_id, self.path)
        return True


def make_source(settings: Settings) -> TransactionSource:
    """Build the source selected by ``settings``."""

    if settings.demo_mode:
        logger.info("Demo mode enabled; using in-memory transactions")
        return DemoTransactionSource()
    return CsvTransactionSource(settings.data_path)
