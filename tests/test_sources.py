"""Tests for the demo and CSV transaction sources."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from clarity import sources
from clarity.config import Settings


def test_demo_source_starts_with_demo_ledger() -> None:
    source = sources.DemoTransactionSource()
    df = source.fetch_transactions()

    assert list(df["category"]) == ["Salary", "Groceries", "Utilities"]
    assert list(df["amount"]) == [2500.0, 45.0, 120.0]
    assert df["date"].is_monotonic_decreasing


def test_demo_source_add_assigns_id_and_normalises() -> None:
    source = sources.DemoTransactionSource([])
    created = source.add_transaction(
        {"type": "Expense", "amount": "12.50", "category": "Food", "description": "Lunch", "date": "2030-01-01"}
    )

    assert created["id"]
    assert created["type"] == "expense"
    assert created["amount"] == 12.5
    df = source.fetch_transactions()
    assert list(df["id"]) == [created["id"]]


def test_add_transaction_rejects_unknown_type() -> None:
    source = sources.DemoTransactionSource([])
    with pytest.raises(ValueError):
        source.add_transaction({"type": "transfer", "amount": 1})


def test_add_transaction_defaults_date_to_now() -> None:
    source = sources.DemoTransactionSource([])
    created = source.add_transaction({"type": "income", "amount": 5})

    assert abs(pd.Timestamp.now() - created["date"]) < pd.Timedelta(minutes=1)


def test_csv_source_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "transactions.csv"
    source = sources.CsvTransactionSource(path)

    assert source.fetch_transactions().empty
    assert path.exists()

    source.add_transaction(
        {"type": "income", "amount": 500, "category": "Salary", "description": "Pay", "date": "2024-01-01"}
    )
    source.add_transaction(
        {"type": "expense", "amount": "42", "category": "Food", "description": 'Dinner, "fancy"', "date": "2024-01-02T19:30:00"}
    )
    df = source.fetch_transactions()

    assert list(df["category"]) == ["Food", "Salary"]
    assert list(df["amount"]) == [42.0, 500.0]
    assert df.loc[0, "description"] == 'Dinner, "fancy"'
    assert df.loc[0, "date"] == pd.Timestamp(2024, 1, 2, 19, 30)
    assert df["id"].str.len().gt(0).all()


def test_csv_source_normalises_text_amounts(tmp_path: Path) -> None:
    path = tmp_path / "transactions.csv"
    path.write_text(
        "id,amount,category,description,date,type\n"
        "1,abc,Food,,2024-01-01,expense\n"
        "2, 19.99 ,Food,,2024-01-02,expense\n"
        "3,,Gift,,2024-01-03,income\n",
        encoding="utf-8",
    )
    df = sources.CsvTransactionSource(path).fetch_transactions()

    assert list(df["id"]) == ["3", "2", "1"]
    assert list(df["amount"]) == [0.0, 19.99, 0.0]


def test_make_source_follows_demo_flag(tmp_path: Path) -> None:
    assert isinstance(sources.make_source(Settings(demo_mode=True)), sources.DemoTransactionSource)

    csv_source = sources.make_source(Settings(data_path=tmp_path / "tx.csv"))
    assert isinstance(csv_source, sources.CsvTransactionSource)
    assert csv_source.path == tmp_path / "tx.csv"


def test_demo_source_delete_transaction() -> None:
    source = sources.DemoTransactionSource()

    assert source.delete_transaction("2")
    assert list(source.fetch_transactions()["id"]) == ["1", "3"]
    assert not source.delete_transaction("2")


def test_csv_source_delete_transaction(tmp_path: Path) -> None:
    source = sources.CsvTransactionSource(tmp_path / "transactions.csv")
    kept = source.add_transaction({"type": "income", "amount": 500, "category": "Salary", "date": "2024-01-01"})
    dropped = source.add_transaction({"type": "expense", "amount": 9, "category": "Food", "date": "2024-01-02"})

    assert source.delete_transaction(dropped["id"])
    assert not source.delete_transaction("missing")
    df = source.fetch_transactions()
    assert list(df["id"]) == [kept["id"]]
    assert list(df["amount"]) == [500.0]
