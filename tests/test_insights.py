"""Tests for the summary, activity, category and savings aggregations."""

from __future__ import annotations

import pandas as pd
import pytest
from clarity import insights, synth


def _scenario() -> list[dict[str, object]]:
    return [
        {"id": "1", "amount": 500, "type": "income", "category": "Salary", "date": "2024-01-01"},
        {"id": "2", "amount": 100, "type": "expense", "category": "Food", "date": "2024-01-01"},
        {"id": "3", "amount": 50, "type": "expense", "category": "Food", "date": "2024-01-02"},
    ]


def test_concrete_scenario() -> None:
    txns = _scenario()

    assert insights.summarize(txns) == {"balance": 350.0, "income": 500.0, "expense": 150.0}
    assert insights.category_breakdown(txns, "expense") == [
        {"name": "Food", "total": 150.0, "share": 1.0}
    ]
    assert insights.savings_rate(txns, now="2024-01-20") == 70


def test_empty_collection_yields_identity_results() -> None:
    assert insights.summarize([]) == {"balance": 0.0, "income": 0.0, "expense": 0.0}
    assert insights.category_breakdown([], "expense") == []
    assert insights.category_breakdown([], "income") == []
    assert insights.savings_rate([], now="2024-01-20") == 0

    buckets = insights.daily_activity([], now="2024-01-20")
    assert len(buckets) == 7
    assert all(b["income"] == 0 and b["expense"] == 0 for b in buckets)


def test_summary_ignores_unparseable_amounts_and_unknown_types() -> None:
    txns = [
        {"amount": "abc", "type": "income"},
        {"amount": "20", "type": "expense"},
        {"amount": 999, "type": "transfer"},
    ]
    summary = insights.summarize(txns)

    assert summary == {"balance": -20.0, "income": 0.0, "expense": 20.0}


def test_daily_activity_buckets_by_calendar_day() -> None:
    now = pd.Timestamp("2024-01-07 15:00")
    txns = [
        {"amount": 10, "type": "income", "date": "2024-01-01 00:00:00"},
        {"amount": 99, "type": "income", "date": "2023-12-31 23:59:59"},
        {"amount": 4, "type": "expense", "date": "2024-01-07 23:59:00"},
        {"amount": 6, "type": "expense", "date": "2024-01-07 00:00:00"},
        {"amount": 77, "type": "expense", "date": "2024-01-08 00:00:01"},
        {"amount": 3, "type": "expense", "date": None},
    ]
    buckets = insights.daily_activity(txns, now=now)

    assert [b["date"] for b in buckets] == [f"2024-01-0{day}" for day in range(1, 8)]
    assert buckets[0]["label"] == "Mon"
    assert buckets[0] == {"label": "Mon", "date": "2024-01-01", "income": 10.0, "expense": 0.0}
    assert buckets[-1]["expense"] == 10.0
    assert sum(b["income"] for b in buckets) == 10.0
    assert sum(b["expense"] for b in buckets) == 10.0


@pytest.mark.parametrize("window", [1, 3, 30])
def test_daily_activity_length_matches_window(window: int) -> None:
    df = synth.generate_sample_transactions(rows=40, seed=3, end=pd.Timestamp("2024-05-31"))
    buckets = insights.daily_activity(df, now="2024-05-31", window=window)

    assert len(buckets) == window
    assert buckets[-1]["date"] == "2024-05-31"


def test_daily_activity_totals_match_in_window_sums() -> None:
    df = synth.generate_sample_transactions(rows=120, seed=11, end=pd.Timestamp("2024-05-31"))
    buckets = insights.daily_activity(df, now="2024-05-31 08:00", window=7)

    dates = pd.to_datetime(df["date"])
    in_window = df.loc[(dates >= "2024-05-25") & (dates < "2024-06-01")]
    expected = insights.summarize(in_window)
    assert sum(b["income"] for b in buckets) == pytest.approx(expected["income"])
    assert sum(b["expense"] for b in buckets) == pytest.approx(expected["expense"])


def test_daily_activity_rejects_non_positive_window() -> None:
    with pytest.raises(ValueError):
        insights.daily_activity([], now="2024-01-01", window=0)


def test_category_breakdown_sorted_with_stable_ties() -> None:
    txns = [
        {"amount": 30, "type": "expense", "category": "Travel"},
        {"amount": 50, "type": "expense", "category": "Food"},
        {"amount": 30, "type": "expense", "category": "food"},
        {"amount": 10, "type": "expense", "category": "Travel"},
        {"amount": 900, "type": "income", "category": "Salary"},
    ]
    breakdown = insights.category_breakdown(txns, "expense")

    assert [(b["name"], b["total"]) for b in breakdown] == [
        ("Food", 50.0),
        ("Travel", 40.0),
        ("food", 30.0),
    ]
    assert sum(b["share"] for b in breakdown) == pytest.approx(1.0)
    assert [b["name"] for b in insights.category_breakdown(txns, "income")] == ["Salary"]


def test_category_breakdown_ties_keep_first_seen_order() -> None:
    txns = [
        {"amount": 20, "type": "expense", "category": "B"},
        {"amount": 20, "type": "expense", "category": "A"},
        {"amount": 20, "type": "expense", "category": "C"},
    ]
    assert [b["name"] for b in insights.category_breakdown(txns)] == ["B", "A", "C"]


def test_category_breakdown_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        insights.category_breakdown([], "transfer")  # type: ignore[arg-type]


def test_savings_rate_policies() -> None:
    overspent = [
        {"amount": 100, "type": "income", "date": "2024-02-03"},
        {"amount": 250, "type": "expense", "date": "2024-02-10"},
    ]
    assert insights.savings_rate(overspent, now="2024-02-28") == 0

    no_income = [{"amount": 40, "type": "expense", "date": "2024-02-10"}]
    assert insights.savings_rate(no_income, now="2024-02-28") == 0

    other_month = [
        {"amount": 100, "type": "income", "date": "2024-01-31 23:00"},
        {"amount": 25, "type": "expense", "date": "2024-02-01"},
        {"amount": 100, "type": "income", "date": "2023-02-15"},
    ]
    assert insights.savings_rate(other_month, now="2024-02-15") == 0

    half = [
        {"amount": 8, "type": "income", "date": "2024-02-01"},
        {"amount": 7, "type": "expense", "date": "2024-02-02"},
    ]
    assert insights.savings_rate(half, now="2024-02-15") == 13

    nothing_spent = [{"amount": 10, "type": "income", "date": "2024-02-01"}]
    assert insights.savings_rate(nothing_spent, now="2024-02-15") == 100


def test_savings_health_tiers() -> None:
    assert insights.savings_health(45)["status"] == "healthy"
    assert insights.savings_health(20)["status"] == "saving"
    assert insights.savings_health(1)["status"] == "saving"
    assert insights.savings_health(0)["status"] == "overspending"
    assert "more than you earn" in insights.savings_health(0)["message"]


def test_properties_hold_on_generated_ledgers() -> None:
    for seed in range(5):
        df = synth.generate_sample_transactions(rows=80, seed=seed, end=pd.Timestamp("2024-03-20"))

        summary = insights.summarize(df)
        assert summary["balance"] == summary["income"] - summary["expense"]

        for txn_type in ("income", "expense"):
            totals = [b["total"] for b in insights.category_breakdown(df, txn_type)]
            assert all(a >= b for a, b in zip(totals, totals[1:]))

        assert 0 <= insights.savings_rate(df, now="2024-03-20") <= 100


def test_calculate_kpis_payload() -> None:
    payload = insights.calculate_kpis(_scenario(), now="2024-01-03", window=5)

    assert payload["summary"]["balance"] == 350.0
    assert len(payload["daily_activity"]) == 5
    assert payload["daily_activity"][-3]["income"] == 500.0
    assert set(payload["categories"]) == {"income", "expense"}
    assert payload["categories"]["income"][0]["name"] == "Salary"
    assert payload["savings_rate"] == 70
    assert payload["savings_health"]["status"] == "healthy"
