"""Print the dashboard KPI payload for a CSV ledger or generated sample data."""

from __future__ import annotations

import argparse
import json
from typing import Any

import pandas as pd
from clarity import insights, sources, synth
from clarity.logging_setup import configure_logging


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, (pd.Timestamp,)):
        return obj.strftime("%Y-%m-%d")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serialisable")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--csv", help="Transactions CSV; omit to use generated sample data")
    parser.add_argument("--rows", type=int, default=synth.DEFAULT_SAMPLE_ROWS, help="Generated rows")
    parser.add_argument("--seed", type=int, default=synth.DEFAULT_SEED, help="Generator seed")
    parser.add_argument("--window", type=int, default=insights.DEFAULT_WINDOW_DAYS, help="Trailing days")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    configure_logging(args.log_level)
    if args.csv:
        transactions = sources.CsvTransactionSource(args.csv).fetch_transactions()
    else:
        transactions = synth.generate_sample_transactions(rows=args.rows, seed=args.seed)
    payload = insights.calculate_kpis(transactions, window=args.window)
    print(json.dumps(payload, indent=2, default=_default_serializer))


if __name__ == "__main__":
    main()
