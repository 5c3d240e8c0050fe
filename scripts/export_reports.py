"""Write one CSV report per calendar month of a transactions ledger.

Output files are named like ``clarity_report_October_2023.csv``. Without
``--csv`` the ledger is generated deterministically from ``--seed``.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from clarity import reports, sources, synth
from clarity.logging_setup import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Export monthly transaction reports")
    parser.add_argument("--csv", type=Path, default=None, help="Transactions CSV to read")
    parser.add_argument("--out", type=Path, default=Path("reports"), help="Output directory")
    parser.add_argument("--rows", type=int, default=synth.DEFAULT_DATASET_ROWS, help="Generated rows")
    parser.add_argument("--seed", type=int, default=synth.DEFAULT_SEED, help="Generator seed")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(args.log_level)
    if args.csv is not None:
        transactions = sources.CsvTransactionSource(args.csv).fetch_transactions()
    else:
        transactions = synth.generate_transactions(rows=args.rows, seed=args.seed)

    paths = reports.write_reports(transactions, args.out)
    print(f"Wrote {len(paths)} report(s) to {args.out}")


if __name__ == "__main__":
    main()
