#!/usr/bin/env python3
"""Sample dataset generator for the stream loader.

Writes a delimited data file (no header) plus a matching properties file so
that a run can be tried end to end in mock mode:

    python scripts/gen_sample_data.py data/sample.csv --rows 10000 --cols 8
    DISABLE_INGEST_CONNECT=1 stream-loader data/sample.properties data/sample.csv

A fraction of lines can be generated with a missing field to exercise the
skip path.
"""
from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

CATEGORIES = ["Electronics", "Clothing", "Books", "Food", "Sports", "Home"]


def column_names(cols: int) -> list[str]:
    names = ["id", "name", "category", "amount", "quantity", "active"]
    if cols <= len(names):
        return names[:cols]
    return names + [f"value_{i}" for i in range(len(names), cols)]


def generate_line(index: int, columns: list[str], rng: random.Random) -> list[str]:
    values: list[str] = []
    for col in columns:
        if col == "id":
            values.append(str(index + 1))
        elif col == "name":
            values.append(f"Item_{rng.randint(1000, 9999)}_{chr(65 + index % 26)}")
        elif col == "category":
            values.append(rng.choice(CATEGORIES))
        elif col == "amount":
            values.append(f"{rng.uniform(0.01, 9999.99):.2f}")
        elif col == "quantity":
            values.append(str(rng.randint(1, 1000)))
        elif col == "active":
            values.append(rng.choice(["true", "false"]))
        else:
            values.append(f"{rng.uniform(0, 10000):.2f}")
    return values


def write_dataset(
    output: Path,
    rows: int,
    cols: int,
    *,
    delimiter: str = ",",
    bad_ratio: float = 0.0,
    seed: int = 42,
) -> tuple[int, int]:
    """Write ``rows`` lines to ``output``. Returns (good, bad) line counts."""
    rng = random.Random(seed)
    columns = column_names(cols)
    output.parent.mkdir(parents=True, exist_ok=True)

    good = bad = 0
    with output.open("w", encoding="utf-8", newline="\n") as f:
        for i in range(rows):
            values = generate_line(i, columns, rng)
            if bad_ratio and len(values) > 1 and rng.random() < bad_ratio:
                values = values[:-1]
                bad += 1
            else:
                good += 1
            f.write(delimiter.join(values) + "\n")

    props = output.with_suffix(".properties")
    props.write_text(
        "\n".join(
            [
                f"columns={','.join(columns)}",
                f"delimiter={delimiter}",
                "debug=false",
                "channel_name=SAMPLE_CHANNEL",
                "database=SAMPLE_DB",
                "schema=PUBLIC",
                f"table={output.stem.upper()}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return good, bad


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic delimited dataset and properties file",
    )
    parser.add_argument("output", type=Path, help="Output data file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of lines (default: 50,000)")
    parser.add_argument("--cols", type=int, default=6, help="Number of columns (default: 6)")
    parser.add_argument("--delimiter", default=",", help="Field delimiter (default: ',')")
    parser.add_argument(
        "--bad-ratio", type=float, default=0.0,
        help="Fraction of lines written with a missing field (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.cols <= 0:
        print("Error: --cols must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.bad_ratio < 1.0:
        print("Error: --bad-ratio must be in [0, 1)", file=sys.stderr)
        return 1

    good, bad = write_dataset(
        args.output, args.rows, args.cols,
        delimiter=args.delimiter, bad_ratio=args.bad_ratio, seed=args.seed,
    )
    print(f"Created data file: {args.output}")
    print(f"  Lines: {args.rows:,} (well-formed {good:,}, short {bad:,})")
    print(f"  Columns: {args.cols}")
    print(f"Created properties: {args.output.with_suffix('.properties')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
