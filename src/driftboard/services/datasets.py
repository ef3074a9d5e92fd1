"""Labeled batch loading."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import List

from driftboard.errors import SchemaMismatch
from driftboard.models.domain import LabeledRecord
from driftboard.services.aggregation import to_naive_utc


TIMESTAMP_COLUMN = "observed_at"
LABEL_COLUMN = "label"


def parse_timestamp(value: str) -> datetime:
    """
    ISO-8601 date or datetime; aware values are converted to naive UTC.
    """
    return to_naive_utc(datetime.fromisoformat(value.strip()))


def load_labeled_records(
    csv_path: str | Path,
    timestamp_column: str = TIMESTAMP_COLUMN,
    label_column: str = LABEL_COLUMN,
) -> List[LabeledRecord]:
    """
    Read a labeled batch: one timestamp column, one label column, and every
    other non-empty column treated as a numeric feature.
    """
    path = Path(csv_path)
    records: List[LabeledRecord] = []
    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        header = reader.fieldnames or []
        for col in (timestamp_column, label_column):
            if col not in header:
                raise SchemaMismatch(f"{path.name} has no {col!r} column (found {header})")

        for line_no, row in enumerate(reader, start=2):
            raw_ts = row[timestamp_column]
            truth = row[label_column]
            # short rows leave trailing columns as None
            if raw_ts is None or raw_ts.strip() == "":
                raise SchemaMismatch(f"{path.name}:{line_no}: missing {timestamp_column!r}")
            if truth is None or truth.strip() == "":
                raise SchemaMismatch(f"{path.name}:{line_no}: missing {label_column!r}")
            try:
                observed_at = parse_timestamp(raw_ts)
            except ValueError as e:
                raise SchemaMismatch(f"{path.name}:{line_no}: bad timestamp {raw_ts!r}") from e

            features = {}
            for name, raw in row.items():
                if name is None or name in (timestamp_column, label_column):
                    continue
                if raw is None or raw.strip() == "":
                    continue
                try:
                    features[name] = float(raw)
                except ValueError as e:
                    raise SchemaMismatch(f"{path.name}:{line_no}: feature {name!r} is not numeric: {raw!r}") from e

            records.append(
                LabeledRecord(
                    observed_at=observed_at,
                    truth=truth.strip(),
                    features=features,
                )
            )
    return records
