"""Time bucketing and per-bucket performance metrics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from driftboard.errors import EmptyBucket
from driftboard.models.domain import MetricRow, ScoredRecord


Pairs = Sequence[Tuple[str, str]]


def _truncate_hour(ts: datetime) -> datetime:
    return ts.replace(minute=0, second=0, microsecond=0)


def _truncate_day(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def _truncate_week(ts: datetime) -> datetime:
    # ISO weeks start on Monday
    day = _truncate_day(ts)
    return day - timedelta(days=day.weekday())


def _truncate_month(ts: datetime) -> datetime:
    return _truncate_day(ts).replace(day=1)


PERIODS: Dict[str, Callable[[datetime], datetime]] = {
    "hour": _truncate_hour,
    "day": _truncate_day,
    "week": _truncate_week,
    "month": _truncate_month,
}


def to_naive_utc(ts: datetime) -> datetime:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def truncate(ts: datetime, period: str) -> datetime:
    """Start of the period containing `ts`, as a naive-UTC datetime."""
    try:
        fn = PERIODS[period]
    except KeyError:
        raise ValueError(f"Unknown period {period!r}; choose from {sorted(PERIODS)}") from None
    return fn(to_naive_utc(ts))


def _safe_div(num: float, denom: float) -> float:
    return num / denom if denom != 0 else 0.0


def _require(pairs: Pairs, metric: str) -> None:
    if len(pairs) == 0:
        raise EmptyBucket(f"Cannot compute {metric} over an empty bucket")


def accuracy(pairs: Pairs) -> float:
    _require(pairs, "accuracy")
    correct = sum(1 for truth, pred in pairs if truth == pred)
    return correct / len(pairs)


def _per_label_counts(pairs: Pairs) -> Dict[str, Tuple[int, int, int]]:
    """label -> (tp, fp, fn) over every label seen as truth or prediction."""
    labels = sorted({t for t, _ in pairs} | {p for _, p in pairs})
    counts = {}
    for label in labels:
        tp = sum(1 for t, p in pairs if t == label and p == label)
        fp = sum(1 for t, p in pairs if t != label and p == label)
        fn = sum(1 for t, p in pairs if t == label and p != label)
        counts[label] = (tp, fp, fn)
    return counts


def precision(pairs: Pairs) -> float:
    """Macro-averaged precision."""
    _require(pairs, "precision")
    counts = _per_label_counts(pairs)
    return sum(_safe_div(tp, tp + fp) for tp, fp, _ in counts.values()) / len(counts)


def recall(pairs: Pairs) -> float:
    """Macro-averaged recall."""
    _require(pairs, "recall")
    counts = _per_label_counts(pairs)
    return sum(_safe_div(tp, tp + fn) for tp, _, fn in counts.values()) / len(counts)


def f1(pairs: Pairs) -> float:
    """Macro-averaged F1."""
    _require(pairs, "f1")
    counts = _per_label_counts(pairs)
    scores = []
    for tp, fp, fn in counts.values():
        p = _safe_div(tp, tp + fp)
        r = _safe_div(tp, tp + fn)
        scores.append(_safe_div(2 * p * r, p + r))
    return sum(scores) / len(scores)


METRICS: Dict[str, Callable[[Pairs], float]] = {
    "accuracy": accuracy,
    "precision": precision,
    "recall": recall,
    "f1": f1,
}


def compute_metric_rows(
    records: Iterable[ScoredRecord],
    period: str,
    metrics: Sequence[str] = ("accuracy",),
) -> List[MetricRow]:
    """
    One MetricRow per (bucket, metric), ordered by bucket then metric name.

    Buckets only exist for timestamps that occur in `records`, so the output
    is sparse: no zero-count rows are ever emitted.
    """
    unknown = [m for m in metrics if m not in METRICS]
    if unknown:
        raise ValueError(f"Unknown metrics {unknown}; choose from {sorted(METRICS)}")

    groups: Dict[datetime, List[Tuple[str, str]]] = {}
    for rec in records:
        bucket = truncate(rec.observed_at, period)
        groups.setdefault(bucket, []).append((rec.truth, rec.prediction))

    rows: List[MetricRow] = []
    for bucket in sorted(groups):
        pairs = groups[bucket]
        for name in sorted(set(metrics)):
            rows.append(
                MetricRow(
                    bucket=bucket,
                    metric=name,
                    value=float(METRICS[name](pairs)),
                    count=len(pairs),
                )
            )
    return rows
