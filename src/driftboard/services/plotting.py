"""Metric history charts."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from driftboard.models.domain import MetricRow


def _series(rows: Sequence[MetricRow], metrics: Optional[Sequence[str]]) -> Dict[str, List[Tuple]]:
    series: Dict[str, List[Tuple]] = {}
    for r in rows:
        if metrics and r.metric not in metrics:
            continue
        series.setdefault(r.metric, []).append((r.bucket, r.value))
    return series


def plot_metric_history(
    rows: Sequence[MetricRow],
    out_path: Path,
    metrics: Optional[Sequence[str]] = None,
    title: str = "Model performance",
) -> Path:
    """One line per metric, value per bucket. Returns the written path."""
    series = _series(rows, metrics)
    if not series:
        raise ValueError("No metric rows to plot")

    plt.figure(figsize=(8, 4))
    for name in sorted(series):
        points = sorted(series[name], key=lambda p: p[0])
        plt.plot([p[0] for p in points], [p[1] for p in points], marker="o", label=name)
    plt.xlabel("Bucket")
    plt.ylabel("Value")
    plt.title(title)
    plt.legend()
    plt.gcf().autofmt_xdate()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()
    return out_path
