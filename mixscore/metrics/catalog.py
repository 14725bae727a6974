"""Canonical metrics scored against a genre profile."""
from __future__ import annotations
from dataclasses import dataclass

from mixscore.types import Category


@dataclass(frozen=True)
class MetricSpec:
    metric: str
    category: Category
    label: str
    intra_weight: float
    sources: tuple[str, ...]
    ceiling: bool = False


# Source order is the precedence used when several redundant signals are present.
METRIC_CATALOG: tuple[MetricSpec, ...] = (
    MetricSpec("loudness", Category.LOUDNESS, "Integrated loudness", 1.0,
               ("lufs_integrated", "rms_db")),
    MetricSpec("true_peak", Category.PEAK, "True peak", 1.0,
               ("true_peak_dbtp", "sample_peak_dbfs"), ceiling=True),
    MetricSpec("dynamic_range", Category.DYNAMICS, "Dynamic range", 0.7,
               ("dr_stat", "dynamic_range")),
    MetricSpec("lra", Category.DYNAMICS, "Loudness range", 0.3, ("lra",)),
    MetricSpec("stereo_correlation", Category.STEREO, "Stereo correlation", 0.6,
               ("stereo_correlation",)),
    MetricSpec("stereo_width", Category.STEREO, "Stereo width", 0.4, ("stereo_width",)),
    MetricSpec("clipping", Category.ARTIFACTS, "Clipping", 0.7, ("clipping_pct",), ceiling=True),
    MetricSpec("dc_offset", Category.ARTIFACTS, "DC offset", 0.3,
               ("dc_offset_lr", "dc_offset"), ceiling=True),
)

METRICS_BY_ID: dict[str, MetricSpec] = {m.metric: m for m in METRIC_CATALOG}

SOURCE_UNITS = {
    "lufs_integrated": "LUFS",
    "rms_db": "dBFS",
    "true_peak_dbtp": "dBTP",
    "sample_peak_dbfs": "dBFS",
    "dr_stat": "dB",
    "dynamic_range": "dB",
    "lra": "LU",
    "stereo_correlation": "",
    "stereo_width": "",
    "clipping_pct": "%",
    "dc_offset_lr": "",
    "dc_offset": "",
}

# Profile documents name metrics the way the upstream reference files do.
METRIC_ALIASES = {
    "lufs": "loudness",
    "lufs_integrated": "loudness",
    "truePeak": "true_peak",
    "true_peak_dbtp": "true_peak",
    "dr": "dynamic_range",
    "dr_stat": "dynamic_range",
    "stereoCorrelation": "stereo_correlation",
    "stereoWidth": "stereo_width",
    "clipping_pct": "clipping",
    "clippingPct": "clipping",
    "dcOffset": "dc_offset",
}


def canonical_metric_id(name: str) -> str:
    """Map a profile or analyzer metric name onto its catalog id."""
    return METRIC_ALIASES.get(name, name)
