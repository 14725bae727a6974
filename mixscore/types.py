from __future__ import annotations
import math
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from mixscore.errors import ConfigurationError
from mixscore.utils.quantize import q


class Severity(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


class GateClass(str, Enum):
    CRITICAL = "critical"
    HARD = "hard"
    SOFT = "soft"


class ScoringMethod(str, Enum):
    GAUSSIAN = "gaussian"
    HUBER = "huber"


class Category(str, Enum):
    LOUDNESS = "loudness"
    DYNAMICS = "dynamics"
    PEAK = "peak"
    TONAL = "tonal"
    STEREO = "stereo"
    ARTIFACTS = "artifacts"


class Classification(str, Enum):
    REFERENCE_TIER = "ReferenceTier"
    ADVANCED = "Advanced"
    INTERMEDIATE = "Intermediate"
    BASIC = "Basic"
    PROBLEMATIC = "Problematic"


class Direction(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


def finite_or_none(v: Any) -> float | None:
    """Coerce a measurement to float, mapping missing or non-finite values to N/A (None)."""
    if v is None or isinstance(v, bool):
        return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    if math.isnan(x) or math.isinf(x):
        return None
    return x


# Keys emitted by the upstream analyzer, mapped to record fields.
_MEASUREMENT_ALIASES = {
    "lufsIntegrated": "lufs_integrated",
    "lufs": "lufs_integrated",
    "lufs_i": "lufs_integrated",
    "rms": "rms_db",
    "rmsDb": "rms_db",
    "rms_dbfs": "rms_db",
    "truePeakDbtp": "true_peak_dbtp",
    "true_peak": "true_peak_dbtp",
    "samplePeakDbfs": "sample_peak_dbfs",
    "peak_dbfs": "sample_peak_dbfs",
    "drStat": "dr_stat",
    "dynamicRange": "dynamic_range",
    "dr": "dynamic_range",
    "loudnessRange": "lra",
    "stereoCorrelation": "stereo_correlation",
    "stereoWidth": "stereo_width",
    "clippingPct": "clipping_pct",
    "clippingSamples": "clipping_samples",
    "dcOffset": "dc_offset",
    "dcOffsetLeft": "dc_offset_left",
    "dcOffsetRight": "dc_offset_right",
    "thdPercent": "thd_pct",
    "thd_percent": "thd_pct",
}

_BAND_KEYS = ("band_rms_db", "bandEnergies", "band_energies", "bands")


@dataclass(frozen=True)
class MeasurementRecord:
    """Technical measurements of one track. Every value may be N/A (None)."""
    lufs_integrated: float | None = None
    rms_db: float | None = None
    true_peak_dbtp: float | None = None
    sample_peak_dbfs: float | None = None
    dr_stat: float | None = None
    dynamic_range: float | None = None
    lra: float | None = None
    stereo_correlation: float | None = None
    stereo_width: float | None = None
    clipping_pct: float | None = None
    clipping_samples: float | None = None
    dc_offset: float | None = None
    dc_offset_left: float | None = None
    dc_offset_right: float | None = None
    thd_pct: float | None = None
    band_rms_db: Mapping[str, float | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "band_rms_db":
                continue
            object.__setattr__(self, f.name, finite_or_none(getattr(self, f.name)))
        bands = {str(k): finite_or_none(v) for k, v in dict(self.band_rms_db or {}).items()}
        object.__setattr__(self, "band_rms_db", MappingProxyType(bands))

    @classmethod
    def from_dict(cls, j: Mapping[str, Any]) -> "MeasurementRecord":
        """
        Build a record from analyzer output.

        Accepts snake_case field names and the camelCase keys used by the
        analyzer. Band energies may be plain numbers or objects carrying
        an ``rms_db`` entry.
        """
        names = {f.name for f in fields(cls)} - {"band_rms_db"}
        values: dict[str, Any] = {}
        for key, value in j.items():
            name = _MEASUREMENT_ALIASES.get(key, key)
            if name in names and name not in values:
                values[name] = value
        bands: dict[str, Any] = {}
        for key in _BAND_KEYS:
            raw = j.get(key)
            if isinstance(raw, Mapping):
                for band, entry in raw.items():
                    if isinstance(entry, Mapping):
                        entry = entry.get("rms_db")
                    bands.setdefault(str(band), entry)
        return cls(band_rms_db=bands, **values)


@dataclass(frozen=True)
class MetricTarget:
    """Reference target for one metric or band of a genre profile."""
    target: float
    tol_inner: float
    tol_outer: float
    gate_class: GateClass = GateClass.SOFT
    # None defers to the metric catalog default.
    ceiling: bool | None = None

    def __post_init__(self) -> None:
        target = finite_or_none(self.target)
        inner = finite_or_none(self.tol_inner)
        outer = finite_or_none(self.tol_outer)
        if target is None:
            raise ConfigurationError(f"target must be a finite number, got {self.target!r}.")
        if inner is None or inner <= 0:
            raise ConfigurationError(f"tol_inner must be > 0, got {self.tol_inner!r}.")
        if outer is None or outer <= inner:
            raise ConfigurationError(
                f"tol_outer must be greater than tol_inner ({inner:g}), got {self.tol_outer!r}."
            )
        try:
            gate_class = GateClass(self.gate_class)
        except ValueError as exc:
            raise ConfigurationError(
                f"gate class must be critical, hard, or soft, got {self.gate_class!r}."
            ) from exc
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "tol_inner", inner)
        object.__setattr__(self, "tol_outer", outer)
        object.__setattr__(self, "gate_class", gate_class)
        if self.ceiling is not None:
            object.__setattr__(self, "ceiling", bool(self.ceiling))


@dataclass(frozen=True)
class ReferenceProfile:
    """Immutable per-genre targets, tolerances, and category weights."""
    genre: str
    metrics: Mapping[str, MetricTarget]
    bands: Mapping[str, MetricTarget] = field(default_factory=dict)
    category_weights: Mapping[Category, float] = field(default_factory=dict)
    version: str = "1.0"

    def __post_init__(self) -> None:
        # catalog imports this module
        from mixscore.metrics.catalog import METRICS_BY_ID, canonical_metric_id

        errors: list[str] = []
        metrics: dict[str, MetricTarget] = {}
        for name, ref in dict(self.metrics).items():
            metric = canonical_metric_id(name)
            if metric not in METRICS_BY_ID:
                errors.append(f"metrics.{name} is not a known metric.")
            elif metric in metrics:
                errors.append(f"metrics.{name} duplicates metric {metric}.")
            elif not isinstance(ref, MetricTarget):
                errors.append(f"metrics.{name} must be a MetricTarget.")
            else:
                metrics[metric] = ref
        for name, ref in dict(self.bands).items():
            if not isinstance(ref, MetricTarget):
                errors.append(f"bands.{name} must be a MetricTarget.")
        if errors:
            raise ConfigurationError("; ".join(errors))
        object.__setattr__(self, "metrics", MappingProxyType(metrics))
        object.__setattr__(self, "bands", MappingProxyType(dict(self.bands)))
        try:
            weights = {Category(k): v for k, v in dict(self.category_weights).items()}
        except ValueError as exc:
            raise ConfigurationError(f"unknown category in weights: {exc}") from exc
        object.__setattr__(self, "category_weights", MappingProxyType(weights))


@dataclass(frozen=True)
class MetricScore:
    metric: str
    category: Category
    source: str
    value: float
    target: float
    tolerance: float
    deviation: float
    ratio: float
    z_score: float
    severity: Severity
    score: float
    weight: float
    unit: str

    @property
    def direction(self) -> Direction | None:
        """Adjustment that moves the value toward the target, None when on target."""
        if self.deviation > 0:
            return Direction.DECREASE
        if self.deviation < 0:
            return Direction.INCREASE
        return None


@dataclass(frozen=True)
class BandScore:
    band: str
    value: float
    target: float
    tolerance: float
    deviation: float
    ratio: float
    z_score: float
    severity: Severity
    score: float
    weight: float

    @property
    def metric(self) -> str:
        return f"band:{self.band}"

    @property
    def direction(self) -> Direction | None:
        if self.deviation > 0:
            return Direction.DECREASE
        if self.deviation < 0:
            return Direction.INCREASE
        return None


@dataclass(frozen=True)
class SpectralScore:
    score: float
    bands: tuple[BandScore, ...]
    excluded: tuple[str, ...]
    insufficient_data: bool


@dataclass(frozen=True)
class CategoryScore:
    category: Category
    score: float
    weight: float
    metrics: tuple[MetricScore, ...] = ()
    bands: tuple[BandScore, ...] = ()
    insufficient_data: bool = False


@dataclass(frozen=True)
class QualityIssue:
    rule_id: str
    metric: str
    description: str
    value: float
    threshold: float
    cap: float


@dataclass(frozen=True)
class Suggestion:
    metric: str
    category: Category
    theme: str
    severity: Severity
    value: float
    target: float
    deviation: float
    z_score: float
    priority: float
    message: str
    action: str
    direction: Direction
    amount: float
    unit: str
    estimated_gain_pct: float
    dependency_boost: bool = False
    clusters: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class SuggestionSet:
    items: tuple[Suggestion, ...]
    groups: Mapping[str, tuple[Suggestion, ...]]
    dropped: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))


@dataclass(frozen=True)
class ScoringOptions:
    """Per-call switches for the scoring pipeline."""
    scoring_method: ScoringMethod = ScoringMethod.GAUSSIAN
    apply_quality_gates: bool = True
    ux_offset_pct: float = 0.0
    max_suggestions: int = 12
    min_priority: float = 0.1
    group_by_theme: bool = True
    strict_data: bool = False
    quality_gates: dict | None = None

    def __post_init__(self) -> None:
        try:
            method = ScoringMethod(self.scoring_method)
        except ValueError as exc:
            raise ConfigurationError(
                f"scoring_method must be gaussian or huber, got {self.scoring_method!r}."
            ) from exc
        object.__setattr__(self, "scoring_method", method)
        if finite_or_none(self.ux_offset_pct) is None:
            raise ConfigurationError("ux_offset_pct must be a finite number.")
        max_n = self.max_suggestions
        if isinstance(max_n, bool) or not isinstance(max_n, int) or max_n < 0:
            raise ConfigurationError("max_suggestions must be a non-negative integer.")
        if finite_or_none(self.min_priority) is None or self.min_priority < 0:
            raise ConfigurationError("min_priority must be a non-negative number.")


@dataclass(frozen=True)
class ScoreResult:
    score_pct: int
    raw_score_pct: float
    classification: Classification
    genre: str
    scoring_method: ScoringMethod
    categories: tuple[CategoryScore, ...]
    metric_scores: tuple[MetricScore, ...]
    spectral: SpectralScore
    quality_issues: tuple[QualityIssue, ...]
    suggestions: tuple[Suggestion, ...]
    suggestion_groups: Mapping[str, tuple[Suggestion, ...]]
    dropped_suggestions: tuple[str, ...]
    confidence: float
    insufficient_data: bool

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "suggestion_groups", MappingProxyType(dict(self.suggestion_groups))
        )

    @property
    def category_scores(self) -> dict[str, int]:
        """Integer percentage per category that had data to score."""
        return {
            c.category.value: int(q(c.score * 100.0, 1.0))
            for c in self.categories
            if not c.insufficient_data
        }
