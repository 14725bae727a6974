from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mixscore.metrics.catalog import METRICS_BY_ID  # noqa: E402
from mixscore.metrics.dedup import CanonicalSignal  # noqa: E402
from mixscore.scoring.metric_scores import score_signal  # noqa: E402
from mixscore.scoring.spectral import score_band  # noqa: E402
from mixscore.types import GateClass, MetricTarget  # noqa: E402


def build_profile_dict(
    *,
    genre: str = "funk_mandela",
    targets: dict | None = None,
    bands: dict | None = None,
    category_weights: dict | None = None,
    version: str = "1.0"
) -> dict:
    d = {
        "genre": genre,
        "version": version,
        "targets": targets if targets is not None else {
            "lufs": {"target": -8.0, "tol_inner": 1.0, "tol_outer": 3.0, "quality_gate": "hard"},
            "true_peak": {"target": -1.0, "tol_inner": 1.0, "tol_outer": 3.0, "quality_gate": "critical"},
            "dr": {"target": 8.0, "tol_inner": 2.0, "tol_outer": 5.0},
            "lra": {"target": 6.0, "tol_inner": 2.0, "tol_outer": 5.0},
        },
        "bands": bands if bands is not None else {
            "sub": {"target_db": -17.0, "tol_db": 2.5},
            "low_bass": {"target_db": -16.0, "tol_db": 2.5},
            "mid": {"target_db": -20.0, "tol_db": 2.0},
            "presence": {"target_db": -28.0, "tol_db": 3.0},
        },
    }
    if category_weights is not None:
        d["category_weights"] = category_weights
    return d


def build_measurements(**overrides) -> dict:
    """Analyzer output sitting exactly on the build_profile_dict targets."""
    m = {
        "lufsIntegrated": -8.0,
        "truePeakDbtp": -1.5,
        "dr_stat": 8.0,
        "lra": 6.0,
        "stereoCorrelation": 0.6,
        "stereoWidth": 0.35,
        "clippingPct": 0.0,
        "dcOffset": 0.0,
        "thdPercent": 0.5,
        "bandEnergies": {
            "sub": {"rms_db": -17.0},
            "low_bass": {"rms_db": -16.0},
            "mid": {"rms_db": -20.0},
            "presence": {"rms_db": -28.0},
        },
    }
    m.update(overrides)
    return m


def write_profile(tmp_path: Path, profile: dict) -> Path:
    path = tmp_path / "profile.ref.json"
    path.write_text(json.dumps(profile), encoding="utf-8")
    return path


def metric_score(
    metric: str,
    value: float,
    target: float,
    tol_inner: float = 1.0,
    tol_outer: float = 3.0,
    gate: str = "soft"
):
    spec = METRICS_BY_ID[metric]
    signal = CanonicalSignal(spec=spec, source=spec.sources[0], value=value)
    return score_signal(signal, MetricTarget(target, tol_inner, tol_outer, GateClass(gate)))


def band_score(band: str, value: float, target: float, tol: float = 2.0):
    return score_band(band, value, MetricTarget(target, tol, tol * 3.0))
