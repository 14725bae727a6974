"""Engine defaults merged into every reference profile."""
from __future__ import annotations

DEFAULT_GENRE = "default"

DEFAULT_CATEGORY_WEIGHTS = {
    "funk_mandela": {
        "loudness": 0.25,
        "dynamics": 0.15,
        "peak": 0.15,
        "tonal": 0.25,
        "stereo": 0.10,
        "artifacts": 0.10,
    },
    "eletronico": {
        "loudness": 0.20,
        "dynamics": 0.20,
        "peak": 0.10,
        "tonal": 0.20,
        "stereo": 0.15,
        "artifacts": 0.15,
    },
    "funk_automotivo": {
        "loudness": 0.30,
        "dynamics": 0.10,
        "peak": 0.20,
        "tonal": 0.25,
        "stereo": 0.05,
        "artifacts": 0.10,
    },
    "funk_bruxaria": {
        "loudness": 0.25,
        "dynamics": 0.15,
        "peak": 0.15,
        "tonal": 0.25,
        "stereo": 0.10,
        "artifacts": 0.10,
    },
    DEFAULT_GENRE: {
        "loudness": 0.25,
        "dynamics": 0.15,
        "peak": 0.15,
        "tonal": 0.25,
        "stereo": 0.10,
        "artifacts": 0.10,
    },
}

# Genre references rarely carry stereo or artifact targets.
DEFAULT_METRIC_TARGETS = {
    "stereo_correlation": {"target": 0.6, "tol_inner": 0.2, "tol_outer": 0.5, "quality_gate": "soft"},
    "stereo_width": {"target": 0.35, "tol_inner": 0.15, "tol_outer": 0.3, "quality_gate": "soft"},
    "clipping": {"target": 0.0, "tol_inner": 1.0, "tol_outer": 5.0, "quality_gate": "hard"},
    "dc_offset": {"target": 0.0, "tol_inner": 0.01, "tol_outer": 0.05, "quality_gate": "soft"},
}

# Band references only carry one tolerance; the outer one is derived.
BAND_OUTER_TOLERANCE_FACTOR = 3.0


def default_category_weights(genre: str) -> dict:
    return dict(DEFAULT_CATEGORY_WEIGHTS.get(genre, DEFAULT_CATEGORY_WEIGHTS[DEFAULT_GENRE]))
