from __future__ import annotations

from mixscore.metrics.catalog import METRICS_BY_ID
from mixscore.types import Direction

THEMES = ("loudness", "dynamics", "lows", "mids", "highs", "stereo", "artifacts")

_METRIC_THEMES = {
    "loudness": "loudness",
    "true_peak": "loudness",
    "dynamic_range": "dynamics",
    "lra": "dynamics",
    "stereo_correlation": "stereo",
    "stereo_width": "stereo",
    "clipping": "artifacts",
    "dc_offset": "artifacts",
}

_BAND_LABELS = {
    "sub": "sub",
    "low_bass": "low bass",
    "upper_bass": "upper bass",
    "low_mid": "low mids",
    "mid": "mids",
    "high_mid": "high mids",
    "presence": "presence",
    "presenca": "presence",
    "brilliance": "brilliance",
    "brilho": "brilliance",
}

BAND_RANGES = {
    "sub": "20-60 Hz",
    "low_bass": "60-150 Hz",
    "upper_bass": "150-300 Hz",
    "low_mid": "300-800 Hz",
    "mid": "800-2000 Hz",
    "high_mid": "2-6 kHz",
    "presence": "3-6 kHz",
    "presenca": "3-6 kHz",
    "brilliance": "6-12 kHz",
    "brilho": "6-12 kHz",
}

_BAND_THEMES = {
    "sub": "lows",
    "low_bass": "lows",
    "upper_bass": "lows",
    "low_mid": "mids",
    "mid": "mids",
    "high_mid": "mids",
    "presence": "highs",
    "presenca": "highs",
    "brilliance": "highs",
    "brilho": "highs",
}

_ACTIONS = {
    ("loudness", Direction.DECREASE): "Reduce overall gain by ~{amount} dB or ease off the limiter",
    ("loudness", Direction.INCREASE): "Raise overall gain by ~{amount} dB into the limiter",
    ("true_peak", Direction.DECREASE): (
        "Lower the output by ~{amount} dB with a true-peak limiter (ceiling {target} dBTP)"
    ),
    ("dynamic_range", Direction.DECREASE): "Tighten dynamics by ~{amount} dB with bus compression",
    ("dynamic_range", Direction.INCREASE): (
        "Back off compression and limiting to recover ~{amount} dB of dynamic range"
    ),
    ("lra", Direction.DECREASE): "Apply gentle compression to narrow the loudness range by ~{amount} LU",
    ("lra", Direction.INCREASE): "Ease aggressive compression to widen the loudness range by ~{amount} LU",
    ("stereo_correlation", Direction.INCREASE): (
        "Check for phase problems or excessive widening (raise correlation by ~{amount})"
    ),
    ("stereo_correlation", Direction.DECREASE): (
        "Add stereo interest to lower correlation by ~{amount}"
    ),
    ("stereo_width", Direction.INCREASE): "Widen the stereo image by ~{amount} with care",
    ("stereo_width", Direction.DECREASE): "Narrow the stereo image by ~{amount} and keep lows mono",
    ("clipping", Direction.DECREASE): (
        "Reduce gain into the clipper or limiter to remove ~{amount}% clipped samples"
    ),
    ("dc_offset", Direction.DECREASE): "Remove ~{amount} of DC offset with a DC filter",
    ("band", Direction.DECREASE): "Cut {band} by ~{amount} dB ({range})",
    ("band", Direction.INCREASE): "Boost {band} by ~{amount} dB ({range})",
    ("band_unmapped", Direction.DECREASE): "Cut {band} by ~{amount} dB",
    ("band_unmapped", Direction.INCREASE): "Boost {band} by ~{amount} dB",
}


def metric_label(metric: str) -> str:
    if metric.startswith("band:"):
        band = metric[len("band:"):]
        return f"{band_label(band).capitalize()} band"
    spec = METRICS_BY_ID.get(metric)
    return spec.label if spec is not None else metric.replace("_", " ")


def band_label(band: str) -> str:
    return _BAND_LABELS.get(band, band.replace("_", " "))


def theme_for(metric: str) -> str:
    """Theme a suggestion is grouped under; unknown bands fall back to mids."""
    if metric.startswith("band:"):
        return _BAND_THEMES.get(metric[len("band:"):], "mids")
    return _METRIC_THEMES.get(metric, "dynamics")


def format_amount(amount: float, unit: str) -> str:
    """Format an adjustment in the metric's natural precision."""
    if unit in ("dB", "dBFS", "dBTP", "LUFS", "LU", "%"):
        return f"{amount:.1f}"
    if amount < 0.1:
        return f"{amount:.3f}"
    return f"{amount:.2f}"


def render_message(metric: str, direction: Direction, genre: str) -> str:
    where = "above" if direction is Direction.DECREASE else "below"
    return f"{metric_label(metric)} {where} the {genre} reference"


def render_action(
    metric: str,
    direction: Direction,
    amount: float,
    *,
    target: float,
    unit: str
) -> str:
    """Directional, quantified fix for one metric or band."""
    band = None
    key = metric
    if metric.startswith("band:"):
        band = metric[len("band:"):]
        key = "band" if band in BAND_RANGES else "band_unmapped"
    template = _ACTIONS.get((key, direction))
    text = format_amount(amount, unit)
    if template is None:
        verb = "Reduce" if direction is Direction.DECREASE else "Increase"
        return f"{verb} {metric_label(metric).lower()} by ~{text} {unit}".rstrip()
    return template.format(
        amount=text,
        target=f"{target:.1f}",
        band=band_label(band) if band else "",
        range=BAND_RANGES.get(band, "") if band else "",
    )
