"""Band-weighted spectral balance score."""
from __future__ import annotations
import logging
from typing import Mapping

import numpy as np

from mixscore.scoring.severity import (
    classify_ratio,
    deviation_ratio,
    signed_deviation,
    z_score,
)
from mixscore.types import BandScore, MetricTarget, Severity, SpectralScore, finite_or_none

logger = logging.getLogger(__name__)

BAND_SEVERITY_WEIGHTS = {
    Severity.GREEN: 1.0,
    Severity.YELLOW: 0.8,
    Severity.ORANGE: 0.6,
    Severity.RED: 0.4,
}

NEUTRAL_SPECTRAL_SCORE = 50.0
RED_SCORE_FLOOR = 20.0


def band_score_from_ratio(ratio: float) -> tuple[float, Severity]:
    """
    Map a band deviation ratio to a 0-100 score and its severity.

    green 100; yellow 80 -> 60; orange 60 -> 40; red 40 falling 10 per
    tolerance step, never below 20.
    """
    severity = classify_ratio(ratio)
    if severity is Severity.GREEN:
        return 100.0, severity
    if severity is Severity.YELLOW:
        return 80.0 - (ratio - 1.0) * 20.0, severity
    if severity is Severity.ORANGE:
        return 60.0 - (ratio - 2.0) * 20.0, severity
    return max(RED_SCORE_FLOOR, 40.0 - (ratio - 3.0) * 10.0), severity


def score_band(band: str, value: float | None, ref: MetricTarget | None) -> BandScore | None:
    """Score one band, or None when either the measurement or the reference is missing."""
    v = finite_or_none(value)
    if v is None or ref is None:
        return None
    deviation = signed_deviation(v, ref.target, ceiling=bool(ref.ceiling))
    ratio = deviation_ratio(deviation, ref.tol_inner)
    score, severity = band_score_from_ratio(ratio)
    return BandScore(
        band=band,
        value=v,
        target=ref.target,
        tolerance=ref.tol_inner,
        deviation=deviation,
        ratio=ratio,
        z_score=z_score(deviation, ref.tol_inner),
        severity=severity,
        score=score,
        weight=BAND_SEVERITY_WEIGHTS[severity],
    )


def score_spectral_balance(
    band_rms_db: Mapping[str, float | None],
    band_targets: Mapping[str, MetricTarget]
) -> SpectralScore:
    """
    Compute the weighted spectral score over valid bands only.

    Args:
        band_rms_db: Measured band level in dB per band name (None for N/A)
        band_targets: Reference target and tolerance per band name

    Returns:
        SpectralScore. Bands missing either side are excluded from both
        numerator and denominator; with no valid band the score is the
        neutral fallback and ``insufficient_data`` is set.
    """
    scored: list[BandScore] = []
    excluded: list[str] = []
    for band, ref in band_targets.items():
        bs = score_band(band, band_rms_db.get(band), ref)
        if bs is None:
            excluded.append(band)
            continue
        scored.append(bs)
    for band in band_rms_db:
        if band not in band_targets:
            excluded.append(band)
    if excluded:
        logger.debug("spectral: excluded bands without data or reference: %s", sorted(excluded))

    if not scored:
        return SpectralScore(
            score=NEUTRAL_SPECTRAL_SCORE,
            bands=(),
            excluded=tuple(sorted(excluded)),
            insufficient_data=True,
        )

    scores = np.asarray([b.score for b in scored], dtype=np.float64)
    weights = np.asarray([b.weight for b in scored], dtype=np.float64)
    wsum = float(np.sum(weights))
    # Band weights are all >= 0.4, so wsum > 0 whenever a band was scored.
    score = float(np.sum(scores * weights) / wsum)
    return SpectralScore(
        score=score,
        bands=tuple(scored),
        excluded=tuple(sorted(excluded)),
        insufficient_data=False,
    )
