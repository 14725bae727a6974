"""Analysis confidence from signal-quality indicators."""
from __future__ import annotations
from dataclasses import dataclass

from mixscore.types import finite_or_none

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0


@dataclass(frozen=True)
class AnalysisQuality:
    duration_s: float | None = None
    true_peak_oversampled: bool | None = None
    snr_db: float | None = None
    stability: float | None = None


def clamp_confidence(x: float) -> float:
    v = finite_or_none(x)
    if v is None:
        return MAX_CONFIDENCE
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, v))


def analysis_confidence(quality: AnalysisQuality | None) -> float:
    """
    Multiply in a penalty per weak indicator, clamped to [0.1, 1.0].

    Short clips (< 10 s) x0.7, true peak without oversampling x0.9,
    SNR under 40 dB x0.8, window stability under 0.8 x0.9. Unknown
    indicators are not penalized.
    """
    if quality is None:
        return MAX_CONFIDENCE
    confidence = 1.0
    duration = finite_or_none(quality.duration_s)
    if duration is not None and duration < 10.0:
        confidence *= 0.7
    if quality.true_peak_oversampled is False:
        confidence *= 0.9
    snr = finite_or_none(quality.snr_db)
    if snr is not None and snr < 40.0:
        confidence *= 0.8
    stability = finite_or_none(quality.stability)
    if stability is not None and stability < 0.8:
        confidence *= 0.9
    return clamp_confidence(confidence)
