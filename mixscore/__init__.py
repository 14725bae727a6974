"""
mixscore - Mix Quality Scoring Engine

Scores a mixed or mastered track's technical measurements against genre
reference profiles and ranks the fixes that would raise the score.
"""
from mixscore.version import __version__
from mixscore.errors import ConfigurationError, DataInsufficiencyError
from mixscore.types import (
    Severity,
    GateClass,
    ScoringMethod,
    Category,
    Classification,
    Direction,
    MeasurementRecord,
    MetricTarget,
    ReferenceProfile,
    MetricScore,
    BandScore,
    CategoryScore,
    QualityIssue,
    Suggestion,
    ScoringOptions,
    ScoreResult,
)
from mixscore.engine import classify_score, score_track
from mixscore.profiles.loader import load_reference_profile, profile_from_dict
from mixscore.profiles.store import ProfileStore
from mixscore.reporting.score_report import build_score_report_dict, dumps_score_report

__all__ = [
    "__version__",
    "ConfigurationError",
    "DataInsufficiencyError",
    "Severity",
    "GateClass",
    "ScoringMethod",
    "Category",
    "Classification",
    "Direction",
    "MeasurementRecord",
    "MetricTarget",
    "ReferenceProfile",
    "MetricScore",
    "BandScore",
    "CategoryScore",
    "QualityIssue",
    "Suggestion",
    "ScoringOptions",
    "ScoreResult",
    "classify_score",
    "score_track",
    "load_reference_profile",
    "profile_from_dict",
    "ProfileStore",
    "build_score_report_dict",
    "dumps_score_report",
]
