from __future__ import annotations

from mixscore.scoring.severity import SEVERITY_COLORS, SEVERITY_LABELS
from mixscore.types import BandScore, MetricScore, QualityIssue, ScoreResult, Suggestion
from mixscore.utils.canonical_json import canonical_dumps
from mixscore.utils.hashing import sha256_hex_canonical_json
from mixscore.utils.quantize import q
from mixscore.version import __version__

REPORT_SCHEMA_VERSION = "1.0"


def _metric_entry(m: MetricScore) -> dict:
    return {
        "metric": m.metric,
        "category": m.category.value,
        "source": m.source,
        "value": m.value,
        "target": m.target,
        "tolerance": m.tolerance,
        "deviation": m.deviation,
        "zScore": m.z_score,
        "severity": m.severity.value,
        "severityLabel": SEVERITY_LABELS[m.severity],
        "color": SEVERITY_COLORS[m.severity],
        "score": m.score,
        "unit": m.unit,
    }


def _band_entry(b: BandScore) -> dict:
    return {
        "band": b.band,
        "valueDb": b.value,
        "targetDb": b.target,
        "toleranceDb": b.tolerance,
        "deviationDb": b.deviation,
        "severity": b.severity.value,
        "color": SEVERITY_COLORS[b.severity],
        "score": b.score,
        "weight": b.weight,
    }


def _issue_entry(i: QualityIssue) -> dict:
    return {
        "ruleId": i.rule_id,
        "metric": i.metric,
        "description": i.description,
        "value": i.value,
        "threshold": i.threshold,
        "cap": i.cap,
    }


def _suggestion_entry(s: Suggestion) -> dict:
    return {
        "metric": s.metric,
        "category": s.category.value,
        "theme": s.theme,
        "severity": s.severity.value,
        "severityLabel": SEVERITY_LABELS[s.severity],
        "message": s.message,
        "action": s.action,
        "direction": s.direction.value,
        "amount": s.amount,
        "unit": s.unit,
        "estimatedGainPct": s.estimated_gain_pct,
        "priority": s.priority,
        "clusters": list(s.clusters),
        "notes": list(s.notes),
    }


def build_score_report_dict(result: ScoreResult) -> dict:
    """
    Build the UI-facing report with quantized floats and an integrity hash.

    Args:
        result: Output of score_track

    Returns:
        Report dict. The hash covers everything except the integrity
        block, so identical results give byte-identical reports.
    """
    report = {
        "schemaVersion": REPORT_SCHEMA_VERSION,
        "engine": {"name": "mixscore", "version": __version__},
        "genre": result.genre,
        "scorePct": result.score_pct,
        "rawScorePct": result.raw_score_pct,
        "classification": result.classification.value,
        "scoringMethod": result.scoring_method.value,
        "categoryScores": result.category_scores,
        "qualityIssues": [i.description for i in result.quality_issues],
        "suggestions": [_suggestion_entry(s) for s in result.suggestions],
        "suggestionGroups": {
            theme: [s.metric for s in items]
            for theme, items in result.suggestion_groups.items()
        },
        "droppedSuggestions": list(result.dropped_suggestions),
        "breakdown": {
            "qualityIssues": [_issue_entry(i) for i in result.quality_issues],
            "categories": [
                {
                    "category": c.category.value,
                    "score": c.score,
                    "weight": c.weight,
                    "insufficientData": c.insufficient_data,
                }
                for c in result.categories
            ],
            "metrics": [_metric_entry(m) for m in result.metric_scores],
            "spectral": {
                "score": result.spectral.score,
                "bands": [_band_entry(b) for b in result.spectral.bands],
                "excluded": list(result.spectral.excluded),
                "insufficientData": result.spectral.insufficient_data,
            },
        },
        "confidence": result.confidence,
        "insufficientData": result.insufficient_data,
        "integrity": {"reportHashSha256": ""},
    }

    # Quantize for stable hashing
    report["rawScorePct"] = q(float(report["rawScorePct"]), 0.01)
    report["confidence"] = q(float(report["confidence"]), 0.001)

    for issue in report["breakdown"]["qualityIssues"]:
        issue["value"] = q(float(issue["value"]), 0.001)

    for s in report["suggestions"]:
        s["amount"] = q(float(s["amount"]), 0.001)
        s["estimatedGainPct"] = q(float(s["estimatedGainPct"]), 0.1)
        s["priority"] = q(float(s["priority"]), 0.001)

    breakdown = report["breakdown"]
    for c in breakdown["categories"]:
        c["score"] = q(float(c["score"]), 0.0001)
        c["weight"] = q(float(c["weight"]), 0.0001)
    for m in breakdown["metrics"]:
        for key in ("value", "deviation", "zScore"):
            m[key] = q(float(m[key]), 0.001)
        m["score"] = q(float(m["score"]), 0.0001)
    spectral = breakdown["spectral"]
    spectral["score"] = q(float(spectral["score"]), 0.01)
    for b in spectral["bands"]:
        b["valueDb"] = q(float(b["valueDb"]), 0.01)
        b["deviationDb"] = q(float(b["deviationDb"]), 0.01)
        b["score"] = q(float(b["score"]), 0.01)

    # Compute integrity hash (excluding integrity object itself)
    tmp = dict(report)
    tmp.pop("integrity", None)
    report["integrity"]["reportHashSha256"] = sha256_hex_canonical_json(tmp)

    return report


def dumps_score_report(result: ScoreResult) -> str:
    """Canonical JSON text of the report."""
    return canonical_dumps(build_score_report_dict(result))
