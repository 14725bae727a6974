from __future__ import annotations

from mixscore.metrics.catalog import METRIC_CATALOG, canonical_metric_id
from mixscore.metrics.dedup import canonical_value, select_canonical
from mixscore.types import MeasurementRecord


def test_lufs_wins_over_rms():
    rec = MeasurementRecord(lufs_integrated=-9.0, rms_db=-12.0)
    signals = {s.metric: s for s in select_canonical(rec)}
    assert signals["loudness"].source == "lufs_integrated"
    assert signals["loudness"].value == -9.0
    assert signals["loudness"].shadowed == ("rms_db",)


def test_rms_used_when_lufs_missing():
    rec = MeasurementRecord(lufs_integrated=float("nan"), rms_db=-12.0)
    assert canonical_value(rec, "loudness") == -12.0


def test_true_peak_precedence():
    rec = MeasurementRecord(true_peak_dbtp=-0.8, sample_peak_dbfs=-1.2)
    assert canonical_value(rec, "true_peak") == -0.8
    rec = MeasurementRecord(sample_peak_dbfs=-1.2)
    assert canonical_value(rec, "true_peak") == -1.2


def test_dr_stat_wins_over_dynamic_range():
    rec = MeasurementRecord(dr_stat=7.5, dynamic_range=9.0)
    assert canonical_value(rec, "dynamic_range") == 7.5


def test_dc_offset_uses_worse_channel():
    rec = MeasurementRecord(dc_offset=0.001, dc_offset_left=0.01, dc_offset_right=-0.03)
    assert canonical_value(rec, "dc_offset") == 0.03
    rec = MeasurementRecord(dc_offset=-0.02, dc_offset_left=0.01)
    assert canonical_value(rec, "dc_offset") == 0.02


def test_clipping_samples_are_never_scored():
    rec = MeasurementRecord(clipping_samples=1200.0)
    assert canonical_value(rec, "clipping") is None


def test_one_signal_per_family_even_when_all_missing():
    signals = select_canonical(MeasurementRecord())
    assert [s.metric for s in signals] == [m.metric for m in METRIC_CATALOG]
    assert all(s.value is None for s in signals)


def test_record_from_analyzer_keys():
    rec = MeasurementRecord.from_dict(
        {
            "lufsIntegrated": -8.1,
            "truePeakDbtp": -1.2,
            "dr": 7.0,
            "stereoCorrelation": "0.5",
            "bandEnergies": {"sub": {"rms_db": -17.0}, "mid": -20.0, "air": None},
            "unknown": 3.0,
        }
    )
    assert rec.lufs_integrated == -8.1
    assert rec.true_peak_dbtp == -1.2
    assert rec.dynamic_range == 7.0
    assert rec.stereo_correlation == 0.5
    assert dict(rec.band_rms_db) == {"sub": -17.0, "mid": -20.0, "air": None}


def test_metric_aliases():
    assert canonical_metric_id("lufs") == "loudness"
    assert canonical_metric_id("dr") == "dynamic_range"
    assert canonical_metric_id("stereo_width") == "stereo_width"
