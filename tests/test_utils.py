from __future__ import annotations

import pytest

from mixscore.utils.canonical_json import canonical_dumps
from mixscore.utils.hashing import sha256_hex_canonical_json
from mixscore.utils.quantize import q, q_opt


def test_canonical_dumps_sorts_and_compacts():
    obj = {"scorePct": 91, "genre": "eletronico", "categoryScores": {"tonal": 88, "peak": 100}}
    assert canonical_dumps(obj) == (
        '{"categoryScores":{"peak":100,"tonal":88},"genre":"eletronico","scorePct":91}'
    )


def test_canonical_dumps_rejects_nan():
    with pytest.raises(ValueError):
        canonical_dumps({"rawScorePct": float("nan")})


def test_sha256_hex_canonical_json_ignores_key_order():
    obj1 = {"b": 1, "a": 2}
    obj2 = {"a": 2, "b": 1}
    assert sha256_hex_canonical_json(obj1) == sha256_hex_canonical_json(obj2)


def test_quantize_rounds_half_away_from_zero():
    assert q(84.5, 1.0) == 85.0
    assert q(84.49, 1.0) == 84.0
    assert q(-0.5, 1.0) == -1.0
    assert q(1.235, 0.01) == 1.24


def test_quantize_optional():
    assert q_opt(None, 0.01) is None
    assert q_opt(0.004, 0.01) == 0.0
