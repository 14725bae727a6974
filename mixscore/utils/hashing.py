from __future__ import annotations
import hashlib
from mixscore.utils.canonical_json import canonical_dumps


def sha256_hex_canonical_json(obj) -> str:
    """Compute SHA256 hash of the canonical JSON representation of a report."""
    return hashlib.sha256(canonical_dumps(obj).encode("utf-8")).hexdigest()
