"""In-process genre -> ReferenceProfile registry."""
from __future__ import annotations
import logging
import threading
from types import MappingProxyType
from typing import Iterable, Mapping

from mixscore.errors import ConfigurationError
from mixscore.types import ReferenceProfile

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    Copy-on-write profile map.

    Writers build a new dict under a lock and swap it in with one
    assignment; readers use whatever map is current and never see a
    partially updated one.
    """

    def __init__(self, profiles: Iterable[ReferenceProfile] = ()) -> None:
        self._lock = threading.Lock()
        self._profiles: Mapping[str, ReferenceProfile] = MappingProxyType({})
        self.publish_many(profiles)

    def publish(self, profile: ReferenceProfile) -> None:
        self.publish_many((profile,))

    def publish_many(self, profiles: Iterable[ReferenceProfile]) -> None:
        """Add or replace several profiles in one swap."""
        incoming = list(profiles)
        for p in incoming:
            if not isinstance(p, ReferenceProfile):
                raise ConfigurationError(f"expected ReferenceProfile, got {type(p).__name__}.")
        if not incoming:
            return
        with self._lock:
            updated = dict(self._profiles)
            for p in incoming:
                updated[p.genre] = p
            self._profiles = MappingProxyType(updated)
        logger.debug("published profiles: %s", sorted(p.genre for p in incoming))

    def get(self, genre: str, default: ReferenceProfile | None = None) -> ReferenceProfile | None:
        return self._profiles.get(genre, default)

    def snapshot(self) -> Mapping[str, ReferenceProfile]:
        """Current read-only map; later publishes do not change it."""
        return self._profiles

    def genres(self) -> list[str]:
        return sorted(self._profiles)

    def __contains__(self, genre: object) -> bool:
        return genre in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
