"""Exceptions raised by the scoring engine."""
from __future__ import annotations


class ConfigurationError(ValueError):
    """Reference profile or scoring options are invalid; no result is produced."""


class DataInsufficiencyError(ValueError):
    """Nothing could be scored and the caller asked for strict data handling."""
