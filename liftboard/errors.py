from __future__ import annotations


class LiftboardError(Exception):
    pass


class SourceUnavailable(LiftboardError):
    """A data location could not be reached or answered with a non-success status."""

    def __init__(self, location: str, reason: str):
        super().__init__(f"{location}: {reason}")
        self.location = location
        self.reason = reason


class NoDataSources(LiftboardError):
    """Neither a manifest nor any dashboard container yielded an exercise key."""
