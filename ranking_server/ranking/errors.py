"""Ranking error types."""

from __future__ import annotations


class RankingError(Exception):
    pass


class RankingLoadError(RankingError):
    """A backing file could not be read or parsed."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = str(path)
        self.reason = reason
        msg = f"could not load ranking file {self.path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class RankingPersistError(RankingError):
    """A backing file could not be written."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = str(path)
        self.reason = reason
        msg = f"could not persist ranking file {self.path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class RankingNotLoadedError(RankingError):
    def __init__(self):
        super().__init__("rankings not loaded")
