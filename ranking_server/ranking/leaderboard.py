"""Fixed three-slot leaderboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from ranking_server.storage.scores import ScoreStore, write_scores

logger = logging.getLogger(__name__)

SLOTS = 3
EMPTY_USERNAME = "empty"


@dataclass(frozen=True)
class TopEntry:
    username: str
    score: int

    @property
    def is_empty(self) -> bool:
        return self.username == EMPTY_USERNAME and self.score == 0

    def to_dict(self) -> dict[str, object]:
        return {"username": self.username, "score": self.score}


EMPTY_ENTRY = TopEntry(EMPTY_USERNAME, 0)


def _sorted(entries: list[TopEntry]) -> list[TopEntry]:
    # Stable: ties keep their current slot order.
    return sorted(entries, key=lambda e: e.score, reverse=True)


class LeaderboardTracker:
    def __init__(self):
        self._slots: list[TopEntry] = [EMPTY_ENTRY] * SLOTS
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, scores: ScoreStore, snapshot: Mapping[str, object]) -> None:
        """Rebuild the slots from the users named in `snapshot`.

        Scores come from `scores`, not from the snapshot values: the score file
        is authoritative. Users the score store does not know become empty
        slots, and missing slots are padded with EMPTY_ENTRY.
        """
        entries = []
        for username in snapshot:
            score = scores.peek(username)
            if score is None:
                logger.warning("leaderboard user %r has no score record", username)
                entries.append(EMPTY_ENTRY)
            else:
                entries.append(TopEntry(username, score))
        while len(entries) < SLOTS:
            entries.append(EMPTY_ENTRY)
        self._slots = _sorted(entries)[:SLOTS]
        self._initialized = True

    def lowest_score(self) -> int:
        return self._slots[-1].score

    def try_insert(self, username: str, score: int) -> bool:
        """Offer a score to the leaderboard. Returns True if the slots changed."""
        for i, entry in enumerate(self._slots):
            if entry.username == username and not entry.is_empty:
                if score <= entry.score:
                    return False
                self._slots[i] = TopEntry(username, score)
                self._slots = _sorted(self._slots)
                return True

        if score <= self.lowest_score():
            return False
        displaced = self._slots[-1]
        self._slots[-1] = TopEntry(username, score)
        self._slots = _sorted(self._slots)
        if not displaced.is_empty:
            logger.info("%s (%d) displaced %s (%d) from the top %d", username, score, displaced.username, displaced.score, SLOTS)
        return True

    def persist(self, path: str) -> None:
        write_scores(path, [(e.username, e.score) for e in self._slots if not e.is_empty])

    def snapshot(self) -> tuple[TopEntry, ...]:
        return tuple(self._slots)
