"""Process-wide ranking service.

Owns the best-score map and the top-3 leaderboard. Every public operation runs
under one exclusive lock, so concurrent game sessions see either the state
before an update or the state after it (both files written), never a mix.

Files are rewritten in place. A crash in the middle of a write can leave a
truncated file behind; there is no atomic rename step.
"""

from __future__ import annotations

import logging
import threading

from ranking_server.ranking.errors import RankingNotLoadedError
from ranking_server.ranking.leaderboard import LeaderboardTracker, TopEntry
from ranking_server.storage.scores import ScoreStore, read_scores

logger = logging.getLogger(__name__)


class RankingService:
    _instance: "RankingService | None" = None
    _instance_lock = threading.Lock()

    def __init__(self):
        self._lock = threading.Lock()
        self._scores = ScoreStore()
        self._board = LeaderboardTracker()
        self.score_path: str | None = None
        self.top3_path: str | None = None

    @classmethod
    def instance(cls) -> "RankingService":
        """Return the process-wide service, creating it (unloaded) on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @property
    def loaded(self) -> bool:
        return self._scores.loaded or self._board.initialized

    def player_count(self) -> int:
        with self._lock:
            return len(self._scores)

    def _require_loaded(self) -> None:
        if not self.loaded:
            raise RankingNotLoadedError()

    def load_rankings(self, score_path: str, top3_path: str) -> bool:
        """Load both ranking files once.

        Returns False, without touching either file, if rankings are already
        loaded. Raises RankingLoadError naming the file that failed; nothing
        is kept from a failed load, so it can be retried.
        """
        with self._lock:
            if self.loaded:
                logger.info("rankings already loaded from %s / %s", self.score_path, self.top3_path)
                return False

            scores = ScoreStore()
            scores.load(score_path)
            snapshot = read_scores(top3_path)

            board = LeaderboardTracker()
            board.initialize(scores, snapshot)

            self._scores = scores
            self._board = board
            self.score_path = str(score_path)
            self.top3_path = str(top3_path)
            logger.info(
                "rankings loaded: %d players, top3=%s",
                len(scores),
                ", ".join(f"{e.username}:{e.score}" for e in board.snapshot()),
            )
            return True

    def get_top3(self) -> tuple[TopEntry, ...]:
        with self._lock:
            self._require_loaded()
            return self._board.snapshot()

    def get_user_highscore(self, username: str) -> int:
        with self._lock:
            self._require_loaded()
            return self._scores.get(username)

    def refresh_user_highscore(self, username: str, score: int) -> bool:
        """Record `score` for `username` if it beats their best.

        Returns False when it does not. On success both files are written
        before returning True; a RankingPersistError leaves the new score in
        memory but is raised to the caller.
        """
        score = int(score)
        with self._lock:
            self._require_loaded()
            if score <= self._scores.get(username):
                return False

            self._scores.set(username, score)
            if self._board.try_insert(username, score):
                logger.info("leaderboard changed by %s (%d)", username, score)
                self._board.persist(self.top3_path)
            self._scores.persist(self.score_path)
            logger.debug("new best for %s: %d", username, score)
            return True
