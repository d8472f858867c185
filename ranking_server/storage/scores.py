"""Best-score map backed by a key/value text file."""

from __future__ import annotations

import logging
import time

from ranking_server.ranking.errors import RankingLoadError, RankingPersistError
from ranking_server.storage import codec

logger = logging.getLogger(__name__)


def parse_score(value: str) -> int:
    score = int(value)
    if score < 0:
        raise ValueError(f"negative score {score}")
    return score


def read_scores(path: str) -> dict[str, int]:
    """Read a `username=score` file. Raises RankingLoadError on any failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = codec.decode(f.read())
    except (OSError, UnicodeDecodeError, codec.CodecError) as e:
        raise RankingLoadError(path, str(e)) from e

    out: dict[str, int] = {}
    for username, value in raw.items():
        try:
            out[username] = parse_score(value)
        except ValueError as e:
            raise RankingLoadError(path, f"bad score for {username!r}: {value!r}") from e
    return out


def write_scores(path: str, items) -> None:
    """Overwrite `path` with `items`. Raises RankingPersistError on failure."""
    text = codec.encode(items, header=time.strftime("%a %b %d %H:%M:%S %Z %Y"))
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        logger.error("failed to write %s: %s", path, e)
        raise RankingPersistError(path, str(e)) from e


class ScoreStore:
    def __init__(self):
        self._scores: dict[str, int] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, username: object) -> bool:
        return username in self._scores

    def load(self, path: str) -> bool:
        """Load scores from `path`. Returns False if already loaded."""
        if self._loaded:
            logger.debug("score store already loaded, ignoring %s", path)
            return False
        self._scores = read_scores(path)
        self._loaded = True
        logger.info("loaded %d scores from %s", len(self._scores), path)
        return True

    def get(self, username: str) -> int:
        # First touch registers the user with a zero score.
        score = self._scores.get(username)
        if score is None:
            self._scores[username] = 0
            return 0
        return score

    def peek(self, username: str) -> int | None:
        return self._scores.get(username)

    def set(self, username: str, score: int) -> None:
        self._scores[username] = int(score)

    def persist(self, path: str) -> None:
        write_scores(path, self._scores)
