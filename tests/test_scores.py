"""Tests for the best-score store."""

from pathlib import Path

import pytest

from ranking_server.ranking.errors import RankingLoadError, RankingPersistError
from ranking_server.storage.scores import ScoreStore, read_scores


def _write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_load_missing_file_names_path(tmp_path: Path) -> None:
    missing = tmp_path / "ranking.data"
    store = ScoreStore()
    with pytest.raises(RankingLoadError) as exc:
        store.load(str(missing))
    assert exc.value.path == str(missing)
    assert not store.loaded


def test_load_rejects_bad_scores(tmp_path: Path) -> None:
    for bad in ("alice=lots\n", "alice=-3\n"):
        path = _write(tmp_path / "ranking.data", bad)
        with pytest.raises(RankingLoadError):
            ScoreStore().load(path)


def test_second_load_is_ignored(tmp_path: Path) -> None:
    path = _write(tmp_path / "ranking.data", "alice=50\n")
    store = ScoreStore()
    assert store.load(path) is True

    _write(tmp_path / "ranking.data", "alice=1\nbob=2\n")
    assert store.load(path) is False
    assert store.get("alice") == 50
    assert "bob" not in store


def test_get_registers_unknown_users(tmp_path: Path) -> None:
    store = ScoreStore()
    store.load(_write(tmp_path / "ranking.data", ""))
    assert store.peek("zoe") is None
    assert store.get("zoe") == 0
    assert "zoe" in store
    assert store.peek("zoe") == 0


def test_persist_overwrites_whole_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "ranking.data", "alice=50\nstale=1\n")
    store = ScoreStore()
    store.load(path)
    store.set("alice", 70)
    store.set("bob", 20)
    store.persist(str(tmp_path / "out.data"))

    lines = (tmp_path / "out.data").read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert read_scores(str(tmp_path / "out.data")) == {"alice": 70, "stale": 1, "bob": 20}


def test_persist_failure_names_path(tmp_path: Path) -> None:
    store = ScoreStore()
    store.set("alice", 1)
    with pytest.raises(RankingPersistError) as exc:
        store.persist(str(tmp_path))
    assert exc.value.path == str(tmp_path)
