"""Tests for tools/ranking_admin.py."""

import importlib.util
from pathlib import Path

import pytest

TOOL = Path(__file__).resolve().parent.parent / "tools" / "ranking_admin.py"


@pytest.fixture
def admin():
    spec = importlib.util.spec_from_file_location("ranking_admin", TOOL)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


@pytest.fixture
def files(tmp_path: Path):
    scores = tmp_path / "ranking.data"
    top3 = tmp_path / "top3.data"
    scores.write_text("alice=50\nbob=30\n", encoding="utf-8")
    top3.write_text("alice=50\nbob=30\n", encoding="utf-8")
    return ["--scores", str(scores), "--top3", str(top3)]


def test_show(admin, files, capsys):
    assert admin.main(files + ["show"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["1. alice : 50", "2. bob : 30", "3. empty : 0"]


def test_submit_then_get(admin, files, capsys):
    assert admin.main(files + ["submit", "carol", "40"]) == 0
    assert "New best for carol: 40" in capsys.readouterr().out

    assert admin.main(files + ["submit", "carol", "10"]) == 0
    assert "Kept best for carol: 40" in capsys.readouterr().out

    assert admin.main(files + ["get", "carol"]) == 0
    assert capsys.readouterr().out.strip() == "40"

    assert admin.main(files + ["show"]) == 0
    assert "2. carol : 40" in capsys.readouterr().out


def test_missing_file_reports_error(admin, tmp_path, capsys):
    missing = str(tmp_path / "nope.data")
    assert admin.main(["--scores", missing, "--top3", missing, "show"]) == 1
    assert missing in capsys.readouterr().out
