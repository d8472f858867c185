"""Tests for ServerConfig.from_env."""

from ranking_server.config import ServerConfig


def test_defaults_without_env():
    cfg = ServerConfig.from_env({})
    assert cfg.score_file == "ranking.data"
    assert cfg.top3_file == "top3.data"
    assert cfg.create_missing is True
    assert cfg.log_level == "INFO"


def test_env_overrides():
    cfg = ServerConfig.from_env(
        {
            "RANKING_PORT": "9000",
            "RANKING_SCORE_FILE": "/data/scores.data",
            "RANKING_TOP3_FILE": "/data/top.data",
            "RANKING_CREATE_MISSING": "no",
            "RANKING_CORS_ALLOW_ALL": "0",
            "RANKING_CORS_ORIGINS": "https://a.example, https://b.example,",
            "RANKING_SUBMIT_RATE": "0.5",
            "RANKING_LOG_LEVEL": "debug",
        }
    )
    assert cfg.port == 9000
    assert cfg.score_file == "/data/scores.data"
    assert cfg.top3_file == "/data/top.data"
    assert cfg.create_missing is False
    assert cfg.cors_allow_all is False
    assert cfg.cors_allowed_origins == ["https://a.example", "https://b.example"]
    assert cfg.submit_rate_per_sec == 0.5
    assert cfg.log_level == "DEBUG"


def test_bad_numbers_keep_defaults():
    cfg = ServerConfig.from_env({"RANKING_PORT": "http", "RANKING_SUBMIT_BURST": "many"})
    assert cfg.port == ServerConfig().port
    assert cfg.submit_burst == ServerConfig().submit_burst
