"""Server settings, ranking file locations, submission quotas."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class ServerConfig:
    # Versions
    server_version: str = "0.1.0"

    # Network
    host: str = "0.0.0.0"
    port: int = 8766
    cors_allow_all: bool = True
    cors_allowed_origins: list[str] = field(default_factory=list)

    # Ranking files
    score_file: str = "ranking.data"
    top3_file: str = "top3.data"
    # Create empty ranking files on startup when they don't exist yet.
    create_missing: bool = True

    # Per-client score submissions (token bucket).
    submit_rate_per_sec: float = 2.0
    submit_burst: float = 10.0

    log_level: str = "INFO"

    @staticmethod
    def _parse_bool(v: str | None, default: bool) -> bool:
        if v is None:
            return default
        return v.strip().lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _parse_num(v: str | None, default, cast=float):
        if v is None or not v.strip():
            return default
        try:
            return cast(v)
        except ValueError:
            return default

    @classmethod
    def from_env(cls, environ=None) -> "ServerConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        cfg.host = env.get("RANKING_HOST", cfg.host)
        cfg.port = cls._parse_num(env.get("RANKING_PORT"), cfg.port, int)
        cfg.score_file = env.get("RANKING_SCORE_FILE", cfg.score_file)
        cfg.top3_file = env.get("RANKING_TOP3_FILE", cfg.top3_file)
        cfg.create_missing = cls._parse_bool(env.get("RANKING_CREATE_MISSING"), cfg.create_missing)
        cfg.cors_allow_all = cls._parse_bool(env.get("RANKING_CORS_ALLOW_ALL"), cfg.cors_allow_all)
        cfg.submit_rate_per_sec = cls._parse_num(env.get("RANKING_SUBMIT_RATE"), cfg.submit_rate_per_sec)
        cfg.submit_burst = cls._parse_num(env.get("RANKING_SUBMIT_BURST"), cfg.submit_burst)
        cfg.log_level = env.get("RANKING_LOG_LEVEL", cfg.log_level).upper()
        origins = env.get("RANKING_CORS_ORIGINS")
        if origins:
            cfg.cors_allowed_origins = [o.strip() for o in origins.split(",") if o.strip()]
        return cfg
