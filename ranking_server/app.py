"""HTTP entrypoint for the ranking service.

The game server's session handlers talk to the same RankingService this app
holds; the HTTP routes expose its four operations for other processes.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
import uuid
from typing import Any

from aiohttp import web

from ranking_server.config import ServerConfig
from ranking_server.net.rate_limit import ClientQuotas
from ranking_server.ranking.errors import RankingNotLoadedError, RankingPersistError
from ranking_server.ranking.service import RankingService

logger = logging.getLogger(__name__)

MAX_USERNAME_LEN = 64


def _touch(path: str) -> None:
    if os.path.exists(path):
        return
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "a", encoding="utf-8"):
        pass
    logger.info("created empty ranking file %s", path)


class RankingServer:
    def __init__(self, config: ServerConfig, ranking: RankingService | None = None):
        self.config = config
        self.ranking = ranking if ranking is not None else RankingService.instance()
        self.quotas = ClientQuotas(config.submit_rate_per_sec, config.submit_burst)
        self.server_id = str(uuid.uuid4())
        self.start_time = time.time()

    def start(self) -> None:
        if self.config.create_missing:
            _touch(self.config.score_file)
            _touch(self.config.top3_file)
        if not self.ranking.load_rankings(self.config.score_file, self.config.top3_file):
            logger.info("ranking service was already loaded; keeping its state")

    def submit(self, username: str, score: int) -> dict[str, Any]:
        accepted = self.ranking.refresh_user_highscore(username, score)
        return {
            "accepted": accepted,
            "username": username,
            "score": self.ranking.get_user_highscore(username),
            "top3": top3_payload(self.ranking),
        }

    def version_payload(self) -> dict[str, Any]:
        return {
            "serverId": self.server_id,
            "serverVersion": self.config.server_version,
        }


def top3_payload(ranking: RankingService) -> list[dict[str, object]]:
    return [e.to_dict() for e in ranking.get_top3()]


def _parse_username(v: Any) -> str:
    if not isinstance(v, str) or not v.strip():
        raise web.HTTPBadRequest(text="username required")
    v = v.strip()
    if len(v) > MAX_USERNAME_LEN:
        raise web.HTTPBadRequest(text="username too long")
    return v


def _parse_score(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise web.HTTPBadRequest(text="score must be an integer")
    if v < 0:
        raise web.HTTPBadRequest(text="score must be non-negative")
    return v


def _cors_headers(config: ServerConfig, origin: str | None) -> dict[str, str]:
    if not origin:
        return {}
    if config.cors_allow_all:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    if origin in config.cors_allowed_origins:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


@web.middleware
async def cors_middleware(request: web.Request, handler):
    if request.method == "OPTIONS":
        origin = request.headers.get("Origin")
        headers = {
            **_cors_headers(request.app["config"], origin),
            "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": "86400",
        }
        return web.Response(status=204, headers=headers)

    resp = await handler(request)
    for k, v in _cors_headers(request.app["config"], request.headers.get("Origin")).items():
        resp.headers[k] = v
    return resp


@web.middleware
async def ranking_errors_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except RankingNotLoadedError:
        raise web.HTTPServiceUnavailable(text="rankings not loaded")
    except RankingPersistError as e:
        logger.error("score update failed: %s", e)
        raise web.HTTPServiceUnavailable(text="ranking storage unavailable")


def create_app(config: ServerConfig, ranking: RankingService | None = None) -> web.Application:
    app = web.Application(middlewares=[cors_middleware, ranking_errors_middleware])
    srv = RankingServer(config, ranking)

    app["config"] = config
    app["srv"] = srv

    async def on_startup(_: web.Application):
        await asyncio.to_thread(srv.start)

    app.on_startup.append(on_startup)

    async def root(_: web.Request):
        return web.json_response(
            {
                "ok": True,
                "service": "ranking-server",
                **srv.version_payload(),
                "endpoints": {
                    "health": "/health",
                    "version": "/version",
                    "leaderboard": "/leaderboard",
                    "highscore": "/highscore/{username}",
                    "submit": "POST /highscore",
                },
            }
        )

    async def health(_: web.Request):
        players = await asyncio.to_thread(srv.ranking.player_count)
        return web.json_response(
            {
                "ok": srv.ranking.loaded,
                "uptimeSec": time.time() - srv.start_time,
                "loaded": srv.ranking.loaded,
                "players": players,
                **srv.version_payload(),
            }
        )

    async def version(_: web.Request):
        return web.json_response(srv.version_payload())

    async def leaderboard(_: web.Request):
        top3 = await asyncio.to_thread(top3_payload, srv.ranking)
        return web.json_response({"top3": top3})

    async def highscore(request: web.Request):
        username = _parse_username(request.match_info.get("username"))
        score = await asyncio.to_thread(srv.ranking.get_user_highscore, username)
        return web.json_response({"username": username, "score": score})

    async def submit(request: web.Request):
        if not srv.quotas.allow(request.remote or "unknown"):
            raise web.HTTPTooManyRequests(text="too many score submissions")
        try:
            body = await request.json()
        except ValueError:
            raise web.HTTPBadRequest(text="invalid json")
        if not isinstance(body, dict):
            raise web.HTTPBadRequest(text="body must be object")
        username = _parse_username(body.get("username"))
        score = _parse_score(body.get("score"))

        # File writes and the service lock stay off the event loop.
        return web.json_response(await asyncio.to_thread(srv.submit, username, score))

    async def preflight(_: web.Request):
        return web.Response(status=204)

    app.router.add_get("/", root)
    app.router.add_get("/health", health)
    app.router.add_get("/version", version)
    app.router.add_get("/leaderboard", leaderboard)
    app.router.add_get("/highscore/{username}", highscore)
    app.router.add_post("/highscore", submit)
    app.router.add_route("OPTIONS", "/{tail:.*}", preflight)

    return app


def main() -> None:
    config = ServerConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(config)
    web.run_app(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
