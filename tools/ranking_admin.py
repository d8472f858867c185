"""Inspect or patch ranking files while the server is stopped.

  python tools/ranking_admin.py show
  python tools/ranking_admin.py get alice
  python tools/ranking_admin.py --scores data/ranking.data --top3 data/top3.data submit alice 120
"""

from __future__ import annotations

import argparse
import logging

from ranking_server.ranking.errors import RankingError
from ranking_server.ranking.service import RankingService


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--scores", default="ranking.data")
    ap.add_argument("--top3", default="top3.data")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="cmd", required=True)
    sub.add_parser("show")
    p_get = sub.add_parser("get")
    p_get.add_argument("username")
    p_submit = sub.add_parser("submit")
    p_submit.add_argument("username")
    p_submit.add_argument("score", type=int)
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    ranking = RankingService()
    try:
        ranking.load_rankings(args.scores, args.top3)
        if args.cmd == "show":
            for i, e in enumerate(ranking.get_top3(), start=1):
                print(f"{i}. {e.username} : {e.score}")
        elif args.cmd == "get":
            print(ranking.get_user_highscore(args.username))
        elif args.cmd == "submit":
            if args.score < 0:
                ap.error("score must be non-negative")
            if ranking.refresh_user_highscore(args.username, args.score):
                print(f"New best for {args.username}: {args.score}")
            else:
                print(f"Kept best for {args.username}: {ranking.get_user_highscore(args.username)}")
    except RankingError as e:
        print(f"error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
