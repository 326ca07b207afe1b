"""
Command-line front-end for browsing Jikan and Hianime.

Example:
    python -m jikan_client.cli search --q "steins gate" --type tv
    python -m jikan_client.cli watch-search "Steins;Gate" --best
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Sequence

from .client import JikanClient, fetch_anime_detail
from .config import Settings, configure_logging, load_settings
from .errors import JikanError
from .hianime import HianimeClient, HianimeError, find_best_match


def pretty_print(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def do_search(args: argparse.Namespace, jikan: JikanClient, hianime: HianimeClient) -> None:
    params: Dict[str, Any] = {
        "q": args.q,
        "type": args.type,
        "status": args.status,
        "genres": args.genres,
        "order_by": args.order_by,
        "sort": args.sort,
        "page": args.page,
    }
    pretty_print(jikan.search_anime(**params))


def do_top(args: argparse.Namespace, jikan: JikanClient, hianime: HianimeClient) -> None:
    pretty_print(jikan.get_top_anime(args.filter, args.page))


def do_season(args: argparse.Namespace, jikan: JikanClient, hianime: HianimeClient) -> None:
    if args.upcoming:
        pretty_print(jikan.get_season_upcoming(args.page))
    else:
        pretty_print(jikan.get_season_now(args.page))


def do_anime(args: argparse.Namespace, jikan: JikanClient, hianime: HianimeClient) -> None:
    detail, recommendations = fetch_anime_detail(jikan, args.id)
    pretty_print({"anime": detail, "recommendations": recommendations})


def do_genres(args: argparse.Namespace, jikan: JikanClient, hianime: HianimeClient) -> None:
    pretty_print(jikan.get_genres())


def do_watch_search(args: argparse.Namespace, jikan: JikanClient, hianime: HianimeClient) -> None:
    data = hianime.search(args.query, page=args.page)
    if args.best:
        pretty_print(find_best_match(args.query, data.get("animes") or []))
    else:
        pretty_print(data)


def do_episodes(args: argparse.Namespace, jikan: JikanClient, hianime: HianimeClient) -> None:
    pretty_print(hianime.get_episodes(args.anime_id))


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse anime via the Jikan and Hianime APIs.")
    parser.add_argument("--jikan-url", help="Jikan base URL. Can also set env JIKAN_API_BASE.")
    parser.add_argument("--hianime-url", help="Hianime base URL. Can also set env HIANIME_API_BASE.")
    parser.add_argument("--log-level", help="Logging level. Can also set env LOG_LEVEL.")

    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="search anime with filters")
    search.add_argument("--q")
    search.add_argument("--type", help="tv, movie, ova, special, ona, music")
    search.add_argument("--status", help="airing, complete, upcoming")
    search.add_argument("--genres", help="comma separated genre ids")
    search.add_argument("--order-by")
    search.add_argument("--sort", choices=["asc", "desc"])
    search.add_argument("--page", type=int, default=1)
    search.set_defaults(func=do_search)

    top = sub.add_parser("top", help="top anime")
    top.add_argument("--filter", choices=["airing", "upcoming", "bypopularity", "favorite"])
    top.add_argument("--page", type=int, default=1)
    top.set_defaults(func=do_top)

    season = sub.add_parser("season", help="current or upcoming season")
    season.add_argument("--upcoming", action="store_true")
    season.add_argument("--page", type=int, default=1)
    season.set_defaults(func=do_season)

    anime = sub.add_parser("anime", help="anime details with recommendations")
    anime.add_argument("id", type=int)
    anime.set_defaults(func=do_anime)

    genres = sub.add_parser("genres", help="list anime genres")
    genres.set_defaults(func=do_genres)

    watch = sub.add_parser("watch-search", help="search the streaming catalog")
    watch.add_argument("query")
    watch.add_argument("--page", type=int, default=1)
    watch.add_argument("--best", action="store_true", help="print only the best match")
    watch.set_defaults(func=do_watch_search)

    episodes = sub.add_parser("episodes", help="list episodes of a streaming catalog entry")
    episodes.add_argument("anime_id")
    episodes.set_defaults(func=do_episodes)

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    args = parse_args(argv)
    settings = settings or load_settings()
    configure_logging(args.log_level or settings.log_level)

    overrides: Dict[str, Any] = {}
    if args.jikan_url:
        overrides["base_url"] = args.jikan_url
    jikan = JikanClient.from_settings(settings, **overrides)
    hianime = HianimeClient(
        base_url=args.hianime_url or settings.hianime_api_base,
        timeout=settings.timeout,
    )

    try:
        args.func(args, jikan, hianime)
    except (JikanError, HianimeError) as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(1)
