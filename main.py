# Filename: main.py

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

import requests
from loguru import logger as loguru_logger

from config import load_config
from forwarder import Forwarder
from leaderboard import Leaderboard
from leaderboard_display import LeaderboardDisplay
from pipeline import FeedPipeline
from websocket_listener import FeedSession, TransportError

logger = logging.getLogger("Main")


def setup_logging(level: str = "INFO"):
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )
    # the filter module logs through loguru; keep it on the same level
    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=logging.getLevelName(numeric_level))


async def listen(config: dict, sniper_url: str, filter_enabled: bool):
    """Watch new listings and forward the ones that pass the filter."""
    logger.info("🚀 Listening for new listings")
    forwarder = None
    if filter_enabled:
        forwarder = Forwarder(sniper_url, timeout=config["FORWARD_TIMEOUT_SECONDS"])
        logger.info(f"Forwarding accepted listings to {forwarder.url}")

    pipeline = FeedPipeline(
        FeedSession(config["FEED_URL"]),
        forwarder=forwarder,
        filter_enabled=filter_enabled,
        handle_trades=False,
    )
    try:
        await pipeline.run()
    finally:
        if forwarder is not None:
            await forwarder.close()
        logger.info(f"Filter summary: {pipeline.listing_filter.get_filter_statistics()}")
        logger.info(f"Pipeline summary: {pipeline.stats}")


async def listen_trades(config: dict, leaderboard_mode: bool, top: int):
    """Log trades as they come, or keep a live leaderboard of net buy pressure."""
    logger.info("📈 Listening for new trades")
    leaderboard = Leaderboard(max_entries=config["LEADERBOARD_MAX_ENTRIES"])
    pipeline = FeedPipeline(
        FeedSession(config["FEED_URL"]),
        leaderboard=leaderboard,
        filter_enabled=False,
        leaderboard_mode=leaderboard_mode,
        handle_listings=False,
    )

    display_task: Optional[asyncio.Task] = None
    if leaderboard_mode:
        display = LeaderboardDisplay(leaderboard, size=top, interval=config["LEADERBOARD_REFRESH_SECONDS"])
        display_task = asyncio.create_task(display.run())

    try:
        await pipeline.run()
    finally:
        if display_task is not None:
            display_task.cancel()
        logger.info(f"Pipeline summary: {pipeline.stats}")


def check_health(sniper_url: str, timeout: float = 5.0) -> int:
    url = f"{sniper_url.rstrip('/')}/health"
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"[HEALTH] {url} unreachable: {e}")
        return 1

    try:
        print(json.dumps(resp.json()))
    except ValueError:
        print(resp.text)
    if not resp.ok:
        logger.error(f"[HEALTH] {url} answered HTTP {resp.status_code}")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pump-sniper", description="pump.fun feed listener")
    sub = parser.add_subparsers(dest="command", required=True)

    p_listen = sub.add_parser("listen", help="Listen for new listings")
    p_listen.add_argument("--sniper-url", default=None, help="sniper url")
    p_listen.add_argument("--no-filter", action="store_true", help="log listings only, never forward")

    p_trades = sub.add_parser("listen-trades", help="Listen on new pump trades")
    p_trades.add_argument("--leaderboard", action="store_true", help="show a live leaderboard instead of raw trades")
    p_trades.add_argument("--top", type=int, default=None, help="leaderboard size")

    p_health = sub.add_parser("health", help="Check if the sniper service is healthy")
    p_health.add_argument("--sniper-url", default=None, help="sniper url")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    setup_logging(config["LOG_LEVEL"])

    if args.command == "health":
        return check_health(args.sniper_url or config["SNIPER_URL"], config["HEALTH_TIMEOUT_SECONDS"])

    try:
        if args.command == "listen":
            filter_enabled = config["FILTER_ENABLED"] and not args.no_filter
            asyncio.run(listen(config, args.sniper_url or config["SNIPER_URL"], filter_enabled))
        else:
            leaderboard_mode = args.leaderboard or config["LEADERBOARD_MODE"]
            asyncio.run(listen_trades(config, leaderboard_mode, args.top or config["LEADERBOARD_SIZE"]))
    except TransportError as e:
        logger.error(f"❌ Feed session ended: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("❌ Stopped by user.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
