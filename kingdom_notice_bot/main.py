"""Entrypoint for the cafe notice Discord notifier."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .config import Settings, get_settings
from .errors import ConfigError
from .notifier import DiscordNotifier
from .pipeline import NoticePipeline
from .scheduler import NoticeScheduler
from .state import CursorStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kingdom-notice-bot",
        description="Forward new Naver cafe notices to a Discord channel.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="check the board a single time and exit",
    )
    return parser


async def serve(settings: Settings, *, once: bool = False) -> int:
    """Connect to Discord and drive the pipeline until stopped."""
    store = CursorStore(settings.db_path)
    notifier = DiscordNotifier(
        settings.discord_bot_token, settings.guild_id, settings.channel_id
    )
    scheduler = NoticeScheduler(
        NoticePipeline(store, notifier),
        interval=settings.poll_interval_minutes * 60,
    )
    ready = asyncio.get_running_loop().create_future()

    try:
        if once:
            await notifier.connect(ready)
            return 0 if await scheduler.tick() else 1

        await asyncio.gather(notifier.connect(ready), scheduler.run_forever(ready))
    finally:
        store.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the notifier workflow."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ConfigError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1

    try:
        return asyncio.run(serve(settings, once=args.once))
    except ConfigError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1
    except KeyboardInterrupt:
        LOGGER.info("종료")
        return 0


if __name__ == "__main__":
    sys.exit(main())
