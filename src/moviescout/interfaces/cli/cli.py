from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from moviescout.application.app_controller import AppController
from moviescout.application.scroll_continuation import ScrollContinuation
from moviescout.infrastructure.config import AppConfig, load_config
from moviescout.infrastructure.logging.setup import configure_logging
from moviescout.infrastructure.viewport.manual_observer import ManualVisibilityObserver
from moviescout.interfaces.cli.presenter import render_trending, render_view
from moviescout.interfaces.composition import MissingApiToken, session

log = structlog.get_logger(__name__)

_SENTINEL = "results-sentinel"


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="moviescout")

    # Config wiring flags (no business logic)
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    browse = sub.add_parser("browse", help="List popular movies.")
    browse.add_argument("--pages", type=int, default=1, help="Pages to scroll through.")

    search = sub.add_parser("search", help="Search the catalog.")
    search.add_argument("query", nargs="+", help="Search text.")
    search.add_argument("--pages", type=int, default=1, help="Pages to scroll through.")

    sub.add_parser("trending", help="Show the most-searched movies.")

    return parser.parse_args(argv)


async def _type(controller: AppController, text: str) -> None:
    """Feed *text* keystroke by keystroke, like a search box would."""
    for i in range(1, len(text) + 1):
        controller.set_search_text(text[:i])
    await controller.wait_idle()


async def _scroll(
    controller: AppController,
    scroll: ScrollContinuation,
    observer: ManualVisibilityObserver,
    pages: int,
) -> None:
    """Reveal the sentinel once per extra page."""
    for _ in range(pages - 1):
        if not controller.view().has_more:
            break
        observer.emit(_SENTINEL, 1.0)
        await scroll.wait()
        observer.emit(_SENTINEL, 0.0)


async def run(args: argparse.Namespace, config: AppConfig) -> int:
    """Run one subcommand; exit code 1 when the listing shown has an error."""
    if args.command == "trending":
        async with session(config) as controller:
            await controller.load_trending()
            print(render_trending(controller.view().trending))
        return 0

    observer = ManualVisibilityObserver()
    async with session(config) as controller:
        with controller.scroll_continuation(observer, _SENTINEL) as scroll:
            await controller.start()
            if args.command == "search":
                await _type(controller, " ".join(args.query))
            await _scroll(controller, scroll, observer, args.pages)

        view = controller.view()
        print(render_view(view))
        return 1 if view.error_message else 0


def start(argv: Iterable[str] | None = None) -> int:
    """Process entrypoint. Loads config exactly once, then runs the command."""
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=cli_overrides,
    )
    configure_logging(config)

    try:
        return asyncio.run(run(args, config))
    except MissingApiToken as e:
        log.error("startup_failed", error=str(e))
        return 2


if __name__ == "__main__":
    raise SystemExit(start())
