#!/usr/bin/env python3
"""Main entry point for the podcast playlist pipeline."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

from podcast_playlist.domain.shared.messages import LogTemplates
from podcast_playlist.utils.logging import setup_logging

if TYPE_CHECKING:
    from podcast_playlist.application.commands.build_playlist import BuildPlaylistResult
    from podcast_playlist.config.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podcast-playlist",
        description="Find the music mentioned in a podcast transcript and match it to catalog tracks.",
    )
    parser.add_argument("transcript", help="Path to a .txt transcript or a .json caption list")
    parser.add_argument(
        "--json", action="store_true", help="Print the full processing report as JSON"
    )
    parser.add_argument(
        "--deadline",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Stop starting new catalog searches after this many seconds",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def render_summary(result: BuildPlaylistResult) -> str:
    """Human-readable summary of a run."""
    report = result.report
    lines = [result.message]
    if report is None:
        return lines[0]

    counts = report.summary()
    lines.append(
        f"{counts.recommendations} recommendations: {counts.resolved} resolved, "
        f"{counts.no_match} without a match, {counts.search_failed} failed"
    )
    for item in report.resolved:
        rec = item.recommendation
        lines.append(
            f"  + {rec.display_text}  ->  {item.track.display_text} "
            f"[{item.track.service_uri}] ({item.similarity:.2f})"
        )
    for item in report.unresolved:
        rec = item.recommendation
        detail = item.cause.value if item.cause else item.reason.value
        lines.append(f"  - {rec.display_text}  ({detail})")
    return "\n".join(lines)


async def run(args: argparse.Namespace, settings: Settings) -> int:
    from podcast_playlist.application.commands.build_playlist import BuildPlaylistCommand
    from podcast_playlist.config.container import create_container

    container = create_container(settings)
    try:
        command = BuildPlaylistCommand(
            transcript_id=args.transcript,
            deadline_seconds=args.deadline or settings.pipeline.deadline_seconds,
        )
        result = await container.build_playlist_handler.handle(command)
    finally:
        await container.shutdown()

    if args.json and result.report is not None:
        print(result.report.model_dump_json(indent=2))
    else:
        print(render_summary(result))
    return 0 if result.is_success else 1


def main(argv: Sequence[str] | None = None) -> int:
    from podcast_playlist.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING, settings.environment)

    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
