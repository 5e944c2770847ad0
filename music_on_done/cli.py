#!/usr/bin/env python3
"""
music-on-done - play a short random clip when a tool finishes.

Meant to be wired into a completion hook. Rapid-fire triggers collapse
into one playback; `--cancel` stops whatever is pending.

Exit codes: 1 when a prerequisite is missing (mpv/yt-dlp, the playlist
itself), 0 otherwise, so a broken notification never fails the caller.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from dotenv import load_dotenv

from music_on_done import __version__
from music_on_done.common.logging import (
    generate_invocation_id,
    get_logger,
    set_invocation_id,
    setup_logging,
)
from music_on_done.core.adapters import (
    MpvClipPlayer,
    YtDlpPlaylistFetcher,
    YtDlpStreamResolver,
    check_dependencies,
)
from music_on_done.core.cache.paths import CachePaths, get_cache_paths
from music_on_done.core.config import (
    Config,
    Settings,
    get_settings,
    load_config,
    resolve_effective_config,
    validate_config,
)
from music_on_done.core.errors import ConfigError, DependencyError, FetchError
from music_on_done.modules.debounce import cancel_pending, sigterm_sets
from music_on_done.modules.invocation import InvocationOutcome, run_invocation

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-on-done",
        description="Play a short random clip from a YouTube playlist as a notification.",
    )
    parser.add_argument(
        "--cancel",
        action="store_true",
        help="Cancel the pending invocation (if any) and exit",
    )
    parser.add_argument(
        "--project-dir",
        help="Project directory for per-project overrides (default: $CLAUDE_PROJECT_DIR)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def _play(config: Config, cache_paths: CachePaths, settings: Settings) -> InvocationOutcome:
    cancel_event = asyncio.Event()
    with sigterm_sets(cancel_event):
        return await run_invocation(
            config,
            cache_paths,
            settings.pid_file_path,
            player=MpvClipPlayer(),
            fetcher=YtDlpPlaylistFetcher(),
            resolver=YtDlpStreamResolver(),
            cancel_event=cancel_event,
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = get_settings()

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_file=settings.log_file,
        component="cancel" if args.cancel else "cli",
    )
    set_invocation_id(generate_invocation_id())

    if args.cancel:
        outcome = cancel_pending(settings.pid_file_path)
        logger.debug("Cancel finished", data={"ok": outcome.ok})
        return 0

    try:
        check_dependencies()
    except DependencyError:
        return 1

    try:
        base = load_config()
        config = resolve_effective_config(
            base,
            args.project_dir or settings.project_dir,
            settings.projects_file,
        )
        validate_config(config)
    except ConfigError:
        # Already logged; a misconfigured hook must not fail its caller
        return 0

    cache_paths = get_cache_paths(config.playlist_url, settings.cache_dir)

    try:
        outcome = asyncio.run(_play(config, cache_paths, settings))
    except FetchError:
        return 1
    except Exception:
        logger.error("Unexpected failure", exc_info=True)
        return 0

    logger.debug("Invocation finished", data={"outcome": outcome.value})
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
