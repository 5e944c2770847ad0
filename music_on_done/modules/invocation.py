"""
Invocation - one hook trigger, from registration to cleanup.

    register PID -> delay (cancellable) -> still registered? -> playlist
    -> pick track (warm stream preferred) -> play + replenish pool -> release PID

A storm of triggers collapses into one playback: each new invocation
overwrites the marker, and every earlier one notices after its delay and
bows out.
"""

import asyncio
import os
import random
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from music_on_done.common.logging import get_logger
from music_on_done.core.cache.paths import CachePaths
from music_on_done.core.cache.playlist_cache import get_cached_or_fetch_playlist
from music_on_done.core.cache.stream_cache import read_stream_cache, stream_cache_for
from music_on_done.core.config.settings import Config
from music_on_done.core.errors import CancellationRace, PlaybackError
from music_on_done.core.interfaces import ClipPlayer, PlaylistFetcher, StreamResolver
from .debounce.delay import wait_for_delay
from .debounce.pid_marker import is_our_pid_file, read_pid_file, remove_pid_file, write_pid_file
from .playback.orchestrator import play_and_replenish
from .playback.selection import select_clip_window, select_track

logger = get_logger(__name__)


class InvocationOutcome(str, Enum):
    PLAYED = "played"
    CANCELLED = "cancelled"
    SUPERSEDED = "superseded"
    PLAYBACK_FAILED = "playback_failed"


def release_pid_file(pid: int, pid_file_path: Union[str, Path]) -> None:
    """
    Remove the marker on exit, unless a newer invocation owns it by now.

    Removing a newer owner's marker would make that invocation believe it
    was superseded too, and nothing would play.
    """
    if read_pid_file(pid_file_path) == pid:
        remove_pid_file(pid_file_path)


async def _wait_until_due(
    config: Config,
    pid: int,
    pid_file_path: Union[str, Path],
    cancel_event: asyncio.Event,
) -> None:
    """
    Raises:
        CancellationRace: cancelled during the delay, or superseded
    """
    if await wait_for_delay(config.delay, cancel_event):
        raise CancellationRace("Cancelled during delay", data={"reason": InvocationOutcome.CANCELLED.value})

    if not is_our_pid_file(pid, pid_file_path):
        raise CancellationRace("Superseded by a newer invocation", data={"reason": InvocationOutcome.SUPERSEDED.value})


async def run_invocation(
    config: Config,
    cache_paths: CachePaths,
    pid_file_path: Union[str, Path],
    player: ClipPlayer,
    fetcher: Optional[PlaylistFetcher] = None,
    resolver: Optional[StreamResolver] = None,
    cancel_event: Optional[asyncio.Event] = None,
    pid: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> InvocationOutcome:
    """
    Run one invocation to completion.

    Returns how the run ended. Cancellation and supersession are normal
    outcomes, not errors.

    Raises:
        FetchError: the playlist could not be obtained
    """
    pid = os.getpid() if pid is None else pid
    cancel_event = cancel_event or asyncio.Event()
    rng = rng or random.Random()

    write_pid_file(pid, pid_file_path)
    try:
        try:
            await _wait_until_due(config, pid, pid_file_path, cancel_event)
        except CancellationRace as race:
            return InvocationOutcome(race.data["reason"])

        entries = await get_cached_or_fetch_playlist(config, cache_paths.playlist_cache_file, fetcher=fetcher)
        stream_record = stream_cache_for(read_stream_cache(cache_paths.stream_cache_file), config.playlist_url)

        selection = select_track(entries, stream_record, rng=rng)
        window = select_clip_window(selection.track, config.min_duration, config.max_duration, rng=rng)

        try:
            await play_and_replenish(
                selection,
                window,
                config.volume,
                entries,
                stream_record,
                config.playlist_url,
                cache_paths.stream_cache_file,
                player=player,
                resolver=resolver,
                cancel_event=cancel_event,
            )
        except PlaybackError:
            return InvocationOutcome.PLAYBACK_FAILED

        return InvocationOutcome.CANCELLED if cancel_event.is_set() else InvocationOutcome.PLAYED
    finally:
        try:
            release_pid_file(pid, pid_file_path)
        except OSError as e:
            logger.debug("Could not remove PID marker", data={"error": str(e)})
