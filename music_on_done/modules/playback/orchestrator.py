"""
Playback Orchestrator - plays the chosen clip while topping up the stream pool.

Both run concurrently and are joined before returning. Pool upkeep can
fail in any way without affecting playback, and its failures are never
surfaced.
"""

import asyncio
from pathlib import Path
from typing import List, Optional, Union

from music_on_done.common.logging import get_logger
from music_on_done.core.cache.models import PlaylistEntry, StreamCacheRecord
from music_on_done.core.cache.stream_cache import replenish_stream_pool, write_stream_cache
from music_on_done.core.errors import CacheWriteError
from music_on_done.core.interfaces import ClipPlayer, StreamResolver
from .selection import ClipWindow, TrackSelection

logger = get_logger(__name__)


async def replenish_and_save(
    entries: List[PlaylistEntry],
    stream_record: StreamCacheRecord,
    playlist_url: str,
    stream_cache_file: Union[str, Path],
    resolver: Optional[StreamResolver] = None,
) -> StreamCacheRecord:
    """
    Top up the stream pool and persist it.

    Raises:
        CacheWriteError: the updated pool could not be written
    """
    updated = await replenish_stream_pool(entries, stream_record, playlist_url, resolver=resolver)
    try:
        await asyncio.to_thread(write_stream_cache, stream_cache_file, updated)
    except OSError as e:
        raise CacheWriteError("Could not write stream cache", data={
            "path": str(stream_cache_file),
        }, cause=e)
    return updated


async def _upkeep(coro) -> None:
    """Run pool upkeep, swallowing every failure."""
    try:
        await coro
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.debug("Stream pool upkeep failed", data={"error": str(e)})


async def play_and_replenish(
    selection: TrackSelection,
    window: ClipWindow,
    volume: int,
    entries: List[PlaylistEntry],
    stream_record: StreamCacheRecord,
    playlist_url: str,
    stream_cache_file: Union[str, Path],
    player: ClipPlayer,
    resolver: Optional[StreamResolver] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """
    Play window of the selected track and replenish the pool concurrently.

    Raises:
        PlaybackError: from the player, after upkeep has finished too
    """
    logger.info("Playing clip", data={
        "track_id": selection.track.id,
        "title": selection.track.title,
        "from_pool": selection.from_pool,
        "start": window.start_seconds,
        "duration": window.duration_seconds,
    })

    play_result, _ = await asyncio.gather(
        player.play(
            selection.play_url,
            window.start_seconds,
            window.duration_seconds,
            volume,
            cancel_event=cancel_event,
        ),
        _upkeep(replenish_and_save(
            entries, stream_record, playlist_url, stream_cache_file, resolver=resolver,
        )),
        return_exceptions=True,
    )

    if isinstance(play_result, BaseException):
        raise play_result
