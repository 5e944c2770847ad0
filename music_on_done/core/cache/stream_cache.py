"""
Stream Pool Cache - resolved direct-media URLs kept warm per playlist.

Resolved URLs are short-lived CDN grants. Keeping a small pool of them
lets most invocations start playback immediately; the pool is topped up
in the background while a clip plays.

Usage:
    record = stream_cache_for(read_stream_cache(path), config.playlist_url)
    hit = pick_track_with_cached_stream(entries, record)
    updated = await replenish_stream_pool(entries, record, config.playlist_url)
    write_stream_cache(path, updated)
"""

import random
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from music_on_done.common.logging import get_logger
from music_on_done.common.outcome import Outcome
from music_on_done.core.errors import ResolveError
from music_on_done.core.interfaces import StreamResolver
from .models import (
    PlaylistEntry,
    StreamCacheEntry,
    StreamCacheRecord,
    age_minutes,
    now_ms,
)
from .store import read_record, write_record

logger = get_logger(__name__)

STREAM_TTL_MINUTES = 300
STREAM_POOL_TARGET = 5


class CachedPick(NamedTuple):
    track: PlaylistEntry
    stream: StreamCacheEntry


def load_stream_cache(cache_file: Union[str, Path]) -> Outcome[StreamCacheRecord]:
    """Read the stream cache, keeping the failure reason."""
    return read_record(cache_file, StreamCacheRecord.from_dict)


def read_stream_cache(cache_file: Union[str, Path]) -> Optional[StreamCacheRecord]:
    """Read the stream cache. None if missing or malformed; never raises."""
    return load_stream_cache(cache_file).unwrap_or(None)


def write_stream_cache(cache_file: Union[str, Path], record: StreamCacheRecord) -> None:
    """Persist record, replacing whatever was there."""
    write_record(cache_file, record.to_dict())


def stream_cache_for(
    record: Optional[StreamCacheRecord],
    playlist_url: str,
) -> StreamCacheRecord:
    """Return record if it belongs to playlist_url, else an empty pool for it."""
    if record is not None and record.playlist_url == playlist_url:
        return record
    return StreamCacheRecord(entries=[], playlist_url=playlist_url)


def is_stream_entry_valid(entry: StreamCacheEntry, now: Optional[int] = None) -> bool:
    """True while the entry is younger than STREAM_TTL_MINUTES (strict)."""
    now = now_ms() if now is None else now
    return age_minutes(entry.resolved_at, now) < STREAM_TTL_MINUTES


def get_valid_stream_entries(
    record: StreamCacheRecord,
    now: Optional[int] = None,
) -> List[StreamCacheEntry]:
    now = now_ms() if now is None else now
    return [e for e in record.entries if is_stream_entry_valid(e, now)]


def pick_track_with_cached_stream(
    playlist_entries: List[PlaylistEntry],
    record: StreamCacheRecord,
    rng: Optional[random.Random] = None,
    now: Optional[int] = None,
) -> Optional[CachedPick]:
    """
    Pick a random track that has a valid cached stream.

    Only streams whose track is still in the playlist are considered, so an
    edited playlist never plays a removed track. None if nothing matches.
    """
    rng = rng or random.Random()
    tracks_by_id = {e.id: e for e in playlist_entries}

    candidates = [
        s for s in get_valid_stream_entries(record, now)
        if s.track_id in tracks_by_id
    ]
    if not candidates:
        return None

    stream = rng.choice(candidates)
    return CachedPick(track=tracks_by_id[stream.track_id], stream=stream)


async def replenish_stream_pool(
    playlist_entries: List[PlaylistEntry],
    current: StreamCacheRecord,
    playlist_url: str,
    resolver: Optional[StreamResolver] = None,
) -> StreamCacheRecord:
    """
    Resolve uncached tracks until the pool holds STREAM_POOL_TARGET entries.

    Expired entries are dropped. Candidates are tried one at a time in
    playlist order to avoid bursts against the resolver; a track that fails
    to resolve is skipped. The result is always stamped with playlist_url.
    """
    if resolver is None:
        from music_on_done.core.adapters.ytdlp import YtDlpStreamResolver
        resolver = YtDlpStreamResolver()

    pool = get_valid_stream_entries(current)
    cached_ids = {e.track_id for e in pool}
    uncached = [t for t in playlist_entries if t.id not in cached_ids]

    resolved = 0
    failed = 0
    for track in uncached:
        if len(pool) >= STREAM_POOL_TARGET:
            break

        try:
            stream_url = await resolver.resolve(track.url)
        except ResolveError:
            failed += 1
            continue
        except Exception as e:
            logger.debug("Unexpected resolver failure, skipping track", data={
                "track_id": track.id, "error": repr(e),
            })
            failed += 1
            continue

        pool.append(StreamCacheEntry(
            track_id=track.id,
            track_url=track.url,
            stream_url=stream_url,
            resolved_at=now_ms(),
        ))
        cached_ids.add(track.id)
        resolved += 1

    logger.debug("Stream pool replenished", data={
        "pool_size": len(pool), "resolved": resolved, "failed": failed,
    })

    return StreamCacheRecord(entries=pool, playlist_url=playlist_url)
