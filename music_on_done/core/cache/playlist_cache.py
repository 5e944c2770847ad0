"""
Playlist Cache - TTL-gated playlist snapshot per playlist URL.

Usage:
    entries = await get_cached_or_fetch_playlist(config, paths.playlist_cache_file)
"""

from pathlib import Path
from typing import List, Optional, Union

from music_on_done.common.logging import get_logger
from music_on_done.common.outcome import Outcome
from music_on_done.core.config.settings import Config
from music_on_done.core.interfaces import PlaylistFetcher
from .models import PlaylistCacheRecord, PlaylistEntry, age_minutes, now_ms
from .store import read_record, write_record

logger = get_logger(__name__)


def load_cache(cache_file: Union[str, Path]) -> Outcome[PlaylistCacheRecord]:
    """Read the playlist cache, keeping the failure reason."""
    return read_record(cache_file, PlaylistCacheRecord.from_dict)


def read_cache(cache_file: Union[str, Path]) -> Optional[PlaylistCacheRecord]:
    """Read the playlist cache. None if missing or malformed; never raises."""
    return load_cache(cache_file).unwrap_or(None)


def write_cache(cache_file: Union[str, Path], record: PlaylistCacheRecord) -> None:
    """Persist record, replacing whatever was there."""
    write_record(cache_file, record.to_dict())


def is_cache_valid(
    record: PlaylistCacheRecord,
    config: Config,
    now: Optional[int] = None,
) -> bool:
    """
    True iff record belongs to the configured playlist and is younger than
    the TTL. A record aged exactly the TTL is stale.
    """
    if record.playlist_url != config.playlist_url:
        return False

    now = now_ms() if now is None else now
    return age_minutes(record.fetched_at, now) < config.cache_ttl_minutes


async def get_cached_or_fetch_playlist(
    config: Config,
    cache_file: Union[str, Path],
    fetcher: Optional[PlaylistFetcher] = None,
) -> List[PlaylistEntry]:
    """
    Return cached entries if still valid, otherwise fetch, persist and
    return fresh ones.

    Raises:
        FetchError: the fetch failed; nothing downstream can run without a playlist
    """
    record = read_cache(cache_file)

    if record is not None and is_cache_valid(record, config):
        logger.debug("Playlist cache hit", data={"entries": len(record.entries)})
        return record.entries

    if fetcher is None:
        from music_on_done.core.adapters.ytdlp import YtDlpPlaylistFetcher
        fetcher = YtDlpPlaylistFetcher()

    entries = await fetcher.fetch(config.playlist_url)
    logger.info("Fetched playlist", data={
        "playlist_url": config.playlist_url, "entries": len(entries),
    })

    try:
        write_cache(cache_file, PlaylistCacheRecord(
            entries=list(entries),
            fetched_at=now_ms(),
            playlist_url=config.playlist_url,
        ))
    except OSError as e:
        # Next run refetches; this one still has its entries
        logger.warning("Could not write playlist cache", data={"path": str(cache_file), "error": str(e)})

    return list(entries)
