"""
Cache - playlist snapshots and the resolved stream pool.

Storage: one pair of JSON files per playlist under the cache dir
(playlist-<hash>.json, streams-<hash>.json).
"""

from .models import (
    PlaylistEntry,
    PlaylistCacheRecord,
    StreamCacheEntry,
    StreamCacheRecord,
    now_ms,
)
from .paths import CachePaths, get_cache_paths, short_hash
from .playlist_cache import (
    read_cache,
    write_cache,
    is_cache_valid,
    get_cached_or_fetch_playlist,
)
from .stream_cache import (
    STREAM_TTL_MINUTES,
    STREAM_POOL_TARGET,
    CachedPick,
    read_stream_cache,
    write_stream_cache,
    stream_cache_for,
    is_stream_entry_valid,
    get_valid_stream_entries,
    pick_track_with_cached_stream,
    replenish_stream_pool,
)

__all__ = [
    # Models
    'PlaylistEntry',
    'PlaylistCacheRecord',
    'StreamCacheEntry',
    'StreamCacheRecord',
    'now_ms',
    # Paths
    'CachePaths',
    'get_cache_paths',
    'short_hash',
    # Playlist
    'read_cache',
    'write_cache',
    'is_cache_valid',
    'get_cached_or_fetch_playlist',
    # Streams
    'STREAM_TTL_MINUTES',
    'STREAM_POOL_TARGET',
    'CachedPick',
    'read_stream_cache',
    'write_stream_cache',
    'stream_cache_for',
    'is_stream_entry_valid',
    'get_valid_stream_entries',
    'pick_track_with_cached_stream',
    'replenish_stream_pool',
]
