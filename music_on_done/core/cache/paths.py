"""Cache file locations, namespaced per playlist."""

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from music_on_done.core.config.settings import DEFAULT_CACHE_DIR


@dataclass(frozen=True)
class CachePaths:
    cache_dir: Path
    playlist_cache_file: Path
    stream_cache_file: Path


def short_hash(value: str) -> str:
    """First 8 hex characters of the SHA-256 of value."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:8]


def get_cache_paths(
    playlist_url: str,
    cache_dir: Optional[Union[str, Path]] = None,
) -> CachePaths:
    """
    Cache files for playlist_url.

    Each playlist gets its own pair of files so switching between projects
    with different playlists does not thrash a shared cache.
    """
    base = Path(cache_dir).expanduser() if cache_dir else DEFAULT_CACHE_DIR
    digest = short_hash(playlist_url)

    return CachePaths(
        cache_dir=base,
        playlist_cache_file=base / f"playlist-{digest}.json",
        stream_cache_file=base / f"streams-{digest}.json",
    )
