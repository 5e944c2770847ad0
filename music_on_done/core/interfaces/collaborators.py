"""
Collaborator Protocols - external capabilities the core depends on.

Implementations:
- YtDlpPlaylistFetcher, YtDlpStreamResolver (music_on_done.core.adapters.ytdlp)
- MpvClipPlayer (music_on_done.core.adapters.mpv)
"""

import asyncio
from typing import TYPE_CHECKING, List, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from music_on_done.core.cache.models import PlaylistEntry


@runtime_checkable
class PlaylistFetcher(Protocol):
    """Fetches playlist metadata."""

    async def fetch(self, playlist_url: str) -> List["PlaylistEntry"]:
        """Return entries in playlist order. Raises FetchError."""
        ...


@runtime_checkable
class StreamResolver(Protocol):
    """Resolves a track page URL to a direct, playable media URL."""

    async def resolve(self, track_url: str) -> str:
        """Return the direct URL. Raises ResolveError."""
        ...


@runtime_checkable
class ClipPlayer(Protocol):
    """Plays a window of a media URL."""

    async def play(
        self,
        url: str,
        start_seconds: int,
        duration_seconds: int,
        volume: int,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Play until done or cancel_event is set. Raises PlaybackError."""
        ...
