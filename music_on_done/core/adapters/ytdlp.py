"""
yt-dlp adapters: playlist metadata and stream URL resolution.

Uses --flat-playlist for metadata so no media is downloaded.
"""

import asyncio
import json
from typing import List

from music_on_done.common.logging import get_logger
from music_on_done.core.cache.models import PlaylistEntry
from music_on_done.core.errors import FetchError, ResolveError
from .process import run_command

logger = get_logger(__name__)

FETCH_TIMEOUT_SEC = 60
RESOLVE_TIMEOUT_SEC = 30


def parse_playlist_json(stdout: str) -> List[PlaylistEntry]:
    """
    Turn `yt-dlp --flat-playlist -J` output into playlist entries.

    Entries without an id are dropped. Missing titles become "Unknown",
    missing or non-numeric durations become 0.
    """
    data = json.loads(stdout)
    if not isinstance(data, dict):
        raise ValueError("playlist JSON is not an object")

    entries: List[PlaylistEntry] = []
    for raw in data.get("entries") or []:
        if not isinstance(raw, dict):
            continue

        track_id = str(raw.get("id") or "")
        if not track_id:
            continue

        duration = raw.get("duration")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            duration = 0

        url = raw.get("url") or raw.get("webpage_url") or f"https://www.youtube.com/watch?v={track_id}"

        entries.append(PlaylistEntry(
            id=track_id,
            title=str(raw.get("title") or "Unknown"),
            duration=int(duration),
            url=str(url),
        ))

    return entries


class YtDlpPlaylistFetcher:
    """PlaylistFetcher backed by yt-dlp."""

    def __init__(self, binary: str = "yt-dlp", timeout: float = FETCH_TIMEOUT_SEC):
        self.binary = binary
        self.timeout = timeout

    async def fetch(self, playlist_url: str) -> List[PlaylistEntry]:
        cmd = [self.binary, "--flat-playlist", "-J", playlist_url]
        try:
            result = await run_command(cmd, timeout=self.timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise FetchError("Playlist fetch failed", data={"playlist_url": playlist_url}, cause=e)

        if result.returncode != 0:
            raise FetchError("Playlist fetch failed", data={
                "playlist_url": playlist_url,
                "returncode": result.returncode,
                "stderr": result.stderr.strip()[-500:],
            })

        try:
            return parse_playlist_json(result.stdout)
        except ValueError as e:
            raise FetchError("Playlist metadata unparseable", data={"playlist_url": playlist_url}, cause=e)


class YtDlpStreamResolver:
    """StreamResolver backed by `yt-dlp -g -f bestaudio`."""

    def __init__(self, binary: str = "yt-dlp", timeout: float = RESOLVE_TIMEOUT_SEC):
        self.binary = binary
        self.timeout = timeout

    async def resolve(self, track_url: str) -> str:
        cmd = [self.binary, "-g", "-f", "bestaudio", track_url]
        try:
            result = await run_command(cmd, timeout=self.timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise ResolveError("Stream resolution failed", data={"track_url": track_url}, cause=e)

        # -g may print one URL per format; the first is the one we asked for
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        if result.returncode != 0 or not lines:
            raise ResolveError("Stream resolution failed", data={
                "track_url": track_url,
                "returncode": result.returncode,
            })

        return lines[0]
