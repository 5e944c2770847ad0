"""
Pytest configuration for music-on-done tests.

Adds the project root to sys.path so 'from music_on_done...' imports work
without installing. Defines markers and shared fixtures, including
in-memory doubles for the yt-dlp and mpv collaborators.
"""
import sys
import asyncio
import random
import pytest
from pathlib import Path
from typing import Dict, List, Optional, Set

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from music_on_done.core.cache.models import PlaylistEntry, StreamCacheEntry, StreamCacheRecord, now_ms
from music_on_done.core.cache.paths import get_cache_paths
from music_on_done.core.config.settings import Config
from music_on_done.core.errors import FetchError, PlaybackError, ResolveError


PLAYLIST_URL = "https://www.youtube.com/playlist?list=PLtest"
MINUTE_MS = 60 * 1000


# =============================================================================
# Pytest Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "asyncio: Async tests")
    config.addinivalue_line("markers", "integration: Tests that spawn real subprocesses")


# =============================================================================
# Collaborator Doubles
# =============================================================================

class FakeFetcher:
    """PlaylistFetcher returning a fixed list, or failing."""

    def __init__(self, entries: Optional[List[PlaylistEntry]] = None, fail: bool = False):
        self.entries = entries or []
        self.fail = fail
        self.calls: List[str] = []

    async def fetch(self, playlist_url: str) -> List[PlaylistEntry]:
        self.calls.append(playlist_url)
        if self.fail:
            raise FetchError("fetch failed", data={"playlist_url": playlist_url})
        return list(self.entries)


class FakeResolver:
    """StreamResolver mapping a track URL to '<url>#stream'; URLs in fail_urls raise."""

    def __init__(self, fail_urls: Optional[Set[str]] = None, error: Optional[Exception] = None):
        self.fail_urls = fail_urls or set()
        self.error = error
        self.calls: List[str] = []

    async def resolve(self, track_url: str) -> str:
        self.calls.append(track_url)
        if self.error is not None:
            raise self.error
        if track_url in self.fail_urls:
            raise ResolveError("resolve failed", data={"track_url": track_url})
        return f"{track_url}#stream"


class FakePlayer:
    """ClipPlayer recording what it was asked to play."""

    def __init__(self, fail: bool = False, hold: Optional[asyncio.Event] = None):
        self.fail = fail
        self.hold = hold
        self.calls: List[Dict] = []

    async def play(self, url, start_seconds, duration_seconds, volume, cancel_event=None):
        self.calls.append({
            "url": url,
            "start": start_seconds,
            "duration": duration_seconds,
            "volume": volume,
        })
        if self.hold is not None:
            await self.hold.wait()
        if self.fail:
            raise PlaybackError("player failed")


# =============================================================================
# Shared Fixtures
# =============================================================================

def make_entries(count: int, duration: int = 200) -> List[PlaylistEntry]:
    return [
        PlaylistEntry(
            id=f"t{i}",
            title=f"Track {i}",
            duration=duration,
            url=f"https://www.youtube.com/watch?v=t{i}",
        )
        for i in range(1, count + 1)
    ]


def make_stream(track: PlaylistEntry, resolved_at: Optional[int] = None) -> StreamCacheEntry:
    return StreamCacheEntry(
        track_id=track.id,
        track_url=track.url,
        stream_url=f"{track.url}#stream",
        resolved_at=now_ms() if resolved_at is None else resolved_at,
    )


@pytest.fixture
def project_root() -> Path:
    """Return project root path."""
    return PROJECT_ROOT


@pytest.fixture
def entries() -> List[PlaylistEntry]:
    """Seven tracks of 200 seconds each."""
    return make_entries(7)


@pytest.fixture
def config() -> Config:
    return Config(
        playlist_url=PLAYLIST_URL,
        min_duration=5,
        max_duration=10,
        cache_ttl_minutes=60,
        volume=75,
        delay=0,
    )


@pytest.fixture
def cache_paths(tmp_path):
    return get_cache_paths(PLAYLIST_URL, tmp_path / "cache")


@pytest.fixture
def pid_file(tmp_path) -> Path:
    return tmp_path / "run" / "pending.pid"


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def empty_pool() -> StreamCacheRecord:
    return StreamCacheRecord(entries=[], playlist_url=PLAYLIST_URL)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's real configuration out of tests."""
    for var in (
        "YOUTUBE_PLAYLIST_URL",
        "MUSIC_ON_DONE_MIN_DURATION",
        "MUSIC_ON_DONE_MAX_DURATION",
        "MUSIC_ON_DONE_CACHE_TTL",
        "MUSIC_ON_DONE_VOLUME",
        "MUSIC_ON_DONE_DELAY",
        "MUSIC_ON_DONE_CACHE_DIR",
        "MUSIC_ON_DONE_PID_FILE",
        "MUSIC_ON_DONE_PROJECTS_FILE",
        "CLAUDE_PROJECT_DIR",
        "LOG_LEVEL",
        "LOG_FILE",
        "LOG_JSON_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
