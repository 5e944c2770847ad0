"""
Domain Models for the playlist and stream caches.

All models have to_dict() and from_dict() for JSON serialization. Keys on
disk are camelCase so existing cache files stay readable.

Timestamps are epoch milliseconds.
"""

import time
from dataclasses import dataclass, field
from typing import List


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def age_minutes(timestamp_ms: int, now: int) -> float:
    return (now - timestamp_ms) / (1000 * 60)


@dataclass(frozen=True)
class PlaylistEntry:
    """A single playlist track as reported by the metadata fetch."""
    id: str
    title: str
    duration: int  # seconds, 0 = unknown
    url: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'duration': self.duration,
            'url': self.url,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'PlaylistEntry':
        return cls(
            id=str(d['id']),
            title=str(d.get('title', 'Unknown')),
            duration=int(d.get('duration') or 0),
            url=str(d['url']),
        )


@dataclass
class PlaylistCacheRecord:
    """Snapshot of a playlist. Replaced wholesale on every fetch."""
    entries: List[PlaylistEntry]
    fetched_at: int
    playlist_url: str

    def to_dict(self) -> dict:
        return {
            'entries': [e.to_dict() for e in self.entries],
            'fetchedAt': self.fetched_at,
            'playlistUrl': self.playlist_url,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'PlaylistCacheRecord':
        return cls(
            entries=[PlaylistEntry.from_dict(e) for e in d['entries']],
            fetched_at=int(d['fetchedAt']),
            playlist_url=str(d['playlistUrl']),
        )


@dataclass(frozen=True)
class StreamCacheEntry:
    """A resolved direct-media URL for one track."""
    track_id: str
    track_url: str
    stream_url: str
    resolved_at: int

    def to_dict(self) -> dict:
        return {
            'trackId': self.track_id,
            'trackUrl': self.track_url,
            'streamUrl': self.stream_url,
            'resolvedAt': self.resolved_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'StreamCacheEntry':
        return cls(
            track_id=str(d['trackId']),
            track_url=str(d['trackUrl']),
            stream_url=str(d['streamUrl']),
            resolved_at=int(d['resolvedAt']),
        )


@dataclass
class StreamCacheRecord:
    """
    Pool of resolved stream URLs for one playlist.

    At most one entry per track_id.
    """
    entries: List[StreamCacheEntry] = field(default_factory=list)
    playlist_url: str = ""

    def to_dict(self) -> dict:
        return {
            'entries': [e.to_dict() for e in self.entries],
            'playlistUrl': self.playlist_url,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'StreamCacheRecord':
        entries: List[StreamCacheEntry] = []
        seen = set()
        for raw in d['entries']:
            entry = StreamCacheEntry.from_dict(raw)
            if entry.track_id in seen:
                continue
            seen.add(entry.track_id)
            entries.append(entry)
        return cls(entries=entries, playlist_url=str(d['playlistUrl']))
