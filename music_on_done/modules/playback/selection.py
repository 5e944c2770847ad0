"""
Track and clip-window selection.

All randomness goes through an injectable random.Random so tests can pin
the sequence.
"""

import random
from dataclasses import dataclass
from typing import List, Optional

from music_on_done.core.cache.models import PlaylistEntry, StreamCacheRecord
from music_on_done.core.cache.stream_cache import pick_track_with_cached_stream
from music_on_done.core.errors import EmptyPlaylistError


@dataclass(frozen=True)
class TrackSelection:
    track: PlaylistEntry
    play_url: str
    from_pool: bool


@dataclass(frozen=True)
class ClipWindow:
    start_seconds: int
    duration_seconds: int


def pick_random_start_offset(
    track_duration: int,
    clip_duration: int,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Random start offset so the clip fits inside the track.

    0 when the duration is unknown (<= 0) or the track is not longer than
    the clip; the clip then just ends early.
    """
    if track_duration <= 0 or track_duration <= clip_duration:
        return 0
    rng = rng or random.Random()
    return rng.randint(0, track_duration - clip_duration)


def get_random_duration(
    min_duration: int,
    max_duration: int,
    rng: Optional[random.Random] = None,
) -> int:
    """Random clip length in [min_duration, max_duration]."""
    if min_duration == max_duration:
        return min_duration
    rng = rng or random.Random()
    return rng.randint(min_duration, max_duration)


def pick_random_track(
    entries: List[PlaylistEntry],
    rng: Optional[random.Random] = None,
) -> PlaylistEntry:
    if not entries:
        raise EmptyPlaylistError("Playlist is empty, no tracks to pick from")
    rng = rng or random.Random()
    return rng.choice(entries)


def select_track(
    entries: List[PlaylistEntry],
    stream_record: StreamCacheRecord,
    rng: Optional[random.Random] = None,
) -> TrackSelection:
    """
    Prefer a track with a warm stream URL; otherwise any track, played
    from its page URL.

    Raises:
        EmptyPlaylistError: entries is empty
    """
    hit = pick_track_with_cached_stream(entries, stream_record, rng=rng)
    if hit is not None:
        return TrackSelection(track=hit.track, play_url=hit.stream.stream_url, from_pool=True)

    track = pick_random_track(entries, rng=rng)
    return TrackSelection(track=track, play_url=track.url, from_pool=False)


def select_clip_window(
    track: PlaylistEntry,
    min_duration: int,
    max_duration: int,
    rng: Optional[random.Random] = None,
) -> ClipWindow:
    duration = get_random_duration(min_duration, max_duration, rng=rng)
    start = pick_random_start_offset(track.duration, duration, rng=rng)
    return ClipWindow(start_seconds=start, duration_seconds=duration)
