"""
Playback - choose a clip and play it.

- selection:    track pick, clip length and start offset
- orchestrator: playback plus concurrent stream pool upkeep
"""

from .selection import (
    TrackSelection,
    ClipWindow,
    pick_random_start_offset,
    get_random_duration,
    pick_random_track,
    select_track,
    select_clip_window,
)
from .orchestrator import play_and_replenish, replenish_and_save

__all__ = [
    "TrackSelection",
    "ClipWindow",
    "pick_random_start_offset",
    "get_random_duration",
    "pick_random_track",
    "select_track",
    "select_clip_window",
    "play_and_replenish",
    "replenish_and_save",
]
