"""mpv adapter: plays one clip window, audio only."""

import asyncio
from typing import List, Optional

from music_on_done.common.logging import get_logger
from music_on_done.core.errors import PlaybackError
from .process import run_command

logger = get_logger(__name__)

# Startup, network buffering and shutdown on top of the clip itself
PLAYBACK_SLACK_SEC = 30


def build_mpv_args(
    url: str,
    start_seconds: int,
    duration_seconds: int,
    volume: int,
) -> List[str]:
    return [
        "--no-video",
        "--really-quiet",
        f"--start={start_seconds}",
        f"--length={duration_seconds}",
        f"--volume={volume}",
        url,
    ]


class MpvClipPlayer:
    """ClipPlayer backed by mpv."""

    def __init__(self, binary: str = "mpv", slack: float = PLAYBACK_SLACK_SEC):
        self.binary = binary
        self.slack = slack

    async def play(
        self,
        url: str,
        start_seconds: int,
        duration_seconds: int,
        volume: int,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        cmd = [self.binary, *build_mpv_args(url, start_seconds, duration_seconds, volume)]
        try:
            result = await run_command(
                cmd,
                timeout=duration_seconds + self.slack,
                cancel_event=cancel_event,
                capture=False,
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise PlaybackError("Playback failed", data={"url": url}, cause=e)

        if result is None:
            logger.debug("Playback cancelled")
            return

        if result.returncode != 0:
            raise PlaybackError("Player exited with an error", data={
                "returncode": result.returncode,
            })
