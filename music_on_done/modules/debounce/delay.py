"""Cancellable pre-playback delay."""

import asyncio
import signal
from contextlib import contextmanager
from typing import Iterator


async def wait_for_delay(seconds: float, cancel_event: asyncio.Event) -> bool:
    """
    Wait up to seconds, returning early if cancel_event is set.

    Returns:
        True if cancelled, False if the full delay elapsed
    """
    if cancel_event.is_set():
        return True
    if seconds <= 0:
        return False

    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True


@contextmanager
def sigterm_sets(cancel_event: asyncio.Event) -> Iterator[asyncio.Event]:
    """
    Route SIGTERM to cancel_event for the duration of the block.

    Must be entered from inside the running event loop.
    """
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGTERM, cancel_event.set)
    try:
        yield cancel_event
    finally:
        loop.remove_signal_handler(signal.SIGTERM)
