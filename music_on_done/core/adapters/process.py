"""Async subprocess helpers for the external command adapters."""

import asyncio
import shutil
from dataclasses import dataclass
from typing import List, Optional

from music_on_done.core.errors import DependencyError

REQUIRED_COMMANDS = ("mpv", "yt-dlp")


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


async def _terminate(proc: asyncio.subprocess.Process, grace: float = 2.0) -> None:
    """SIGTERM, then SIGKILL if the process does not exit within grace seconds."""
    if proc.returncode is not None:
        return
    try:
        proc.terminate()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(proc.wait(), timeout=grace)
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()


async def run_command(
    cmd: List[str],
    timeout: float,
    cancel_event: Optional[asyncio.Event] = None,
    capture: bool = True,
) -> Optional[CommandResult]:
    """
    Run cmd without a shell, bounded by timeout.

    Returns None if cancel_event fired first; the child is terminated in
    that case. Raises asyncio.TimeoutError (after killing the child) on
    timeout and OSError if the command cannot be started.
    """
    pipe = asyncio.subprocess.PIPE if capture else asyncio.subprocess.DEVNULL
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=pipe,
        stderr=pipe,
    )

    communicate = asyncio.ensure_future(proc.communicate())
    waiters = {communicate}
    cancel_wait = None
    if cancel_event is not None:
        cancel_wait = asyncio.ensure_future(cancel_event.wait())
        waiters.add(cancel_wait)

    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if cancel_wait is not None and not cancel_wait.done():
            cancel_wait.cancel()

    if communicate in done:
        stdout, stderr = communicate.result()
        return CommandResult(
            returncode=proc.returncode,
            stdout=(stdout or b"").decode("utf-8", errors="replace"),
            stderr=(stderr or b"").decode("utf-8", errors="replace"),
        )

    await _terminate(proc)
    communicate.cancel()
    try:
        await communicate
    except asyncio.CancelledError:
        pass

    if cancel_wait is not None and cancel_wait in done:
        return None
    raise asyncio.TimeoutError(f"{cmd[0]} timed out after {timeout}s")


def command_exists(command: str) -> bool:
    """True if command is on PATH."""
    return shutil.which(command) is not None


def check_dependencies(commands=REQUIRED_COMMANDS) -> None:
    """
    Raises:
        DependencyError: naming the first command not found on PATH
    """
    for command in commands:
        if not command_exists(command):
            raise DependencyError(
                f"music-on-done: {command} is not installed. Install it with your package manager.",
                data={"command": command},
            )
