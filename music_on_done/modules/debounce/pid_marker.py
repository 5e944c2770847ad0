"""
PID marker - single-slot record of the pending invocation.

Every invocation overwrites the marker with its own PID. That overwrite is
the whole supersession protocol: an earlier invocation that wakes up after
its delay and finds someone else's PID knows it has been replaced. No
locking; the last writer wins.
"""

from pathlib import Path
from typing import Optional, Union

from music_on_done.core.config.settings import DEFAULT_CACHE_DIR

PID_FILE_PATH = DEFAULT_CACHE_DIR / "pending.pid"

PathLike = Union[str, Path]


def write_pid_file(pid: int, pid_file_path: PathLike = PID_FILE_PATH) -> None:
    """Register pid as the pending invocation, replacing any previous one."""
    path = Path(pid_file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(str(pid), encoding="utf-8")


def read_pid_file(pid_file_path: PathLike = PID_FILE_PATH) -> Optional[int]:
    """The registered PID, or None if the marker is missing or not a number."""
    try:
        raw = Path(pid_file_path).read_text(encoding="utf-8")
    except OSError:
        return None

    try:
        return int(raw.strip(), 10)
    except ValueError:
        return None


def remove_pid_file(pid_file_path: PathLike = PID_FILE_PATH) -> None:
    """Unregister. A marker that is already gone is fine."""
    try:
        Path(pid_file_path).unlink()
    except FileNotFoundError:
        pass


def is_our_pid_file(pid: int, pid_file_path: PathLike = PID_FILE_PATH) -> bool:
    """True if the marker still holds exactly pid."""
    return read_pid_file(pid_file_path) == pid
