"""
JSON file storage shared by the playlist and stream caches.

Reads return an Outcome instead of raising: a missing or corrupt cache file
is a cache miss. Writes go through a temp file and os.replace() so a reader
never sees a half-written record.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Callable, TypeVar, Union

from music_on_done.common.outcome import Outcome
from music_on_done.core.errors import CacheReadError

T = TypeVar("T")


def read_record(
    cache_file: Union[str, Path],
    parse: Callable[[dict], T],
) -> Outcome[T]:
    """Load cache_file and parse it with parse(). Failures come back as CacheReadError."""
    path = Path(cache_file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        return Outcome.success(parse(raw))
    except FileNotFoundError as e:
        return Outcome.failure(CacheReadError(
            "Cache file not found", data={"path": str(path)}, cause=e,
        ))
    except (OSError, ValueError, KeyError, TypeError, OverflowError) as e:
        return Outcome.failure(CacheReadError(
            "Cache file unreadable", data={"path": str(path)}, cause=e,
        ))


def write_record(cache_file: Union[str, Path], data: dict) -> None:
    """Write data as pretty JSON, fully replacing any previous content."""
    path = Path(cache_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
