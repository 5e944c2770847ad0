"""
Custom error classes with structured logging.

Fatal errors (the run cannot play anything) log at ERROR when raised.
Recoverable ones (a single track, a cache file, a lost race) log at DEBUG:
they are expected and the caller carries on.
"""

import logging
from typing import Optional, Dict, Any

from music_on_done.common.logging import get_logger
from music_on_done.common.logging.context import get_invocation_id

logger = get_logger(__name__)


class MusicOnDoneError(Exception):
    """
    Base error class for all application errors.

    Automatically logs itself with invocation context when created.
    """

    log_level = logging.ERROR

    def __init__(
        self,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """
        Initialize error with structured context.

        Args:
            message: Human-readable error message
            data: Structured data for observability
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.data = data or {}
        self.cause = cause
        self.invocation_id = get_invocation_id()

        self._log_error()

    def _log_error(self):
        """Log error with structured data."""
        log_data = {
            "error_type": self.__class__.__name__,
            **self.data,
        }

        if self.cause:
            log_data["cause"] = str(self.cause)

        logger.log(
            self.log_level,
            self.message,
            extra={"structured_data": log_data},
            exc_info=self.cause is not None and self.log_level >= logging.ERROR,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "data": self.data,
            "invocation_id": self.invocation_id,
            "cause": str(self.cause) if self.cause else None,
        }


# Fatal: the run cannot proceed
class ConfigError(MusicOnDoneError):
    """Invalid or missing configuration (duration bounds, playlist URL)."""
    pass


class FetchError(MusicOnDoneError):
    """Playlist metadata could not be fetched or parsed."""
    pass


class EmptyPlaylistError(FetchError):
    """Playlist fetched fine but has no playable entries."""
    pass


class DependencyError(MusicOnDoneError):
    """A required external command (mpv, yt-dlp) is not on PATH."""
    pass


# Recoverable: handled where they occur
class ResolveError(MusicOnDoneError):
    """A single track could not be resolved to a direct stream URL."""
    log_level = logging.DEBUG


class CacheReadError(MusicOnDoneError):
    """Cache file missing or malformed. Treated as a cache miss."""
    log_level = logging.DEBUG


class CacheWriteError(MusicOnDoneError):
    """Cache file could not be written."""
    log_level = logging.WARNING


class PlaybackError(MusicOnDoneError):
    """The player exited with an error or timed out."""
    log_level = logging.WARNING


class CancellationRace(MusicOnDoneError):
    """
    Run was superseded by a newer invocation or cancelled during the delay.

    Not a failure: the run exits early and silently.
    """
    log_level = logging.DEBUG
