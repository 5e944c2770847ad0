"""Invocation context for log records.

Every hook invocation is its own process, often several within a second, so
each gets a short invocation id to tell their log lines apart.
"""

import os
import uuid
import logging
import contextvars


invocation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "invocation_id", default=None
)


def generate_invocation_id() -> str:
    """Generate unique invocation ID."""
    return str(uuid.uuid4())[:8]


def get_invocation_id() -> str | None:
    """Get current invocation ID from context."""
    return invocation_id_var.get()


def set_invocation_id(iid: str):
    """Set invocation ID in context."""
    invocation_id_var.set(iid)


class InvocationLogFilter(logging.Filter):
    """
    Logging filter that adds invocation_id and pid to log records.

    Use with standard logging to auto-inject context vars.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.invocation_id = get_invocation_id() or "-"
        record.pid = os.getpid()
        return True
