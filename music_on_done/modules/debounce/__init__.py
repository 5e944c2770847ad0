"""
Debounce - newest invocation wins.

- pid_marker: register / check / unregister the pending PID
- cancel:     SIGTERM the pending invocation
- delay:      cancellable wait before playback
"""

from .pid_marker import (
    PID_FILE_PATH,
    write_pid_file,
    read_pid_file,
    remove_pid_file,
    is_our_pid_file,
)
from .cancel import CancelResult, cancel_pending
from .delay import wait_for_delay, sigterm_sets

__all__ = [
    "PID_FILE_PATH",
    "write_pid_file",
    "read_pid_file",
    "remove_pid_file",
    "is_our_pid_file",
    "CancelResult",
    "cancel_pending",
    "wait_for_delay",
    "sigterm_sets",
]
