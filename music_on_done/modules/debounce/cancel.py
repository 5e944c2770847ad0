"""
Cancellation of the pending invocation (`music-on-done --cancel`).

Advisory only: cancel_pending() never raises. What happened is reported in
the returned CancelOutcome.
"""

import os
import signal
from dataclasses import dataclass
from typing import Optional

from music_on_done.common.logging import get_logger
from music_on_done.common.outcome import Outcome
from .pid_marker import PID_FILE_PATH, PathLike, read_pid_file, remove_pid_file

logger = get_logger(__name__)


@dataclass(frozen=True)
class CancelResult:
    pid: Optional[int]
    signalled: bool
    already_gone: bool = False


CancelOutcome = Outcome[CancelResult]


def cancel_pending(pid_file_path: PathLike = PID_FILE_PATH) -> CancelOutcome:
    """
    SIGTERM the registered invocation and remove the marker.

    No marker: nothing to do. A PID that no longer exists is expected (it
    finished or was already cancelled) and still counts as success.
    """
    try:
        pid = read_pid_file(pid_file_path)
        if pid is None:
            return Outcome.success(CancelResult(pid=None, signalled=False))

        signalled = False
        already_gone = False
        try:
            os.kill(pid, signal.SIGTERM)
            signalled = True
        except ProcessLookupError:
            already_gone = True

        remove_pid_file(pid_file_path)

        logger.debug("Cancelled pending invocation", data={
            "target_pid": pid, "signalled": signalled,
        })
        return Outcome.success(CancelResult(pid=pid, signalled=signalled, already_gone=already_gone))
    except Exception as e:
        logger.debug("Cancel failed", data={"error": str(e)})
        return Outcome.failure(e)
