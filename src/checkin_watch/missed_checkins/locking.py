from __future__ import annotations

import threading
from typing import Protocol


class RunLock(Protocol):
    """At-most-one-concurrent-run guard for the detection pass.

    ``acquire`` never blocks: it returns False when a run is already in progress.
    Multi-instance deployments inject a distributed implementation with the same contract.
    """

    def acquire(self) -> bool:
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class InProcessRunLock(RunLock):
    """Advisory lock valid inside one process only."""

    def __init__(self):
        self._lock = threading.Lock()

    def acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def locked(self) -> bool:
        return self._lock.locked()
