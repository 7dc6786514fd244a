"""
Count-based waiter registry.

Test code that sends email asynchronously needs a way to block until the
mock has seen N messages. Each target count gets at most one Waiter; a
second caller waiting on the same count shares the existing one, so a
single wake releases all of them.
"""

import threading
from typing import Dict, Optional

from fake_ses.utils.logging import logger


class Waiter:
    """Single-shot signal released once its threshold is reached."""

    def __init__(self, threshold: int):
        self.threshold = threshold
        self._event = threading.Event()

    @property
    def done(self) -> bool:
        return self._event.is_set()

    def wake(self) -> None:
        self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        # No timeout by default: a waiter whose threshold is never reached
        # blocks forever; callers impose their own limit if they need one.
        return self._event.wait(timeout)


class NotificationRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._waiters: Dict[int, Waiter] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._waiters)

    def __contains__(self, threshold: int) -> bool:
        with self._lock:
            return threshold in self._waiters

    def register(self, threshold: int) -> Waiter:
        """
        Return the live Waiter for `threshold`, creating it if needed.

        Callers must have checked beforehand that the threshold is not
        already satisfied (see MessageStore.wait_for).
        """
        with self._lock:
            waiter = self._waiters.get(threshold)
            if waiter is None:
                waiter = self._waiters[threshold] = Waiter(threshold)
                logger.debug(f"Waiter registered for {waiter.threshold} email(s)")
            return waiter

    def check_waiters(self, count: int) -> None:
        """
        Wake the waiter registered exactly at `count`, if any.

        Acceptance increments the count by one per call, so every integer
        threshold is hit exactly once on the way up; higher thresholds are
        left for later calls.
        """
        with self._lock:
            waiter = self._waiters.pop(count, None)

        if waiter is not None:
            logger.debug(f"Waking waiter for {waiter.threshold} email(s)")
            waiter.wake()
