import threading
from collections import deque
from typing import Deque, Iterable, Optional


class FailureInjectionQueue:
    """
    FIFO of forced outcomes consumed one per action request.

    True  → the request is dropped (transport-level "Not Found").
    False → the request is processed normally.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Deque[bool] = deque()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def push(self, outcomes: Iterable[bool]) -> None:
        with self._lock:
            self._pending.extend(bool(outcome) for outcome in outcomes)

    def pop(self) -> Optional[bool]:
        """Consume the next outcome, or return None when nothing is queued."""
        with self._lock:
            if not self._pending:
                return None
            return self._pending.popleft()
