"""
Ordered in-memory store of accepted messages.

The store owns the running accepted-count and is the only place that
touches it. Appending a message, incrementing the count and checking the
waiter registry happen under one lock, so a concurrent wait_for() either
sees the new count or is registered before the wake-up check runs.
"""

import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from fake_ses.services.notification_registry import NotificationRegistry


@dataclass(frozen=True)
class StoredMessage:
    id: str
    fields: Dict[str, str] = field(default_factory=dict)


def new_message_id() -> str:
    return str(uuid.uuid4())


class MessageStore:
    def __init__(self, registry: NotificationRegistry):
        self._lock = threading.Lock()
        self._registry = registry
        self._messages: List[StoredMessage] = []
        self._accepted_count = 0

    @property
    def accepted_count(self) -> int:
        with self._lock:
            return self._accepted_count

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def append(self, fields: Mapping[str, str]) -> StoredMessage:
        """
        Accept a message: assign an id, store a copy of its fields,
        bump the count and wake whoever waits for exactly that count.
        """
        message = StoredMessage(id=new_message_id(), fields=dict(fields))

        with self._lock:
            self._messages.append(message)
            self._accepted_count += 1
            self._registry.check_waiters(self._accepted_count)

        return message

    def snapshot(self) -> List[StoredMessage]:
        """Return the stored messages newest-first without mutating the store."""
        with self._lock:
            return list(reversed(self._messages))

    def clear(self) -> None:
        # Messages and count are always reset together.
        with self._lock:
            self._messages = []
            self._accepted_count = 0

    def wait_for(self, count: int) -> None:
        """
        Block until at least `count` messages have been accepted.

        Returns immediately if the count is already reached. Otherwise the
        caller joins the waiter for that exact threshold, which is released
        the first time the running count hits it.
        """
        with self._lock:
            if self._accepted_count >= count:
                return
            waiter = self._registry.register(count)

        waiter.wait()
