from typing import Iterable, List

from fake_ses.models.schemas import ParsedEmail
from fake_ses.services.failure_queue import FailureInjectionQueue
from fake_ses.services.message_store import MessageStore
from fake_ses.services.mime import decode_stored
from fake_ses.utils.logging import logger


class RetrievalService:
    """Test-facing view of the store and the failure queue."""

    def __init__(self, store: MessageStore, failures: FailureInjectionQueue):
        self._store = store
        self._failures = failures

    def list_accepted(self) -> List[ParsedEmail]:
        """
        Decode every accepted message, newest first.

        Messages are parsed again on every call; nothing is cached. A message
        that cannot be decoded is listed with its id and headers only.
        """
        return [
            decode_stored(message.id, message.fields)
            for message in self._store.snapshot()
        ]

    def clear(self) -> None:
        self._store.clear()
        logger.info("Cleared all stored emails")

    def push_failures(self, outcomes: Iterable[bool]) -> None:
        outcomes = list(outcomes)
        self._failures.push(outcomes)
        logger.info(f"Queued {len(outcomes)} forced outcome(s): {outcomes}")
