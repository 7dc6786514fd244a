from typing import Callable, Dict, Mapping, Optional

from fake_ses.services.email_service import handle_send_email, handle_send_raw_email
from fake_ses.services.failure_queue import FailureInjectionQueue
from fake_ses.services.message_store import MessageStore
from fake_ses.utils.logging import logger

Handler = Callable[[MessageStore, Mapping[str, str]], str]

HANDLERS: Dict[str, Handler] = {
    "SendEmail": handle_send_email,
    "SendRawEmail": handle_send_raw_email,
}


class ActionDispatcher:
    """Route an SES action to its acceptance handler."""

    def __init__(self, store: MessageStore, failures: FailureInjectionQueue):
        self._store = store
        self._failures = failures

    def dispatch(self, action: Optional[str], params: Mapping[str, str]) -> Optional[str]:
        """
        Returns the XML response document, or None when the request must be
        answered with a transport-level "Not Found":

        - the next queued failure outcome is True (nothing else is evaluated)
        - the action is missing or not one of the supported send actions
        """
        if self._failures.pop():
            logger.warning(f"Injected failure for action {action!r}")
            return None

        handler = HANDLERS.get(action) if action else None
        if handler is None:
            logger.info(f"Unroutable action {action!r}")
            return None

        return handler(self._store, params)
