from dataclasses import dataclass, field

from fake_ses.services.dispatcher import ActionDispatcher
from fake_ses.services.failure_queue import FailureInjectionQueue
from fake_ses.services.message_store import MessageStore
from fake_ses.services.notification_registry import NotificationRegistry
from fake_ses.services.retrieval_service import RetrievalService


@dataclass
class SESState:
    """
    Everything one mock instance owns.

    Built once per application so that several mock servers can run side
    by side in the same process without sharing messages or waiters.
    """

    registry: NotificationRegistry = field(default_factory=NotificationRegistry)
    failures: FailureInjectionQueue = field(default_factory=FailureInjectionQueue)
    store: MessageStore = field(init=False)
    dispatcher: ActionDispatcher = field(init=False)
    retrieval: RetrievalService = field(init=False)

    def __post_init__(self):
        self.store = MessageStore(self.registry)
        self.dispatcher = ActionDispatcher(self.store, self.failures)
        self.retrieval = RetrievalService(self.store, self.failures)

    def wait_for_emails(self, count: int) -> None:
        self.store.wait_for(count)
