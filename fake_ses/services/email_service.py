"""
Acceptance handlers for the two SES send actions.

Each handler validates the form parameters of one request, stores the
message on success and renders the XML document SES would answer with.

Validation failures are not transport errors: like the real provider,
the mock answers 200 with an <Error> document and leaves the store and
the waiters untouched.
"""

from typing import Mapping

from fake_ses.services.message_store import MessageStore
from fake_ses.utils.logging import logger, redact_email

SEND_EMAIL_RESPONSE = """<SendEmailResponse>
      <SendEmailResult>
        <MessageId>{message_id}</MessageId>
      </SendEmailResult>
    </SendEmailResponse>"""

SEND_RAW_EMAIL_RESPONSE = """<SendRawEmailResponse>
      <SendRawEmailResult>
        <MessageId>{message_id}</MessageId>
      </SendRawEmailResult>
    </SendRawEmailResponse>"""

ERROR_RESPONSE = """<Error>
        <Code>{code}</Code>
        <Message>{message}</Message>
      </Error>"""


class MessageRejected(Exception):
    """Raised when a send request is missing one of its required parameters."""

    code = "MessageRejected"

    def __init__(self, message: str = "Missing required params"):
        super().__init__(message)
        self.message = message


def _validate_send_email(params: Mapping[str, str]) -> None:
    if not params.get("Source"):
        raise MessageRejected()
    if not params.get("Message.Subject.Data"):
        raise MessageRejected()
    if not (params.get("Message.Body.Html.Data") or params.get("Message.Body.Text.Data")):
        raise MessageRejected()
    if not params.get("Destination.ToAddresses.member.1"):
        raise MessageRejected()


def _validate_send_raw_email(params: Mapping[str, str]) -> None:
    if not params.get("RawMessage.Data"):
        raise MessageRejected()


def render_error(error: MessageRejected) -> str:
    return ERROR_RESPONSE.format(code=error.code, message=error.message)


def handle_send_email(store: MessageStore, params: Mapping[str, str]) -> str:
    """
    Accept a structured SendEmail request.

    Required parameters:
        Source
        Message.Subject.Data
        Message.Body.Html.Data or Message.Body.Text.Data
        Destination.ToAddresses.member.1

    Returns the SendEmailResponse document, or the MessageRejected error
    document when a parameter is missing.
    """
    try:
        _validate_send_email(params)
    except MessageRejected as e:
        logger.info("SendEmail rejected: missing required params")
        return render_error(e)

    message = store.append(params)
    logger.info(f"SendEmail accepted {message.id} from {redact_email(params['Source'])}")

    return SEND_EMAIL_RESPONSE.format(message_id=message.id)


def handle_send_raw_email(store: MessageStore, params: Mapping[str, str]) -> str:
    """
    Accept a SendRawEmail request.

    The only required parameter is RawMessage.Data, the base64-encoded
    full MIME message. It is stored as-is and only decoded on retrieval.
    """
    try:
        _validate_send_raw_email(params)
    except MessageRejected as e:
        logger.info("SendRawEmail rejected: missing RawMessage.Data")
        return render_error(e)

    message = store.append(params)
    logger.info(f"SendRawEmail accepted {message.id}")

    return SEND_RAW_EMAIL_RESPONSE.format(message_id=message.id)
