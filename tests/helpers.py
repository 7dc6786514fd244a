import base64
import re
from email.message import EmailMessage

from fastapi.testclient import TestClient

from fake_ses.main import create_app


def new_client() -> TestClient:
    """A TestClient bound to a brand new mock instance."""
    return TestClient(create_app())


def state_of(client: TestClient):
    return client.app.state.ses


def send_email_params(**overrides) -> dict:
    params = {
        "Action": "SendEmail",
        "Source": "Alice <alice@example.com>",
        "Destination.ToAddresses.member.1": "bob@example.com",
        "Message.Subject.Data": "Hello",
        "Message.Body.Text.Data": "Hello Bob",
    }
    params.update(overrides)
    return {k: v for k, v in params.items() if v is not None}


def raw_message(subject: str = "Raw hello", attachment: bytes = None) -> str:
    msg = EmailMessage()
    msg["From"] = "Carol <carol@example.com>"
    msg["To"] = "dave@example.com"
    msg["Subject"] = subject
    msg["Date"] = "Tue, 01 Jan 2030 10:00:00 +0000"
    msg["Message-ID"] = "<raw-1@example.com>"
    msg.set_content("Raw body")
    if attachment is not None:
        msg.add_attachment(
            attachment, maintype="application", subtype="octet-stream", filename="data.bin"
        )
    return base64.b64encode(msg.as_bytes()).decode("ascii")


def send_raw_email_params(subject: str = "Raw hello", attachment: bytes = None) -> dict:
    return {
        "Action": "SendRawEmail",
        "RawMessage.Data": raw_message(subject, attachment),
    }


def message_id_of(xml: str) -> str:
    match = re.search(r"<MessageId>(.+?)</MessageId>", xml)
    assert match is not None, xml
    return match.group(1)
