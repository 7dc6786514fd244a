"""
MIME plumbing for retrieval.

Raw sends already carry a full message (base64 in RawMessage.Data).
Structured sends only carry discrete fields, so a MIME message is built
from them first. Both then go through the same parser, so GET /emails
always returns one document shape.

Stored messages are whatever clients sent. A header or body the stdlib
parser chokes on must not break the listing, so parsing is done header
by header and a message that still fails is reduced to its id and raw
headers.
"""

import base64
import binascii
from email import policy
from email.errors import HeaderParseError, MessageError
from email.headerregistry import HeaderRegistry
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Dict, List, Mapping, Optional

from fake_ses.models.schemas import Attachment, EmailAddress, ParsedEmail
from fake_ses.utils.logging import logger

RAW_MESSAGE_FIELD = "RawMessage.Data"

HEADER_ERRORS = (IndexError, ValueError, HeaderParseError)
PARSE_ERRORS = (LookupError, IndexError, ValueError, MessageError)

# Builds headers that are written out verbatim instead of being parsed as
# address lists on assignment.
_unparsed_headers = HeaderRegistry(use_default_map=False)


def _members(fields: Mapping[str, str], prefix: str) -> List[str]:
    """Collect an SES list parameter: <prefix>.member.1, <prefix>.member.2, ..."""
    values = []
    n = 1
    while f"{prefix}.member.{n}" in fields:
        value = fields[f"{prefix}.member.{n}"]
        if value:
            values.append(value)
        n += 1
    return values


def _header(value: str) -> str:
    # Header values may not contain line breaks.
    return " ".join(value.splitlines())


def build_message(fields: Mapping[str, str]) -> bytes:
    """Rebuild a MIME message from the parameters of a SendEmail request."""
    msg = EmailMessage()

    headers = [("From", [fields["Source"]] if fields.get("Source") else [])]
    headers += [
        ("To", _members(fields, "Destination.ToAddresses")),
        ("Cc", _members(fields, "Destination.CcAddresses")),
        ("Bcc", _members(fields, "Destination.BccAddresses")),
        ("Reply-To", _members(fields, "ReplyToAddresses")),
    ]
    for name, addresses in headers:
        if addresses:
            value = ", ".join(_header(a) for a in addresses)
            msg[name] = _unparsed_headers(name, value)

    if fields.get("Message.Subject.Data"):
        msg["Subject"] = _unparsed_headers("Subject", _header(fields["Message.Subject.Data"]))

    text = fields.get("Message.Body.Text.Data")
    html = fields.get("Message.Body.Html.Data")
    if text:
        msg.set_content(text)
        if html:
            msg.add_alternative(html, subtype="html")
    elif html:
        msg.set_content(html, subtype="html")

    return msg.as_bytes()


def decode_raw_data(data: str) -> bytes:
    """
    Decode RawMessage.Data.

    Whitespace and missing padding are tolerated, and spaces are read as
    '+' (an unescaped '+' turns into a space in form bodies). A blob that
    is not base64 at all is returned as its UTF-8 bytes so it still shows
    up in GET /emails.
    """
    compact = "".join(data.replace(" ", "+").split())
    try:
        return base64.b64decode(compact + "=" * (-len(compact) % 4), validate=True)
    except (binascii.Error, ValueError):
        logger.warning("RawMessage.Data is not valid base64; parsing it as plain text")
        return data.encode("utf-8")


def message_bytes(fields: Mapping[str, str]) -> bytes:
    raw = fields.get(RAW_MESSAGE_FIELD)
    if raw:
        return decode_raw_data(raw)
    return build_message(fields)


def _raw_value(msg: EmailMessage, name: str) -> Optional[str]:
    for key, value in msg.raw_items():
        if key.lower() == name:
            return value
    return None


def _parse_header(msg: EmailMessage, name: str, raw: str):
    """The parsed header object, or None when the value cannot be parsed."""
    try:
        return msg.policy.header_fetch_parse(name, raw)
    except HEADER_ERRORS:
        logger.debug(f"Unparseable {name} header: {raw!r}")
        return None


def _header_text(msg: EmailMessage, name: str) -> Optional[str]:
    raw = _raw_value(msg, name)
    if raw is None:
        return None
    parsed = _parse_header(msg, name, raw)
    return str(parsed) if parsed is not None else _header(raw)


def _headers(msg: EmailMessage) -> Dict[str, str]:
    headers = {}
    for name, raw in msg.raw_items():
        if name.lower() in headers:
            continue
        parsed = _parse_header(msg, name, raw)
        headers[name.lower()] = str(parsed) if parsed is not None else _header(raw)
    return headers


def _addresses(msg: EmailMessage, name: str) -> List[EmailAddress]:
    addresses = []
    for key, raw in msg.raw_items():
        if key.lower() != name:
            continue
        parsed = _parse_header(msg, key, raw)
        for address in getattr(parsed, "addresses", ()):
            if address.addr_spec:
                addresses.append(EmailAddress(name=address.display_name, address=address.addr_spec))
    return addresses


def _body(msg: EmailMessage, subtype: str) -> Optional[str]:
    part = msg.get_body(preferencelist=(subtype,))
    if part is None:
        return None
    try:
        return part.get_content()
    except LookupError:
        # Unknown charset: show the bytes rather than nothing.
        payload = part.get_payload(decode=True) or b""
        return payload.decode("utf-8", errors="replace")


def parse_message(message_id: str, raw: bytes) -> ParsedEmail:
    """Parse a full MIME message into a ParsedEmail document."""
    msg = BytesParser(policy=policy.default).parsebytes(raw)

    attachments = []
    for part in msg.iter_attachments():
        payload = part.get_payload(decode=True) or b""
        attachments.append(
            Attachment(
                filename=part.get_filename(),
                content_type=part.get_content_type(),
                size=len(payload),
                content_id=part.get("content-id"),
            )
        )

    raw_date = _raw_value(msg, "date")
    date_header = _parse_header(msg, "Date", raw_date) if raw_date is not None else None
    message_id_header = _header_text(msg, "message-id")

    return ParsedEmail(
        id=message_id,
        message_id=message_id_header.strip() if message_id_header else None,
        subject=_header_text(msg, "subject"),
        from_=_addresses(msg, "from"),
        to=_addresses(msg, "to"),
        cc=_addresses(msg, "cc"),
        bcc=_addresses(msg, "bcc"),
        reply_to=_addresses(msg, "reply-to"),
        date=getattr(date_header, "datetime", None),
        text=_body(msg, "plain"),
        html=_body(msg, "html"),
        headers=_headers(msg),
        attachments=attachments,
    )


def decode_stored(message_id: str, fields: Mapping[str, str]) -> ParsedEmail:
    """
    Decode one stored message for GET /emails.

    A message the parser cannot handle comes back with only its id and
    headers instead of failing the whole listing.
    """
    raw = message_bytes(fields)
    try:
        return parse_message(message_id, raw)
    except PARSE_ERRORS as e:
        logger.warning(f"Email {message_id} could not be fully decoded: {e!r}")
        msg = BytesParser(policy=policy.default).parsebytes(raw, headersonly=True)
        return ParsedEmail(id=message_id, headers=_headers(msg))
