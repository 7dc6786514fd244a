from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EmailAddress(BaseModel):
    name: str = ""
    address: str


class Attachment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: Optional[str] = None
    content_type: str = Field(alias="contentType")
    size: int = 0
    content_id: Optional[str] = Field(default=None, alias="contentId")


class ParsedEmail(BaseModel):
    """A stored message decoded into the shape returned by GET /emails."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    message_id: Optional[str] = Field(default=None, alias="messageId")
    subject: Optional[str] = None
    from_: List[EmailAddress] = Field(default_factory=list, alias="from")
    to: List[EmailAddress] = Field(default_factory=list)
    cc: List[EmailAddress] = Field(default_factory=list)
    bcc: List[EmailAddress] = Field(default_factory=list)
    reply_to: List[EmailAddress] = Field(default_factory=list, alias="replyTo")
    date: Optional[datetime] = None
    text: Optional[str] = None
    html: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    attachments: List[Attachment] = Field(default_factory=list)
