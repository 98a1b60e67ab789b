from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from app.core.errors import BridgeError

T = TypeVar("T")


# ---------- inbound ----------
@dataclass(frozen=True)
class Attachment:
    type: str
    url: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.type == "image" and bool(self.url)


@dataclass(frozen=True)
class InboundEvent:
    sender_id: str
    text: Optional[str] = None
    attachment: Optional[Attachment] = None

    @property
    def image_url(self) -> Optional[str]:
        if self.attachment and self.attachment.is_image:
            return self.attachment.url
        return None


# ---------- generated / stored ----------
@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    content_type: str = "image/png"


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


# ---------- outbound (Send API payloads) ----------
class Recipient(BaseModel):
    id: str


class AttachmentPayload(BaseModel):
    url: str
    is_reusable: bool = False


class OutboundAttachment(BaseModel):
    type: str = "image"
    payload: AttachmentPayload


class MessageBody(BaseModel):
    text: Optional[str] = None
    attachment: Optional[OutboundAttachment] = None


class OutboundMessage(BaseModel):
    recipient: Recipient
    message: MessageBody = Field(default_factory=MessageBody)

    @classmethod
    def text(cls, recipient_id: str, text: str) -> "OutboundMessage":
        return cls(recipient=Recipient(id=recipient_id), message=MessageBody(text=text))

    @classmethod
    def image(cls, recipient_id: str, url: str) -> "OutboundMessage":
        return cls(
            recipient=Recipient(id=recipient_id),
            message=MessageBody(attachment=OutboundAttachment(payload=AttachmentPayload(url=url))),
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ---------- pipeline ----------
@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one pipeline stage: either a value or the error that stopped it."""

    stage: str
    value: Optional[T] = None
    error: Optional[BridgeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, stage: str, value: T) -> "StageResult[T]":
        return cls(stage=stage, value=value)

    @classmethod
    def failure(cls, stage: str, error: BridgeError) -> "StageResult[T]":
        return cls(stage=stage, error=error)
