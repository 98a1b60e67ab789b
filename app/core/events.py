from typing import Any, Optional

from app.core.models import Attachment, InboundEvent


def _first(items: Any) -> Optional[dict]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


def _dict(v: Any) -> dict:
    return v if isinstance(v, dict) else {}


def extract_first_event(body: Any) -> Optional[InboundEvent]:
    """
    Pull entry[0].messaging[0] out of a webhook body.

    Returns None (nothing to do) when any level is missing, when the
    messaging item carries no `message` (delivery/read receipts, postbacks)
    or when the message is an echo of our own send.
    """
    entry = _first(_dict(body).get("entry"))
    event = _first(_dict(entry).get("messaging"))
    if not event:
        return None

    sender_id = _dict(event.get("sender")).get("id")
    if not sender_id:
        return None

    message = event.get("message")
    if not isinstance(message, dict) or message.get("is_echo"):
        return None

    attachment = None
    att = _first(message.get("attachments"))
    if att:
        attachment = Attachment(
            type=str(att.get("type") or ""),
            url=_dict(att.get("payload")).get("url"),
        )

    return InboundEvent(
        sender_id=str(sender_id),
        text=message.get("text"),
        attachment=attachment,
    )
