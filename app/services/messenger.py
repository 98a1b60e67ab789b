import logging
from typing import Optional

import httpx

from app.core.config import Settings
from app.core.errors import DeliveryError
from app.core.models import OutboundMessage

log = logging.getLogger(__name__)


class MessageSender:
    """
    Messenger Send API client.

    Both sends are fire-and-log: failures are logged as DeliveryError and
    the caller gets None back instead of an exception.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    async def send_text(self, recipient_id: str, text: str) -> Optional[str]:
        return await self._send(OutboundMessage.text(recipient_id, text))

    async def send_image(self, recipient_id: str, url: str) -> Optional[str]:
        return await self._send(OutboundMessage.image(recipient_id, url))

    async def _send(self, msg: OutboundMessage) -> Optional[str]:
        token = self._settings.PAGE_ACCESS_TOKEN
        recipient_id = msg.recipient.id
        if not token:
            log.error("[SEND] PAGE_ACCESS_TOKEN missing; skipping send to %s", recipient_id)
            return None

        try:
            async with httpx.AsyncClient(timeout=self._settings.HTTP_TIMEOUT, transport=self._transport) as client:
                resp = await client.post(
                    self._settings.send_api_url,
                    params={"access_token": token},
                    json=msg.to_payload(),
                )
        except httpx.HTTPError as e:
            log.error("[SEND] %s", DeliveryError(None, f"{type(e).__name__}: {e}", recipient_id))
            return None

        if not resp.is_success:
            log.error("[SEND] %s", DeliveryError(resp.status_code, resp.text, recipient_id))
            return None

        log.info("[SEND] Send resp: %s %s", resp.status_code, resp.text)
        try:
            data = resp.json()
        except ValueError:
            return None
        return data.get("message_id") if isinstance(data, dict) else None
