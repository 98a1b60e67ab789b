# app/api/webhook.py

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from app.api.deps import get_bridge, get_settings
from app.core.bridge import ImageBridge
from app.core.config import Settings

log = logging.getLogger(__name__)

router = APIRouter()


def is_valid_subscription(mode: str | None, token: str | None, expected: str | None) -> bool:
    return bool(expected) and mode == "subscribe" and token == expected


@router.get("/webhook")
async def verify_webhook(request: Request, settings: Settings = Depends(get_settings)):
    """Meta verification handshake: echo hub.challenge if token matches."""
    params = request.query_params

    mode = params.get("hub.mode")
    token = params.get("hub.verify_token")
    challenge = params.get("hub.challenge", "")

    if is_valid_subscription(mode, token, settings.VERIFY_TOKEN):
        log.info("[WEBHOOK] subscription verified")
        return PlainTextResponse(challenge, status_code=200)

    log.warning("[WEBHOOK] verification rejected (mode=%s)", mode)
    return Response(status_code=403)


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    bridge: ImageBridge = Depends(get_bridge),
):
    """
    Acknowledge immediately; the event is processed after the response is
    sent so Meta never waits on image generation.
    """
    try:
        data = await request.json()
    except ValueError:
        log.warning("[WEBHOOK] body is not JSON; acknowledged and ignored")
        return {"status": "received"}

    log.info("[WEBHOOK] Incoming payload: %s", data)
    background_tasks.add_task(bridge.process_body, data)
    return {"status": "received"}
