"""
Image reply pipeline for one inbound Messenger event.

The webhook route acknowledges first and hands the raw body to
`ImageBridge.process_body`, which extracts the first event and runs:

    processing text -> [download] -> produce -> publish -> send image -> follow-up text

Each stage returns a StageResult; the first failed stage stops the run and
is logged here. Nothing propagates back to the webhook route.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from app.core.config import Settings
from app.core.errors import BridgeError
from app.core.events import extract_first_event
from app.core.models import GeneratedImage, InboundEvent, StageResult, StoredObject
from app.core.prompts import FAILURE_TEXT, FOLLOW_UP_TEXT, INSTRUCTION_TEXT, PROCESSING_TEXT
from app.services.image_provider import ImageProviderClient
from app.services.media import MediaDownloader
from app.services.messenger import MessageSender
from app.services.storage import ObjectStorePublisher

log = logging.getLogger(__name__)

T = TypeVar("T")


async def run_stage(stage: str, fn: Callable[..., Awaitable[T]], *args) -> StageResult[T]:
    try:
        return StageResult.success(stage, await fn(*args))
    except BridgeError as e:
        return StageResult.failure(stage, e)


@dataclass(frozen=True)
class ImageBridge:
    settings: Settings
    sender: MessageSender
    provider: ImageProviderClient
    publisher: ObjectStorePublisher
    downloader: MediaDownloader

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageBridge":
        return cls(
            settings=settings,
            sender=MessageSender(settings),
            provider=ImageProviderClient(settings),
            publisher=ObjectStorePublisher(settings),
            downloader=MediaDownloader(settings),
        )

    async def process_body(self, body: Any) -> None:
        await self.handle_event(extract_first_event(body))

    async def handle_event(self, event: Optional[InboundEvent]) -> None:
        """Background entry point. Never raises."""
        if event is None:
            return
        try:
            if event.image_url:
                await self._reply_with_image(event.sender_id, event.image_url)
            else:
                log.info("[BRIDGE] no image from %s; sending instructions", event.sender_id)
                await self.sender.send_text(event.sender_id, INSTRUCTION_TEXT)
        except Exception:
            log.exception("[BRIDGE] unhandled error while processing event from %s", event.sender_id)

    async def _reply_with_image(self, sender_id: str, image_url: str) -> None:
        await self.sender.send_text(sender_id, PROCESSING_TEXT)

        result = await self.generate(image_url)
        if not result.ok:
            log.error("[BRIDGE] stage=%s failed for %s: %s", result.stage, sender_id, result.error)
            if self.settings.SEND_FAILURE_NOTICE:
                await self.sender.send_text(sender_id, FAILURE_TEXT)
            return

        stored: StoredObject = result.value
        log.info("[BRIDGE] delivering %s to %s", stored.key, sender_id)
        await self.sender.send_image(sender_id, stored.url)
        await self.sender.send_text(sender_id, FOLLOW_UP_TEXT)

    async def generate(self, image_url: Optional[str]) -> StageResult[StoredObject]:
        """
        Run download (when editing is enabled), produce and publish.
        Returns the first failing stage's result, or the publish result.
        """
        source: Optional[bytes] = None
        if image_url and self.settings.EDIT_SOURCE_IMAGE:
            downloaded = await run_stage("download", self.downloader.download_image, image_url)
            if not downloaded.ok:
                return StageResult.failure(downloaded.stage, downloaded.error)
            source = downloaded.value

        produced: StageResult[GeneratedImage] = await run_stage("produce", self.provider.produce, source)
        if not produced.ok:
            return StageResult.failure(produced.stage, produced.error)

        return await run_stage("publish", self.publisher.publish, produced.value)
