"""
Shared fixtures: explicit Settings and recording fakes for the pipeline
components so bridge/webhook tests can assert on the outbound call order.
"""
import io
from dataclasses import replace

import pytest
from PIL import Image

from app.core.bridge import ImageBridge
from app.core.config import Settings
from app.core.models import GeneratedImage, StoredObject


def make_settings(**overrides) -> Settings:
    base = Settings(
        VERIFY_TOKEN="verify-me",
        PAGE_ACCESS_TOKEN="page-token",
        OPENAI_API_KEY="sk-test",
        GCS_BUCKET="test-bucket",
        GRAPH_BASE="https://graph.facebook.com",
        GRAPH_VER="v19.0",
        IMAGE_MODEL="gpt-image-1",
        IMAGE_SIZE="1024x1024",
        EDIT_SOURCE_IMAGE=True,
        MAX_SOURCE_BYTES=1024 * 1024,
        STORAGE_HOST="storage.googleapis.com",
        STORAGE_PREFIX="out",
        CACHE_CONTROL="public, max-age=31536000",
        SEND_FAILURE_NOTICE=False,
    )
    return replace(base, **overrides)


def image_bytes(fmt: str = "PNG", size=(8, 8), color="red") -> bytes:
    b = io.BytesIO()
    Image.new("RGB", size, color=color).save(b, format=fmt)
    return b.getvalue()


class FakeSender:
    def __init__(self, calls):
        self.calls = calls

    async def send_text(self, recipient_id, text):
        self.calls.append(("text", recipient_id, text))
        return "m_1"

    async def send_image(self, recipient_id, url):
        self.calls.append(("image", recipient_id, url))
        return "m_2"


class FakeProvider:
    def __init__(self, calls, error=None):
        self.calls = calls
        self.error = error

    async def produce(self, source=None):
        self.calls.append(("produce", source))
        if self.error:
            raise self.error
        return GeneratedImage(data=b"generated-png")


class FakePublisher:
    def __init__(self, calls, error=None):
        self.calls = calls
        self.error = error

    async def publish(self, image):
        self.calls.append(("publish", image.data))
        if self.error:
            raise self.error
        return StoredObject(
            key="out/abc.png",
            url="https://storage.googleapis.com/test-bucket/out/abc.png",
        )


class FakeDownloader:
    def __init__(self, calls, error=None):
        self.calls = calls
        self.error = error

    async def download_image(self, url):
        self.calls.append(("download", url))
        if self.error:
            raise self.error
        return b"source-png"


def make_bridge(calls, settings=None, provider_error=None, publisher_error=None, download_error=None):
    return ImageBridge(
        settings=settings or make_settings(),
        sender=FakeSender(calls),
        provider=FakeProvider(calls, provider_error),
        publisher=FakePublisher(calls, publisher_error),
        downloader=FakeDownloader(calls, download_error),
    )


def image_event_body(sender_id="U1", url="https://x/img.jpg"):
    return {
        "entry": [{
            "messaging": [{
                "sender": {"id": sender_id},
                "message": {"attachments": [{"type": "image", "payload": {"url": url}}]},
            }]
        }]
    }


def text_event_body(sender_id="U1", text="hello"):
    return {"entry": [{"messaging": [{"sender": {"id": sender_id}, "message": {"text": text}}]}]}


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def calls():
    return []


@pytest.fixture
def bridge(calls):
    return make_bridge(calls)
