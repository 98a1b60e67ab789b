import io
import logging
from typing import Optional

import httpx
from PIL import Image as PILImage, UnidentifiedImageError

from app.core.config import Settings
from app.core.errors import MediaError

log = logging.getLogger(__name__)


class MediaDownloader:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    async def download_image(self, url: str) -> bytes:
        """Fetch attachment bytes from the platform CDN and return them as PNG."""
        limit = self._settings.MAX_SOURCE_BYTES
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.DOWNLOAD_TIMEOUT,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url) as r:
                    r.raise_for_status()
                    declared = r.headers.get("content-length", "")
                    if declared.isdigit() and int(declared) > limit:
                        raise MediaError(f"Source image is {declared} bytes; limit is {limit}.")

                    buf = bytearray()
                    async for chunk in r.aiter_bytes():
                        buf.extend(chunk)
                        if len(buf) > limit:
                            raise MediaError(f"Source image exceeds limit of {limit} bytes.")
                    data = bytes(buf)
        except httpx.HTTPError as e:
            raise MediaError(f"Could not download source image: {e}") from e

        if not data:
            raise MediaError("Source image download returned an empty body.")

        log.info("[MEDIA] downloaded %d bytes", len(data))
        return to_png(data)


def to_png(data: bytes) -> bytes:
    try:
        img = PILImage.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise MediaError("Source attachment is not a readable image.") from e

    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    b = io.BytesIO()
    img.save(b, format="PNG")
    return b.getvalue()
