"""
OpenAI image client for the portrait bridge.

Two modes, picked by whether a source image is supplied:
- edit:     images.edit(image=<png bytes>, model, prompt, size)
- generate: images.generate(model, prompt, size)

The response must carry base64 image data (b64_json); a remote URL is not
accepted since persistence is handled by the object store publisher.
"""

import base64
import binascii
import logging
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI

from app.core.config import Settings
from app.core.errors import MissingProviderKey, ProviderError
from app.core.models import GeneratedImage
from app.core.prompts import PORTRAIT_PROMPT

log = logging.getLogger(__name__)


class ImageProviderClient:
    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self._settings = settings
        self._client = client
        if self._client is None and settings.OPENAI_API_KEY:
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.PROVIDER_TIMEOUT,
                max_retries=0,
            )

    def _params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": self._settings.IMAGE_MODEL,
            "prompt": PORTRAIT_PROMPT,
            "size": self._settings.IMAGE_SIZE,
            "n": 1,
        }
        # gpt-image-* always answers in base64 and rejects response_format
        if self._settings.IMAGE_MODEL.startswith("dall-e"):
            params["response_format"] = "b64_json"
        return params

    async def produce(self, source: Optional[bytes] = None) -> GeneratedImage:
        if self._client is None:
            raise MissingProviderKey("OPENAI_API_KEY is not set; cannot generate images.")

        params = self._params()
        mode = "edit" if source else "generate"
        log.info("[IMAGE] %s model=%s size=%s", mode, params["model"], params["size"])

        try:
            if source:
                resp = await self._client.images.edit(
                    image=("source.png", source, "image/png"),
                    **params,
                )
            else:
                resp = await self._client.images.generate(**params)
        except openai.APIStatusError as e:
            raise ProviderError(f"Images {mode} API returned {e.status_code}: {e.message}") from e
        except openai.APIError as e:
            raise ProviderError(f"Images {mode} API call failed: {e}") from e

        return GeneratedImage(data=_decode_first_image(resp, mode), content_type="image/png")


def _decode_first_image(resp: Any, mode: str) -> bytes:
    data = getattr(resp, "data", None) or []
    b64 = getattr(data[0], "b64_json", None) if data else None
    if not b64:
        raise ProviderError(f"Images {mode} API returned no b64_json payload.")
    try:
        return base64.b64decode(b64)
    except (binascii.Error, ValueError) as e:
        raise ProviderError(f"Images {mode} API returned undecodable image data.") from e
