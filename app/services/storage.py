import asyncio
import logging
import time
from typing import Optional
from uuid import uuid4

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage as gcs_storage

from app.core.config import Settings
from app.core.errors import MissingBucket, StorageError
from app.core.models import GeneratedImage, StoredObject

log = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


def new_object_key(prefix: str, content_type: str = "image/png") -> str:
    ext = _EXTENSIONS.get(content_type, "png")
    return f"{prefix.strip('/')}/{uuid4().hex}.{ext}"


class ObjectStorePublisher:
    """Uploads generated images to a public GCS bucket."""

    def __init__(self, settings: Settings, client: Optional[gcs_storage.Client] = None):
        self._settings = settings
        self._client = client
        self._client_error: Optional[StorageError] = None
        # built once here; publish only reads it
        if self._client is None and settings.GCS_BUCKET:
            try:
                self._client = gcs_storage.Client()
            except (GoogleAuthError, GoogleAPIError, OSError) as e:
                log.error("[GCS] client init failed: %s", e)
                self._client_error = StorageError(f"Could not create GCS client: {e}")

    def _get_client(self) -> gcs_storage.Client:
        if self._client is None:
            raise self._client_error or StorageError("GCS client is not configured.")
        return self._client

    def _upload(self, key: str, image: GeneratedImage) -> None:
        bucket = self._get_client().bucket(self._settings.GCS_BUCKET)
        blob = bucket.blob(key)
        blob.cache_control = self._settings.CACHE_CONTROL
        # small payload + no chunk_size -> single multipart request, not resumable
        blob.upload_from_string(
            image.data,
            content_type=image.content_type,
            timeout=self._settings.STORAGE_TIMEOUT,
        )

    async def publish(self, image: GeneratedImage) -> StoredObject:
        if not self._settings.GCS_BUCKET:
            raise MissingBucket("GCS_BUCKET is not set; cannot store generated images.")

        key = new_object_key(self._settings.STORAGE_PREFIX, image.content_type)
        t0 = time.time()
        try:
            await asyncio.to_thread(self._upload, key, image)
        except StorageError:
            raise
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            raise StorageError(f"GCS upload failed for {key}: {e}") from e

        url = self._settings.public_url(key)
        log.info(
            "[GCS] upload ok | ms=%d | name=%s | bytes=%d | url=%s",
            int((time.time() - t0) * 1000), key, len(image.data), url,
        )
        return StoredObject(key=key, url=url)
