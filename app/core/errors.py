from typing import Optional


class BridgeError(Exception):
    """Base class for failures raised inside the image reply pipeline."""


class ConfigurationError(BridgeError):
    """A required secret, key or bucket name is not configured."""


class ProviderError(BridgeError):
    """The image API returned a non-success status or a malformed response."""


class StorageError(BridgeError):
    """Upload to object storage failed."""


class MediaError(BridgeError):
    """The source attachment could not be downloaded or decoded."""


class DeliveryError(BridgeError):
    """Send API returned a non-success status. Logged, never raised to callers."""

    def __init__(self, status_code: Optional[int], body: str, recipient_id: str | None = None):
        self.status_code = status_code
        self.body = body
        self.recipient_id = recipient_id
        super().__init__(f"send failed status={status_code} recipient={recipient_id} body={body[:500]}")


class MissingProviderKey(ConfigurationError, ProviderError):
    pass


class MissingBucket(ConfigurationError, StorageError):
    pass
