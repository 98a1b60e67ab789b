import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def str_to_bool(v: str | None) -> bool:
    return str(v).lower() in {"1", "true", "yes", "y", "on"} if v is not None else False


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip()


def _env_float(name: str, default: float) -> float:
    try:
        return float(_env(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(_env(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # secrets
    VERIFY_TOKEN: Optional[str] = field(default_factory=lambda: _env("VERIFY_TOKEN"))
    PAGE_ACCESS_TOKEN: Optional[str] = field(default_factory=lambda: _env("PAGE_ACCESS_TOKEN"))
    OPENAI_API_KEY: Optional[str] = field(default_factory=lambda: _env("OPENAI_API_KEY"))
    GCS_BUCKET: Optional[str] = field(default_factory=lambda: _env("GCS_BUCKET"))

    # Messenger Send API
    GRAPH_BASE: str = field(default_factory=lambda: _env("GRAPH_BASE", "https://graph.facebook.com"))
    GRAPH_VER: str = field(default_factory=lambda: _env("GRAPH_VER", "v19.0"))

    # image provider
    IMAGE_MODEL: str = field(default_factory=lambda: _env("IMAGE_MODEL", "gpt-image-1"))
    IMAGE_SIZE: str = field(default_factory=lambda: _env("IMAGE_SIZE", "1024x1024"))
    EDIT_SOURCE_IMAGE: bool = field(default_factory=lambda: str_to_bool(_env("EDIT_SOURCE_IMAGE", "true")))
    MAX_SOURCE_BYTES: int = field(default_factory=lambda: _env_int("MAX_SOURCE_BYTES", 10 * 1024 * 1024))

    # object storage
    STORAGE_HOST: str = field(default_factory=lambda: _env("STORAGE_HOST", "storage.googleapis.com"))
    STORAGE_PREFIX: str = field(default_factory=lambda: _env("STORAGE_PREFIX", "out"))
    CACHE_CONTROL: str = field(default_factory=lambda: _env("CACHE_CONTROL", "public, max-age=31536000"))

    # timeouts (seconds)
    HTTP_TIMEOUT: float = field(default_factory=lambda: _env_float("HTTP_TIMEOUT", 20.0))
    DOWNLOAD_TIMEOUT: float = field(default_factory=lambda: _env_float("DOWNLOAD_TIMEOUT", 30.0))
    PROVIDER_TIMEOUT: float = field(default_factory=lambda: _env_float("PROVIDER_TIMEOUT", 120.0))
    STORAGE_TIMEOUT: float = field(default_factory=lambda: _env_float("STORAGE_TIMEOUT", 60.0))

    SEND_FAILURE_NOTICE: bool = field(default_factory=lambda: str_to_bool(_env("SEND_FAILURE_NOTICE", "false")))
    PORT: int = field(default_factory=lambda: _env_int("PORT", 8080))

    @property
    def send_api_url(self) -> str:
        return f"{self.GRAPH_BASE.rstrip('/')}/{self.GRAPH_VER}/me/messages"

    def public_url(self, key: str) -> str:
        """
        Deterministic public URL for an object:
        https://<storage-host>/<bucket>/<key>
        """
        return f"https://{self.STORAGE_HOST}/{self.GCS_BUCKET}/{key}"


settings = Settings()
