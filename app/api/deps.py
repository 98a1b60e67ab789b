from fastapi import Request

from app.core.bridge import ImageBridge
from app.core.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_bridge(request: Request) -> ImageBridge:
    return request.app.state.bridge
