import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from app.api import api_router
from app.core.bridge import ImageBridge
from app.core.config import Settings, settings as default_settings

logging.basicConfig(
    format="%(asctime)s | %(levelname)s | %(message)s",
    level=logging.INFO,
)


def create_app(settings: Optional[Settings] = None, bridge: Optional[ImageBridge] = None) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(title="Successful Me Messenger Bot")
    app.state.settings = settings
    app.state.bridge = bridge or ImageBridge.from_settings(settings)
    app.include_router(api_router)

    for name in ("VERIFY_TOKEN", "PAGE_ACCESS_TOKEN", "OPENAI_API_KEY", "GCS_BUCKET"):
        if not getattr(settings, name):
            logging.warning("%s is empty; related requests will fail.", name)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)
