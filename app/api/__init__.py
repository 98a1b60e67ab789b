from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from . import webhook

api_router = APIRouter()
api_router.include_router(webhook.router, tags=["Messenger"])


@api_router.get("/", include_in_schema=False, response_class=PlainTextResponse)
async def home():
    return "ok"


@api_router.get("/healthz", tags=["Health"])
def health():
    return {"status": "ok"}
