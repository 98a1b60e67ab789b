import httpx
import pytest

from app.core.errors import MediaError
from app.services.media import MediaDownloader, to_png
from conftest import image_bytes, make_settings

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def transport_returning(status_code=200, content=b""):
    return httpx.MockTransport(lambda request: httpx.Response(status_code, content=content))


async def test_download_converts_jpeg_to_png():
    downloader = MediaDownloader(make_settings(), transport=transport_returning(content=image_bytes("JPEG")))

    data = await downloader.download_image("https://cdn.example/img.jpg")

    assert data.startswith(PNG_MAGIC)


async def test_http_error_raises_media_error():
    downloader = MediaDownloader(make_settings(), transport=transport_returning(status_code=404))

    with pytest.raises(MediaError):
        await downloader.download_image("https://cdn.example/missing.jpg")


async def test_oversize_payload_rejected():
    settings = make_settings(MAX_SOURCE_BYTES=10)
    downloader = MediaDownloader(settings, transport=transport_returning(content=image_bytes()))

    with pytest.raises(MediaError, match="limit"):
        await downloader.download_image("https://cdn.example/big.png")


async def test_empty_body_rejected():
    downloader = MediaDownloader(make_settings(), transport=transport_returning(content=b""))

    with pytest.raises(MediaError, match="empty"):
        await downloader.download_image("https://cdn.example/empty.png")


def test_to_png_rejects_garbage():
    with pytest.raises(MediaError):
        to_png(b"definitely not an image")


def test_to_png_converts_palette_images():
    assert to_png(image_bytes("GIF")).startswith(PNG_MAGIC)


async def test_declared_length_over_limit_rejected_before_reading():
    pulled = []

    async def body():
        pulled.append(1)
        yield b"x" * 100

    def handler(request):
        return httpx.Response(200, headers={"content-length": "5000"}, content=body())

    downloader = MediaDownloader(make_settings(MAX_SOURCE_BYTES=100), transport=httpx.MockTransport(handler))

    with pytest.raises(MediaError, match="limit"):
        await downloader.download_image("https://cdn.example/huge.png")

    assert pulled == []


async def test_streamed_body_stops_once_over_limit():
    pulled = []

    async def body():
        for _ in range(50):
            pulled.append(1)
            yield b"x" * 40

    downloader = MediaDownloader(
        make_settings(MAX_SOURCE_BYTES=100),
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=body())),
    )

    with pytest.raises(MediaError, match="limit"):
        await downloader.download_image("https://cdn.example/chunked.png")

    assert len(pulled) < 50
