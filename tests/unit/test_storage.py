"""Тесты для клиента объектного хранилища."""
import hashlib
import json

import httpx
import pytest

from codix.core.config import get_settings
from codix.utils.enums import ResourceKind
from codix.utils.exceptions import StorageError
from codix.utils.storage import IMAGE_TRANSFORMATION, CloudinaryStorage, detect_resource_kind, sign_params


def _storage(handler) -> CloudinaryStorage:
    settings = get_settings().model_copy(
        update={"cloudinary_cloud_name": "demo", "cloudinary_api_key": "key", "cloudinary_api_secret": "secret"}
    )
    return CloudinaryStorage(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.unit
def test_sign_params_excludes_unsigned_fields():
    params = {"timestamp": 100, "public_id": "a/b", "api_key": "key", "file": "x", "resource_type": "image"}
    expected = hashlib.sha1(b"public_id=a/b&timestamp=100secret").hexdigest()
    assert sign_params(params, "secret") == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "path, content_type, kind",
    [
        ("photo.png", None, ResourceKind.IMAGE),
        ("clip.mp4", None, ResourceKind.VIDEO),
        ("cv.pdf", None, ResourceKind.RAW),
        ("blob", "image/webp", ResourceKind.IMAGE),
        ("noext", None, ResourceKind.RAW),
    ],
)
def test_detect_resource_kind(path, content_type, kind):
    assert detect_resource_kind(path, content_type) == kind


@pytest.mark.asyncio
@pytest.mark.unit
async def test_upload_image_applies_transformation_and_removes_file(tmp_path):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"secure_url": "https://cdn/x.png", "public_id": "x", "resource_type": "image"})

    local = tmp_path / "photo.png"
    local.write_bytes(b"\x89PNG fake")
    storage = _storage(handler)

    result = await storage.upload(str(local))

    assert result == {"url": "https://cdn/x.png", "publicId": "x", "resourceKind": "image"}
    assert not local.exists()
    assert requests[0].url.path.endswith("/demo/image/upload")
    body = requests[0].content
    assert IMAGE_TRANSFORMATION.encode() in body
    assert b"signature" in body
    await storage.close()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_upload_raises_and_still_removes_file(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "boom"}})

    local = tmp_path / "cv.pdf"
    local.write_bytes(b"%PDF")
    storage = _storage(handler)

    with pytest.raises(StorageError):
        await storage.upload(str(local))
    assert not local.exists()
    await storage.close()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_and_delete_quietly():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if b"public_id=missing" in request.content:
            return httpx.Response(200, content=json.dumps({"result": "error"}))
        return httpx.Response(200, json={"result": "ok"})

    storage = _storage(handler)

    await storage.delete("good", "raw")
    assert calls[-1].endswith("/demo/raw/destroy")

    with pytest.raises(StorageError):
        await storage.delete("missing", "image")
    assert await storage.delete_quietly("missing", "image") is False
    assert await storage.delete_quietly(None) is False
    assert await storage.delete_quietly("good") is True
    await storage.close()
