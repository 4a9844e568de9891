"""Клиент объектного хранилища Cloudinary."""
import hashlib
import mimetypes
import os
import time
from typing import Any, Dict, Optional

import httpx

from codix.core.config import Settings, get_settings
from codix.utils.enums import ResourceKind
from codix.utils.exceptions import StorageError
from codix.utils.logger import get_logger
from codix.utils.retry import retry_with_backoff

logger = get_logger(__name__)

IMAGE_TRANSFORMATION = "c_limit,w_1000,h_1000,q_auto,f_auto"
# Параметры, не входящие в подпись
_UNSIGNED_PARAMS = {"file", "cloud_name", "resource_type", "api_key"}


def detect_resource_kind(path: str, content_type: Optional[str] = None) -> ResourceKind:
    """Определить тип ресурса по MIME-типу файла."""
    mime = content_type or mimetypes.guess_type(path)[0] or ""
    if mime.startswith("image/"):
        return ResourceKind.IMAGE
    if mime.startswith("video/"):
        return ResourceKind.VIDEO
    return ResourceKind.RAW


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """SHA1 от отсортированных параметров и секрета."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def remove_local_file(path: Optional[str]) -> None:
    """Удалить временный файл, если он есть."""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("temp_file_remove_failed", path=path, error=str(e))


class CloudinaryStorage:
    """Загрузка и удаление файлов через REST API Cloudinary."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.base_url = f"{settings.cloudinary_base_url}/{settings.cloudinary_cloud_name}"
        self.client = client or httpx.AsyncClient(timeout=60.0)

    async def close(self):
        """Закрыть HTTP клиент."""
        await self.client.aclose()

    def _signed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        signed = dict(params)
        signed["timestamp"] = int(time.time())
        signed["signature"] = sign_params(signed, self.settings.cloudinary_api_secret)
        signed["api_key"] = self.settings.cloudinary_api_key
        return signed

    async def upload(self, path: str, content_type: Optional[str] = None) -> Dict[str, str]:
        """
        Загрузить локальный файл в хранилище.

        Локальный файл удаляется после любой попытки загрузки.

        Args:
            path: Путь к временному файлу
            content_type: MIME-тип (если известен)

        Returns:
            {"url", "publicId", "resourceKind"}

        Raises:
            StorageError: Хранилище вернуло ошибку или недоступно
        """
        if not path or not os.path.exists(path):
            raise StorageError("File to upload not found")

        kind = detect_resource_kind(path, content_type)
        params: Dict[str, Any] = {}
        if kind == ResourceKind.IMAGE:
            params["transformation"] = IMAGE_TRANSFORMATION

        try:
            with open(path, "rb") as fh:
                payload = fh.read()
            response = await retry_with_backoff(
                self._post,
                f"/{kind.value}/upload",
                data=self._signed(params),
                files={"file": (os.path.basename(path), payload)},
                retry_on=(httpx.RequestError,),
            )
            response.raise_for_status()
            result = response.json()
            logger.info("storage_upload_success", public_id=result.get("public_id"), kind=kind.value)
            return {
                "url": result["secure_url"],
                "publicId": result["public_id"],
                "resourceKind": result.get("resource_type", kind.value),
            }
        except httpx.HTTPStatusError as e:
            logger.error("storage_upload_failed", status_code=e.response.status_code, error=str(e))
            raise StorageError(f"Upload failed with status {e.response.status_code}")
        except httpx.RequestError as e:
            logger.error("storage_upload_failed", error=str(e))
            raise StorageError(f"Upload failed: {e}")
        finally:
            remove_local_file(path)

    async def delete(self, public_id: str, kind: str = ResourceKind.IMAGE.value) -> None:
        """
        Удалить файл из хранилища.

        Raises:
            StorageError: Удаление не выполнено
        """
        if not public_id:
            raise StorageError("publicId is required")
        kind = ResourceKind(kind).value
        try:
            response = await retry_with_backoff(
                self._post,
                f"/{kind}/destroy",
                data=self._signed({"public_id": public_id, "invalidate": "true"}),
                retry_on=(httpx.RequestError,),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("storage_delete_failed", public_id=public_id, status_code=e.response.status_code)
            raise StorageError(f"Delete failed with status {e.response.status_code}")
        except httpx.RequestError as e:
            logger.error("storage_delete_failed", public_id=public_id, error=str(e))
            raise StorageError(f"Delete failed: {e}")

        result = response.json().get("result")
        if result not in ("ok", "not found"):
            logger.error("storage_delete_failed", public_id=public_id, result=result)
            raise StorageError(f"Delete failed: {result}")
        logger.info("storage_delete_success", public_id=public_id, kind=kind)

    async def delete_quietly(self, public_id: Optional[str], kind: Optional[str] = None) -> bool:
        """Удалить файл, не пробрасывая ошибки. Возвращает успех."""
        if not public_id:
            return False
        try:
            await self.delete(public_id, kind or ResourceKind.IMAGE.value)
            return True
        except (StorageError, ValueError) as e:
            logger.warning("storage_cleanup_failed", public_id=public_id, error=str(e))
            return False

    async def _post(self, path: str, **kwargs) -> httpx.Response:
        return await self.client.post(f"{self.base_url}{path}", **kwargs)


_storage: Optional[CloudinaryStorage] = None


def get_storage() -> CloudinaryStorage:
    """Dependency: общий клиент хранилища."""
    global _storage
    if _storage is None:
        _storage = CloudinaryStorage(get_settings())
    return _storage
