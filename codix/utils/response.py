"""Единый конверт ответа API."""
from typing import Any, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _serialize(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [_serialize(item) for item in data]
    if isinstance(data, dict):
        return {key: _serialize(value) for key, value in data.items()}
    return data


def envelope(status_code: int, data: Any = None, message: str = "Success") -> dict:
    return {
        "statusCode": status_code,
        "data": _serialize(data),
        "message": message,
        "success": status_code < 400,
    }


def api_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = 200,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Ответ в формате {statusCode, data, message, success}."""
    return JSONResponse(status_code=status_code, content=envelope(status_code, data, message), headers=headers)
