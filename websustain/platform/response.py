import json
from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Standard envelope for service endpoints (health and info).
    Automatically sets status = "success" if < 400 else "error"
    """
    status_str = "success" if status_code < 400 else "error"
    data = jsonable_encoder(data) if data is not None else {}

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "status": status_str,
            "message": message,
            "data": data,
        },
    )


def completion_response(content: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """
    Wraps a report in the chat-completion shape the browser client reads:
    {"choices": [{"message": {"content": "<json string>"}}]}
    """
    if not isinstance(content, str):
        content = json.dumps(jsonable_encoder(content))

    return JSONResponse(
        status_code=status_code,
        content={"choices": [{"message": {"content": content}}]},
    )


def error_response(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
