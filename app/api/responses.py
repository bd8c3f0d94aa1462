"""Uniform JSON response writer for success payloads and error envelopes."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def respond_with_json(status_code: int, payload: Any) -> JSONResponse:
    """Serialize payload and return it with the given status and application/json."""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def respond_with_error(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Return {"error": message} with the given status."""
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=headers,
    )
