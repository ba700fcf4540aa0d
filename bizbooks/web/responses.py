"""JSON envelope helpers shared by every router."""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from bizbooks.schemas.common import money_str

_ENCODERS = {Decimal: money_str}


def encode(value: Any) -> Any:
    """Encode payloads for JSON, rendering ``Decimal`` values as money strings."""

    return jsonable_encoder(value, custom_encoder=_ENCODERS)


def envelope(
    data: Any = None,
    *,
    message: str | None = None,
    success: bool = True,
    errors: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return body


def respond(
    data: Any = None,
    *,
    message: str | None = None,
    status_code: int = 200,
) -> JSONResponse:
    """Build a successful envelope response."""

    return JSONResponse(encode(envelope(data, message=message)), status_code=status_code)


def fail(
    message: str,
    *,
    status_code: int,
    data: Any = None,
    errors: list[dict[str, str]] | None = None,
    **extra: Any,
) -> JSONResponse:
    """Build an error envelope response."""

    body = envelope(data, message=message, success=False, errors=errors)
    body.update(extra)
    return JSONResponse(encode(body), status_code=status_code)


__all__ = ["encode", "envelope", "fail", "respond"]
