from __future__ import annotations

import json
from typing import Any, TypeVar

from ._errors import DecodeError, RemoteError
from ._models import ErrorResponse
from ._transport import RawResponse

__all__ = ["decode_json", "raise_for_status", "decode_response"]

T = TypeVar("T")


def decode_json(body: bytes | str, encoding: str | None = None) -> Any:
    """Parse *body* as JSON; bytes are decoded strictly with *encoding* (default UTF-8)."""
    try:
        if isinstance(body, bytes):
            body = body.decode(encoding or "utf-8")
        return json.loads(body)
    except UnicodeDecodeError as exc:
        raise DecodeError(f"response body is not valid {exc.encoding}: {exc.reason}") from exc
    except LookupError as exc:
        raise DecodeError(f"response body has an unknown charset: {encoding}") from exc
    except ValueError as exc:
        raise DecodeError(f"response body is not valid JSON: {exc}") from exc


def raise_for_status(raw: RawResponse) -> None:
    """Raise :class:`RemoteError` for a non-2xx *raw* response.

    Does **nothing** when the status is 2xx. The body is decoded as an
    :class:`ErrorResponse`; if that fails the raw text becomes the error
    payload and the :class:`DecodeError` is chained.
    """
    if raw.ok:
        return

    try:
        envelope = ErrorResponse.from_dict(decode_json(raw.content, raw.encoding))
    except DecodeError as exc:
        raise RemoteError(raw.status_code, raw.text, raw.text) from exc

    raise RemoteError(raw.status_code, envelope.error, raw.text)


def decode_response(raw: RawResponse, result_type: type[T]) -> T:
    """Turn *raw* into a *result_type* model or raise the matching error."""
    raise_for_status(raw)
    return result_type.from_dict(decode_json(raw.content, raw.encoding))
