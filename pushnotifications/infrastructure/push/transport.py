from __future__ import annotations

from typing import Any, Callable, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from pushnotifications.application.errors import InvalidResponseError

VERSION = "0.1.0"
USER_AGENT = f"pushnotifications/{VERSION}"
DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")


def create_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, headers={"User-Agent": USER_AGENT})


def _details(response: httpx.Response) -> dict[str, Any]:
    return {"status_code": response.status_code, "body": response.text}


def parse_json_body(response: httpx.Response) -> dict:
    """Decode a JSON object body; an empty body is treated as an empty object."""
    if not response.content.strip():
        return {}
    try:
        body = response.json()
    except ValueError as exc:
        raise InvalidResponseError(
            "FCM response body is not valid JSON", details=_details(response)
        ) from exc
    if not isinstance(body, dict):
        raise InvalidResponseError(
            "FCM response body is not a JSON object", details=_details(response)
        )
    return body


def parse_response(response: httpx.Response, build: Callable[[dict], T]) -> T:
    """Decode the body and build the response model from it.

    A JSON object whose shape does not fit the model is reported as
    ``InvalidResponseError``, same as a body that is not JSON at all.
    """
    body = parse_json_body(response)
    try:
        return build(body)
    except PydanticValidationError as exc:
        raise InvalidResponseError(
            "FCM response body has an unexpected shape", details=_details(response)
        ) from exc
