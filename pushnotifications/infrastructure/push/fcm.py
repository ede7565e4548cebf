from __future__ import annotations

import logging

import httpx

from pushnotifications.application.errors import ConfigurationError, ValidationError
from pushnotifications.config.options import FcmLegacyOptions, validate_legacy_options
from pushnotifications.domain.models.fcm_legacy import FcmRequest, FcmResponse
from pushnotifications.infrastructure.push.transport import (
    DEFAULT_TIMEOUT,
    USER_AGENT,
    create_http_client,
    parse_response,
)


class FcmLegacyClient:
    """FCM legacy HTTP sender (server key)."""

    API_NAME = "FCM legacy HTTP API"
    ENDPOINT = "https://fcm.googleapis.com/fcm/send"

    def __init__(
        self,
        options: FcmLegacyOptions,
        *,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
        timeout: float | None = None,
    ) -> None:
        problem = validate_legacy_options(options)
        if problem is not None:
            raise ConfigurationError(problem.reason)
        self.options = options
        self.logger = logger or logging.getLogger(__name__)
        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = create_http_client(timeout or DEFAULT_TIMEOUT)
        self.http_client = http_client

    async def __aenter__(self) -> "FcmLegacyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    @staticmethod
    def _validate(request: FcmRequest | None) -> FcmRequest:
        if request is None:
            raise ValidationError("FCM request must not be None")
        if not request.registration_ids:
            raise ValidationError("FCM request needs at least one registration ID")
        if any(not rid for rid in request.registration_ids):
            raise ValidationError("Registration IDs must not be None or empty")
        return request

    async def send(self, request: FcmRequest) -> FcmResponse:
        """Send ``request`` and return the per-registration-ID results.

        Non-2xx responses are still parsed and returned; only transport errors
        and invalid requests raise.
        """
        request = self._validate(request)
        headers = {
            "Authorization": f"key={self.options.api_key}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        resp = await self.http_client.post(self.ENDPOINT, headers=headers, json=request.to_payload())
        self.logger.debug("%s send returned %s: %s", self.API_NAME, resp.status_code, resp.text)

        fcm_response = parse_response(resp, FcmResponse.from_payload)
        fcm_response.status_code = resp.status_code

        registration_ids = request.registration_ids
        if len(fcm_response.results) != len(registration_ids):
            self.logger.warning(
                "%s returned %d results for %d registration IDs",
                self.API_NAME,
                len(fcm_response.results),
                len(registration_ids),
            )
        for registration_id, result in zip(registration_ids, fcm_response.results):
            result.registration_id = registration_id

        if resp.is_success:
            self.logger.info(
                "%s send to %d registration IDs completed: success=%d failure=%d",
                self.API_NAME,
                len(registration_ids),
                fcm_response.number_of_successes,
                fcm_response.number_of_failures,
            )
        else:
            self.logger.error(
                "%s send failed with StatusCode=%s: %s",
                self.API_NAME,
                resp.status_code,
                resp.text,
            )
        return fcm_response
