from __future__ import annotations

import logging

import httpx

from pushnotifications.application.errors import (
    AccessTokenError,
    ConfigurationError,
    ValidationError,
)
from pushnotifications.config.options import (
    ConfigurationProblem,
    FcmOptions,
    load_service_account,
)
from pushnotifications.domain.models.fcm_v1 import FcmV1Request, FcmV1Response
from pushnotifications.domain.ports.access_token import AccessTokenProvider
from pushnotifications.infrastructure.auth.service_account import ServiceAccountCredential
from pushnotifications.infrastructure.push.transport import (
    DEFAULT_TIMEOUT,
    USER_AGENT,
    create_http_client,
    parse_response,
)


class FcmClient:
    """Firebase Cloud Messaging HTTP v1 client using a Service Account JSON.

    The project id is read from the service account's ``project_id``. A fresh
    (or cached, still valid) OAuth2 access token is requested before every send.
    """

    API_NAME = "FCM HTTP v1 API"
    ENDPOINT_TEMPLATE = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"

    def __init__(
        self,
        options: FcmOptions,
        *,
        http_client: httpx.AsyncClient | None = None,
        token_provider: AccessTokenProvider | None = None,
        logger: logging.Logger | None = None,
        timeout: float | None = None,
    ) -> None:
        config = load_service_account(options)
        if isinstance(config, ConfigurationProblem):
            raise ConfigurationError(config.reason)
        self.options = options
        self.project_id = config.project_id
        self.logger = logger or logging.getLogger(__name__)
        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = create_http_client(timeout or DEFAULT_TIMEOUT)
        self.http_client = http_client
        self.token_provider = token_provider or ServiceAccountCredential(
            config, http_client=http_client
        )

    @property
    def endpoint(self) -> str:
        return self.ENDPOINT_TEMPLATE.format(project_id=self.project_id)

    async def __aenter__(self) -> "FcmClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    async def _create_access_token(self) -> str:
        access_token = await self.token_provider.get_access_token()
        if access_token is None:
            raise AccessTokenError("Failed to obtain access token for request")
        return access_token

    async def send(self, request: FcmV1Request) -> FcmV1Response:
        if request is None:
            raise ValidationError("FCM request must not be None")
        if request.message is None:
            raise ValidationError("FCM request.message must not be None")
        if not request.message.has_target:
            raise ValidationError("FCM message needs a token, topic or condition")

        access_token = await self._create_access_token()
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        resp = await self.http_client.post(self.endpoint, headers=headers, json=request.to_payload())
        self.logger.debug("%s send returned json content: %s", self.API_NAME, resp.text)

        token = request.message.token
        fcm_response = parse_response(resp, FcmV1Response.model_validate)
        fcm_response.token = token
        fcm_response.status_code = resp.status_code

        if resp.status_code == 200:
            self.logger.info("%s send to Token=%s successfully completed", self.API_NAME, token)
        else:
            self.logger.error(
                "%s send to Token=%s failed with StatusCode=%s (%s)",
                self.API_NAME,
                token,
                resp.status_code,
                resp.reason_phrase,
            )
        return fcm_response
