from __future__ import annotations

import logging
import time
from typing import Callable

import httpx
from jose import jwk, jwt
from jose.exceptions import JOSEError

from pushnotifications.application.errors import AccessTokenError, ConfigurationError
from pushnotifications.config.options import ServiceAccountConfig

logger = logging.getLogger(__name__)

FIREBASE_MESSAGING_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"


class ServiceAccountCredential:
    """OAuth2 service account credential using a signed JWT assertion.

    Access tokens are short-lived (one hour) and reused until shortly before
    they expire.
    """

    ASSERTION_LIFETIME = 3600
    REFRESH_MARGIN = 60

    def __init__(
        self,
        config: ServiceAccountConfig,
        *,
        http_client: httpx.AsyncClient,
        scopes: tuple[str, ...] = (FIREBASE_MESSAGING_SCOPE,),
        clock: Callable[[], float] = time.time,
    ) -> None:
        try:
            jwk.construct(config.private_key, algorithm="RS256")
        except JOSEError as exc:
            raise ConfigurationError(
                "Error creating service account credential: invalid private_key"
            ) from exc
        self.config = config
        self.http_client = http_client
        self.scopes = scopes
        self._clock = clock
        self._cached_token: str | None = None
        self._token_exp: float = 0

    @property
    def token_uri(self) -> str:
        return self.config.token_uri

    def _build_assertion(self, now: int) -> str:
        headers = {"kid": self.config.private_key_id} if self.config.private_key_id else None
        return jwt.encode(
            {
                "iss": self.config.client_email,
                "scope": " ".join(self.scopes),
                "aud": self.token_uri,
                "iat": now,
                "exp": now + self.ASSERTION_LIFETIME,
            },
            self.config.private_key,
            algorithm="RS256",
            headers=headers,
        )

    async def get_access_token(self) -> str | None:
        now = int(self._clock())
        # Reuse cached token if valid for > REFRESH_MARGIN seconds
        if self._cached_token and now < (self._token_exp - self.REFRESH_MARGIN):
            return self._cached_token

        data = {"grant_type": JWT_BEARER_GRANT, "assertion": self._build_assertion(now)}
        resp = await self.http_client.post(self.token_uri, data=data)
        if resp.status_code >= 400:
            logger.error("Token endpoint error %s: %s", resp.status_code, resp.text)
            raise AccessTokenError(
                "Token endpoint rejected the service account assertion",
                details={"status_code": resp.status_code, "body": resp.text},
            )
        try:
            body = resp.json()
        except ValueError as exc:
            raise AccessTokenError("Token endpoint returned invalid JSON") from exc

        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            return None
        try:
            expires_in = int(body.get("expires_in") or self.ASSERTION_LIFETIME)
        except (TypeError, ValueError) as exc:
            raise AccessTokenError(
                "Token endpoint returned an invalid expires_in",
                details={"expires_in": body.get("expires_in")},
            ) from exc
        self._cached_token = token
        self._token_exp = now + expires_in
        logger.debug("Obtained access token for %s", self.config.client_email)
        return token
