from __future__ import annotations

from typing import Any, Mapping


class FcmError(Exception):
    code = "fcm_error"

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(FcmError):
    code = "configuration_error"


class ValidationError(FcmError):
    code = "validation_error"


class AccessTokenError(FcmError):
    code = "access_token_error"


class InvalidResponseError(FcmError):
    code = "invalid_response"

    @property
    def status_code(self) -> int | None:
        if not self.details:
            return None
        return self.details.get("status_code")
