from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pushnotifications.config.options import FcmLegacyOptions, FcmOptions


class FcmSettings(BaseSettings):
    log_level: str = "INFO"
    timeout_seconds: float = 10.0
    # Legacy HTTP API
    server_key: SecretStr | None = None
    # HTTP v1 (path or inline JSON in service_account_key_file_path, or credentials)
    service_account_key_file_path: str | None = None
    credentials: SecretStr | None = None

    model_config = SettingsConfigDict(
        env_prefix="FCM_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("timeout_seconds")
    @classmethod
    def ensure_positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be positive")
        return value

    def legacy_options(self) -> FcmLegacyOptions:
        key = self.server_key.get_secret_value() if self.server_key else ""
        return FcmLegacyOptions(api_key=key)

    def fcm_options(self) -> FcmOptions:
        """
        Build v1 options. A service_account_key_file_path starting with '{'
        is treated as inline JSON rather than a path.
        """
        path = self.service_account_key_file_path
        inline = self.credentials.get_secret_value() if self.credentials else None
        if path and path.strip().startswith("{"):
            if inline:
                # both sources set; let validation report it
                return FcmOptions(service_account_key_file_path=path, credentials=inline)
            return FcmOptions(credentials=path.strip())
        return FcmOptions(service_account_key_file_path=path or None, credentials=inline)


@lru_cache(maxsize=1)
def get_settings() -> FcmSettings:
    return FcmSettings()
