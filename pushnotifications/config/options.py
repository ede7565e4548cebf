from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(slots=True, frozen=True)
class FcmLegacyOptions:
    """Server key for the legacy HTTP API."""

    api_key: str

    def __repr__(self) -> str:
        return "FcmLegacyOptions(api_key='**********')"


@dataclass(slots=True, frozen=True)
class FcmOptions:
    """Service account source for the HTTP v1 API.

    Exactly one of ``service_account_key_file_path`` (path to the JSON key file)
    or ``credentials`` (the JSON key content itself) must be given.
    """

    service_account_key_file_path: str | None = None
    credentials: str | None = field(default=None, repr=False)


@dataclass(slots=True, frozen=True)
class ServiceAccountConfig:
    project_id: str
    client_email: str
    private_key: str = field(repr=False)
    private_key_id: str | None = None
    token_uri: str = GOOGLE_TOKEN_URI


@dataclass(slots=True, frozen=True)
class ConfigurationProblem:
    reason: str


def validate_legacy_options(options: FcmLegacyOptions | None) -> ConfigurationProblem | None:
    if options is None:
        return ConfigurationProblem("FCM legacy options must be provided")
    if not options.api_key or not options.api_key.strip():
        return ConfigurationProblem("FCM server key (api_key) must not be empty")
    return None


def _read_key_file(path: str) -> str | ConfigurationProblem:
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        return ConfigurationProblem(
            f"Service account key file could not be found at: {file_path.resolve()}"
        )
    try:
        return file_path.read_text(encoding="utf-8")
    except OSError as exc:
        return ConfigurationProblem(f"Service account key file could not be read: {exc}")


def load_service_account(options: FcmOptions | None) -> ServiceAccountConfig | ConfigurationProblem:
    """Resolve and validate the service account JSON for the v1 client.

    Returns a ``ConfigurationProblem`` naming the first failed check instead of raising,
    the caller decides how to surface it.
    """
    if options is None:
        return ConfigurationProblem("FCM options must be provided")

    has_path = bool(options.service_account_key_file_path)
    has_inline = bool(options.credentials and options.credentials.strip())
    if has_path and has_inline:
        return ConfigurationProblem(
            "Provide either a service account key file path or inline credentials, not both"
        )
    if not has_path and not has_inline:
        return ConfigurationProblem(
            "Either a service account key file path or inline credentials must be provided"
        )

    if has_path:
        content = _read_key_file(options.service_account_key_file_path)  # type: ignore[arg-type]
        if isinstance(content, ConfigurationProblem):
            return content
    else:
        content = options.credentials  # type: ignore[assignment]

    try:
        data = json.loads(content)
    except ValueError as exc:
        return ConfigurationProblem(f"Service account credentials are not valid JSON: {exc}")
    if not isinstance(data, dict):
        return ConfigurationProblem("Service account credentials must be a JSON object")

    project_id = data.get("project_id")
    if not project_id:
        return ConfigurationProblem("Could not read project_id from service account credentials")
    missing = [key for key in ("client_email", "private_key") if not data.get(key)]
    if missing:
        return ConfigurationProblem(
            f"Service account credentials are missing: {', '.join(missing)}"
        )

    return ServiceAccountConfig(
        project_id=str(project_id),
        client_email=data["client_email"],
        private_key=data["private_key"],
        private_key_id=data.get("private_key_id"),
        token_uri=data.get("token_uri") or GOOGLE_TOKEN_URI,
    )
