from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from pushnotifications.config.options import FcmOptions


class RecordingTransport:
    """Wraps httpx.MockTransport and keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], Any]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)


class StubTokenProvider:
    def __init__(self, token: str | None = "ya29.test-token") -> None:
        self.token = token
        self.calls = 0

    async def get_access_token(self) -> str | None:
        self.calls += 1
        return self.token


@pytest.fixture(scope="session")
def rsa_key_pair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return private_pem, public_pem


@pytest.fixture()
def service_account_info(rsa_key_pair) -> dict[str, str]:
    private_pem, _ = rsa_key_pair
    return {
        "type": "service_account",
        "project_id": "push-test-project",
        "private_key_id": "kid-123",
        "private_key": private_pem,
        "client_email": "fcm-sender@push-test-project.iam.gserviceaccount.com",
        "token_uri": "https://oauth2.googleapis.com/token",
    }


@pytest.fixture()
def fcm_options(service_account_info) -> FcmOptions:
    return FcmOptions(credentials=json.dumps(service_account_info))


@pytest.fixture()
def token_provider() -> StubTokenProvider:
    return StubTokenProvider()


@pytest.fixture()
def make_transport() -> Callable[[Callable[[httpx.Request], Any]], RecordingTransport]:
    return RecordingTransport
