"""Shared test fixtures and configuration."""

import base64
import io
import json
import urllib.error
from typing import Any, Dict, List, Optional, Union
from unittest.mock import MagicMock, patch

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


ENV_VARS = (
    "GOOGLE_SERVICE_ACCOUNT_EMAIL",
    "GOOGLE_SERVICE_ACCOUNT_KEY",
    "GOOGLE_SERVICE_ACCOUNT_JSON_B64",
)

TOKEN_URL = "https://oauth2.googleapis.com/token"
VALUES_PREFIX = "https://sheets.googleapis.com/v4/spreadsheets/"
EXPORT_PREFIX = "https://docs.google.com/spreadsheets/d/"


class FakeUpstream:
    """Stands in for urlopen: answers by URL prefix and records every request."""

    def __init__(self):
        self.routes: Dict[str, tuple] = {}
        self.requests: List[Any] = []

    def add(self, prefix: str, status: int, body: Union[str, bytes] = "") -> None:
        raw = body if isinstance(body, bytes) else body.encode("utf-8")
        self.routes[prefix] = (status, raw)

    def add_json(self, prefix: str, status: int, payload: Dict[str, Any]) -> None:
        self.add(prefix, status, json.dumps(payload))

    def calls_to(self, prefix: str) -> List[Any]:
        return [req for req in self.requests if req.full_url.startswith(prefix)]

    def __call__(self, req, timeout: Optional[int] = None):
        self.requests.append(req)

        for prefix, (status, body) in self.routes.items():
            if not req.full_url.startswith(prefix):
                continue
            if status >= 400:
                raise urllib.error.HTTPError(
                    req.full_url, status, "error", {}, io.BytesIO(body)
                )
            response = MagicMock()
            response.status = status
            response.read.return_value = body
            response.__enter__.return_value = response
            return response

        raise urllib.error.URLError(f"no route for {req.full_url}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Make sure no deployment credentials leak in from the real environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def upstream():
    fake = FakeUpstream()
    with patch("urllib.request.urlopen", side_effect=fake):
        yield fake


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key) -> str:
    """PKCS8 PEM, wrapped at 64 columns, trailing newline."""
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def service_account_email() -> str:
    return "importer@reconcile-test.iam.gserviceaccount.com"


def function_url_event(body: Any = None, method: str = "POST", base64_body: bool = False) -> Dict[str, Any]:
    """Build a Lambda Function URL (payload v2.0) event."""
    raw = "" if body is None else (body if isinstance(body, str) else json.dumps(body))
    if base64_body:
        raw = base64.b64encode(raw.encode("utf-8")).decode("ascii")

    return {
        "version": "2.0",
        "rawPath": "/",
        "requestContext": {"http": {"method": method, "path": "/"}},
        "headers": {"content-type": "application/json"},
        "body": raw,
        "isBase64Encoded": base64_body,
    }
