"""
Choose which credential source a fetch request uses.

Order: request-supplied service account, then the deployment's configured
service account, then the unauthenticated public CSV export.
"""

import base64
import binascii
import json
import os
from dataclasses import dataclass

from errors import ConfigError
from models import FetchRequest, ServiceAccountCredentials


STRATEGY_REQUEST = "request"
STRATEGY_ENVIRONMENT = "environment"
STRATEGY_PUBLIC = "public"


@dataclass(frozen=True)
class SheetsConfig:
    """Process-wide defaults, built once at the Lambda boundary."""

    service_account_email: str | None = None
    service_account_key: str | None = None

    @classmethod
    def from_env(cls, environ=None) -> "SheetsConfig":
        """
        Load the default service account from environment variables.

        GOOGLE_SERVICE_ACCOUNT_EMAIL / GOOGLE_SERVICE_ACCOUNT_KEY take
        precedence. Otherwise GOOGLE_SERVICE_ACCOUNT_JSON_B64 may hold the
        base64-encoded service account JSON key file.
        """
        environ = os.environ if environ is None else environ

        email = environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL")
        key = environ.get("GOOGLE_SERVICE_ACCOUNT_KEY")
        if email and key:
            return cls(email, key)

        encoded = environ.get("GOOGLE_SERVICE_ACCOUNT_JSON_B64")
        if encoded:
            info = _decode_service_account_json(encoded)
            return cls(info["client_email"], info["private_key"])

        return cls()

    @property
    def credentials(self) -> ServiceAccountCredentials | None:
        if self.service_account_email and self.service_account_key:
            return ServiceAccountCredentials(self.service_account_email, self.service_account_key)
        return None

    def __repr__(self) -> str:
        return f"SheetsConfig(service_account_email={self.service_account_email!r})"


@dataclass(frozen=True)
class AuthStrategy:
    kind: str
    credentials: ServiceAccountCredentials | None = None

    @property
    def is_public(self) -> bool:
        return self.kind == STRATEGY_PUBLIC


def resolve_auth_strategy(request: FetchRequest, config: SheetsConfig) -> AuthStrategy:
    """Pick the credential source for a request. First match wins."""
    if request.credentials is not None:
        print("Using provided service account credentials")
        return AuthStrategy(STRATEGY_REQUEST, request.credentials)

    if config.credentials is not None:
        print("Using environment service account credentials")
        return AuthStrategy(STRATEGY_ENVIRONMENT, config.credentials)

    print("No service account credentials, falling back to public CSV export")
    return AuthStrategy(STRATEGY_PUBLIC)


def _decode_service_account_json(encoded: str) -> dict:
    try:
        info = json.loads(base64.b64decode(encoded))
    except (binascii.Error, ValueError) as e:
        raise ConfigError(f"GOOGLE_SERVICE_ACCOUNT_JSON_B64 is not valid base64 JSON: {e}") from e

    if not isinstance(info, dict):
        raise ConfigError("GOOGLE_SERVICE_ACCOUNT_JSON_B64 must encode a JSON object")

    missing = [field for field in ("client_email", "private_key") if not info.get(field)]
    if missing:
        raise ConfigError(
            f"GOOGLE_SERVICE_ACCOUNT_JSON_B64 is missing {', '.join(missing)}"
        )

    return info
