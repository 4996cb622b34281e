"""
Request and credential shapes for the fetch function.

Payloads are validated here, at the boundary, so the rest of the code
works with typed values instead of raw JSON dicts.
"""

import re
from dataclasses import dataclass

from errors import ValidationError


SPREADSHEET_URL_MARKER = "docs.google.com/spreadsheets"
SPREADSHEET_URL_ID = re.compile(r"/d/([a-zA-Z0-9_-]+)")
SPREADSHEET_ID = re.compile(r"^[a-zA-Z0-9_-]+$")


@dataclass(frozen=True)
class ServiceAccountCredentials:
    client_email: str
    private_key: str

    def __repr__(self) -> str:
        # Keep key material out of logs and tracebacks
        return f"ServiceAccountCredentials(client_email={self.client_email!r})"


@dataclass(frozen=True)
class FetchRequest:
    spreadsheet_id: str
    service_account_email: str | None = None
    service_account_key: str | None = None

    @classmethod
    def from_payload(cls, payload) -> "FetchRequest":
        """Validate a decoded JSON request body."""
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        raw_id = payload.get("spreadsheetId")
        if not raw_id or not isinstance(raw_id, str) or not raw_id.strip():
            raise ValidationError("spreadsheetId is required")

        return cls(
            spreadsheet_id=resolve_spreadsheet_id(raw_id),
            service_account_email=_optional_str(payload, "serviceAccountEmail"),
            service_account_key=_optional_str(payload, "serviceAccountKey"),
        )

    @property
    def credentials(self) -> ServiceAccountCredentials | None:
        """Request-supplied credentials, only when both halves are present."""
        if self.service_account_email and self.service_account_key:
            return ServiceAccountCredentials(self.service_account_email, self.service_account_key)
        return None


def resolve_spreadsheet_id(value: str) -> str:
    """Accept either a full Google Sheets URL or a bare spreadsheet ID."""
    value = value.strip()

    if SPREADSHEET_URL_MARKER in value:
        match = SPREADSHEET_URL_ID.search(value)
        if not match:
            raise ValidationError(
                "Invalid Google Sheets URL format. Please use the full URL from your browser."
            )
        return match.group(1)

    if SPREADSHEET_ID.match(value):
        return value

    raise ValidationError("Please enter a valid Google Sheets URL or spreadsheet ID")


def _optional_str(payload: dict, field: str) -> str | None:
    value = payload.get(field)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value
