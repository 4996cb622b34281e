"""
Errors raised while fetching spreadsheet data.

Each error knows the HTTP status it maps to and how to render itself as the
JSON error body returned to the caller.
"""


class SheetsFetchError(Exception):
    """Base exception for spreadsheet fetch errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "details": f"{type(self).__name__}: {self.message}",
        }


class ValidationError(SheetsFetchError):
    """The incoming request is missing or has malformed fields."""

    status_code = 400

    def to_dict(self) -> dict:
        return {"error": self.message}


class ConfigError(SheetsFetchError):
    """Process-wide service account configuration is unusable."""
    pass


class KeyFormatError(SheetsFetchError):
    """Private key is missing its PEM markers."""
    pass


class KeyTruncatedError(SheetsFetchError):
    """Private key content is too short to be a real RSA key."""
    pass


class SigningError(SheetsFetchError):
    """The decoded key material could not be used for RS256 signing."""
    pass


class TokenExchangeError(SheetsFetchError):
    """The OAuth2 token endpoint rejected the signed assertion."""

    def __init__(self, message: str, response_body: str = ""):
        super().__init__(message)
        self.response_body = response_body


class UpstreamFetchError(SheetsFetchError):
    """Sheets API or CSV export answered with a non-success status."""

    def __init__(self, message: str, status: int, spreadsheet_id: str | None = None):
        super().__init__(message)
        self.status = status
        self.status_code = status
        self.spreadsheet_id = spreadsheet_id

    def to_dict(self) -> dict:
        body = {"error": self.message, "status": self.status}
        if self.spreadsheet_id:
            body["spreadsheetId"] = self.spreadsheet_id
        return body


class EmptyDataError(SheetsFetchError):
    """The public export returned implausibly short content."""

    status_code = 400

    def __init__(self, message: str, spreadsheet_id: str | None = None):
        super().__init__(message)
        self.spreadsheet_id = spreadsheet_id

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.spreadsheet_id:
            body["spreadsheetId"] = self.spreadsheet_id
        return body
