"""
Google Sheets fetch function.

Returns the values of a spreadsheet for import, authenticating with a Google
service account when one is available and falling back to the public CSV
export otherwise. Invoked through a Lambda Function URL.
"""

import base64
import binascii
import json

from credentials import SheetsConfig, resolve_auth_strategy
from errors import SheetsFetchError, ValidationError
from google_auth import get_access_token
from models import FetchRequest
from sheets import fetch_public_csv, fetch_values_with_token


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}


def main(event, context):
    """Lambda handler - fetch spreadsheet values for one request."""
    try:
        if get_http_method(event) != "POST":
            return respond(200)

        request = FetchRequest.from_payload(parse_body(event))
        config = SheetsConfig.from_env()
        return respond(200, handle_fetch(request, config))
    except SheetsFetchError as e:
        print(f"Error: {type(e).__name__}: {e}")
        return respond(e.status_code, e.to_dict())
    except Exception as e:
        print(f"Error: {type(e).__name__}: {e}")
        return respond(500, {
            "error": str(e) or "Internal server error",
            "details": f"{type(e).__name__}: {e}",
        })


def handle_fetch(request: FetchRequest, config: SheetsConfig) -> dict:
    """Run the resolve -> authenticate -> fetch chain for one request."""
    strategy = resolve_auth_strategy(request, config)

    if strategy.is_public:
        return fetch_public_csv(request.spreadsheet_id)

    access_token = get_access_token(strategy.credentials)
    return fetch_values_with_token(request.spreadsheet_id, access_token)


def get_http_method(event) -> str:
    """
    Read the HTTP method from a Function URL / API Gateway event.

    Direct invocations (the event is the request body itself) count as POST.
    """
    if not isinstance(event, dict):
        return "POST"

    request_context = event.get("requestContext")
    http = request_context.get("http") if isinstance(request_context, dict) else None
    method = (http.get("method") if isinstance(http, dict) else None) or event.get("httpMethod")

    return method.upper() if isinstance(method, str) and method else "POST"


def parse_body(event):
    """Decode the JSON request body from the event."""
    if not isinstance(event, dict) or ("requestContext" not in event and "body" not in event):
        return event

    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, TypeError, ValueError):
            raise ValidationError("Request body must be a JSON object")

    if not body:
        raise ValidationError("spreadsheetId is required")

    try:
        return json.loads(body)
    except (TypeError, ValueError):
        raise ValidationError("Request body must be a JSON object")


def respond(status_code: int, payload: dict | None = None) -> dict:
    if payload is None:
        return {"statusCode": status_code, "headers": dict(CORS_HEADERS), "body": ""}

    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(payload),
    }
