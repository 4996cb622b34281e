"""
Read spreadsheet values, either through the Sheets API with a bearer token
or through the public CSV export of the first tab.

Both paths return the same {"values": [[...], ...]} shape.
"""

import json
import re
import urllib.parse

from errors import EmptyDataError, UpstreamFetchError
from http_client import http_get


VALUES_URL = "https://sheets.googleapis.com/v4/spreadsheets/{spreadsheet_id}/values/{range}"
VALUES_RANGE = "A1:Z100000"
CSV_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export?format=csv&gid=0"

# Shorter exports are error pages or empty sheets, not data
MIN_CSV_LENGTH = 10

# Status reported when the Sheets API answers 2xx with something other than a JSON object
BAD_GATEWAY = 502

LINE_BREAK = re.compile(r"\r\n|\n|\r")


def values_url(spreadsheet_id: str, cell_range: str = VALUES_RANGE) -> str:
    return VALUES_URL.format(
        spreadsheet_id=urllib.parse.quote(spreadsheet_id, safe=""),
        range=urllib.parse.quote(cell_range, safe=":"),
    )


def csv_export_url(spreadsheet_id: str) -> str:
    return CSV_EXPORT_URL.format(spreadsheet_id=urllib.parse.quote(spreadsheet_id, safe=""))


def fetch_values_with_token(spreadsheet_id: str, access_token: str) -> dict:
    """
    Fetch the values grid through the Sheets API.

    Args:
        spreadsheet_id: Target spreadsheet
        access_token: OAuth2 bearer token with spreadsheets.readonly scope

    Returns:
        The API's JSON body, guaranteed to carry a "values" list

    Raises:
        UpstreamFetchError: the API answered with a non-success status
    """
    print(f"Fetching spreadsheet with service account: {spreadsheet_id}")

    response = http_get(
        values_url(spreadsheet_id),
        headers={"Authorization": f"Bearer {access_token}"},
    )

    if not response.ok:
        print(f"Sheets API error: HTTP {response.status}")
        if response.status == 404:
            message = "Spreadsheet not found. Check if the ID is correct."
        elif response.status == 403:
            message = "Access denied. Make sure the spreadsheet is shared with the service account email."
        else:
            message = f"Failed to fetch spreadsheet: {response.body}"
        raise UpstreamFetchError(message, response.status, spreadsheet_id)

    try:
        data = json.loads(response.body)
    except ValueError:
        data = None

    if not isinstance(data, dict):
        raise UpstreamFetchError(
            f"Failed to fetch spreadsheet: unexpected response: {response.body}",
            BAD_GATEWAY,
            spreadsheet_id,
        )

    data.setdefault("values", [])

    print(f"Successfully fetched {len(data['values'])} rows")
    return data


def fetch_public_csv(spreadsheet_id: str) -> dict:
    """
    Fetch the first tab through the public CSV export, no credentials.

    Raises:
        UpstreamFetchError: the export answered with a non-success status
        EmptyDataError: the export body is empty or implausibly short
    """
    response = http_get(csv_export_url(spreadsheet_id))

    if not response.ok:
        print(f"CSV export error: HTTP {response.status}")
        if response.status == 404:
            message = "Spreadsheet not found. Check if the URL is correct."
        elif response.status in (401, 403):
            message = "Access denied. Please provide service account credentials or make the spreadsheet public."
        else:
            message = f"Failed to fetch spreadsheet. (HTTP {response.status})"
        raise UpstreamFetchError(message, response.status, spreadsheet_id)

    if len(response.body) < MIN_CSV_LENGTH:
        raise EmptyDataError("Spreadsheet appears to be empty or invalid", spreadsheet_id)

    rows = split_csv(response.body)

    print(f"Successfully fetched {len(rows)} rows from public export")
    return {"values": rows}


def split_csv(text: str) -> list[list[str]]:
    """
    Split CSV text on line breaks and commas.

    Quoted fields are not understood: a cell containing a comma or a line
    break is split apart.
    """
    if '"' in text:
        print("Warning: CSV export contains quoted fields, which are split naively")

    lines = LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()

    return [line.split(",") for line in lines]
