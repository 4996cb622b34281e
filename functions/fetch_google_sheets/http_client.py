"""
Thin urllib wrappers for the outbound calls this function makes.

Non-success statuses are returned rather than raised so callers can map
each status code to their own message. Connection failures still raise.
"""

import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass


HTTP_TIMEOUT_SECONDS = 30
USER_AGENT = "Mozilla/5.0 (compatible; SheetsFetch/1.0)"


@dataclass
class HttpResponse:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def http_get(url: str, headers: dict | None = None, timeout: int = HTTP_TIMEOUT_SECONDS) -> HttpResponse:
    """
    GET a URL, following redirects.

    Args:
        url: The URL to fetch
        headers: Extra request headers
        timeout: Request timeout in seconds

    Returns:
        Final status code and decoded body
    """
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, **(headers or {})})
    return _send(req, timeout)


def http_post_form(url: str, fields: dict, timeout: int = HTTP_TIMEOUT_SECONDS) -> HttpResponse:
    """POST fields as application/x-www-form-urlencoded."""
    data = urllib.parse.urlencode(fields).encode("utf-8")

    req = urllib.request.Request(url, data=data, method="POST")
    req.add_header("Content-Type", "application/x-www-form-urlencoded")
    req.add_header("User-Agent", USER_AGENT)

    return _send(req, timeout)


def _send(req: urllib.request.Request, timeout: int) -> HttpResponse:
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return HttpResponse(response.status, _decode(response.read()))
    except urllib.error.HTTPError as e:
        body = _decode(e.read()) if e.fp else ""
        return HttpResponse(e.code, body)


def _decode(raw: bytes) -> str:
    # Undecodable bytes become U+FFFD on both success and error bodies
    return raw.decode("utf-8", errors="replace")
