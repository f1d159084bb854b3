"""Errors raised by Commerce Layer integrations."""

from typing import Optional


class CommerceLayerError(Exception):
    """Upstream call failed. Keeps the status code and body for diagnostics."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{message}: {status_code} {body}" if status_code is not None else f"{message}: {body}")


class UpstreamAuthError(CommerceLayerError):
    """Client-credentials token exchange failed."""

    def __init__(self, status_code: Optional[int] = None, body: str = ""):
        super().__init__("CL token error", status_code, body)


class UpstreamAPIError(CommerceLayerError):
    """Stock query against the Commerce Layer API failed."""

    def __init__(self, status_code: Optional[int] = None, body: str = ""):
        super().__init__("CL API error", status_code, body)
