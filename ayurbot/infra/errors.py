"""Error raised by the outbound clients on non-2xx responses."""
from __future__ import annotations

import httpx


class UpstreamServiceError(RuntimeError):
    """An upstream service answered with an error status."""

    def __init__(self, service: str, status_code: int, message: str) -> None:
        super().__init__(f"{service} request failed ({status_code}): {message}")
        self.service = service
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or "<no response body>"
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if data.get("message"):
            return str(data["message"])
    return response.text or "<no response body>"


def raise_for_service(service: str, response: httpx.Response) -> None:
    """Raise ``UpstreamServiceError`` when the response carries an error status."""

    if response.status_code >= 400:
        raise UpstreamServiceError(service, response.status_code, _error_message(response))
