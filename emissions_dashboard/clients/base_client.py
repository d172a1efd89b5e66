"""Reusable base for any external HTTP API client."""

import logging
from typing import Any, Optional

import httpx

from emissions_dashboard.errors import UpstreamError

logger = logging.getLogger(__name__)

# Upstream bodies are echoed back in errors; keep them readable.
_MAX_BODY_CHARS = 2000


class BaseHTTPClient:
    """Thin wrapper around httpx with logging and error handling.

    Requests are never retried: a failed call surfaces as ``UpstreamError``
    and the caller decides what to do. Subclasses only need to implement
    domain methods.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        # timeout=None disables httpx's default 5s limit entirely
        self._client = httpx.Client(timeout=httpx.Timeout(timeout), transport=transport)

    # ── HTTP helpers ─────────────────────────────────────────────────

    def _url(self, endpoint: str) -> str:
        if not endpoint:
            return self.base_url
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _post(self, endpoint: str, payload: Any) -> Any:
        """POST *payload* as JSON and return the decoded JSON body.

        Raises ``UpstreamError`` on transport failures, non-2xx statuses and
        bodies that are not JSON.
        """
        url = self._url(endpoint)
        logger.debug("POST %s", url)
        try:
            resp = self._client.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise UpstreamError(f"Could not reach the analysis service: {exc}") from exc

        if not resp.is_success:
            body = resp.text[:_MAX_BODY_CHARS]
            logger.error("Error %d from %s: %s", resp.status_code, url, body[:200])
            raise UpstreamError(
                "Analysis service returned an error",
                upstream_status=resp.status_code,
                upstream_body=body,
            )

        try:
            return resp.json()
        except ValueError as exc:
            logger.error("Non-JSON body from %s: %s", url, resp.text[:200])
            raise UpstreamError(
                "Analysis service returned a body that is not JSON",
                upstream_status=resp.status_code,
                upstream_body=resp.text[:_MAX_BODY_CHARS],
            ) from exc

    # ── lifecycle ────────────────────────────────────────────────────

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
