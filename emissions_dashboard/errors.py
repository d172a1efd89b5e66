"""Error hierarchy for every handler-level failure of the dashboard.

Each error carries a stable ``code`` and the HTTP status it maps to, and
renders itself as the structured payload returned to callers.
Request-level errors (401/400/404/409) are raised before any side effect;
``UpstreamError`` and ``PersistenceError`` describe failures of the two
collaborators (analysis service, store).
"""

from typing import Any, Dict, Optional


class DashboardError(Exception):
    """Base exception for all dashboard errors."""

    code: str = "INTERNAL_ERROR"
    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class Unauthorized(DashboardError):
    """Shared secret missing or wrong."""

    code = "UNAUTHORIZED"
    http_status = 401

    def __init__(self, message: str = "Unauthorized: Invalid secret key."):
        super().__init__(message)


class BadRequest(DashboardError):
    """Malformed or missing required fields."""

    code = "BAD_REQUEST"
    http_status = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        if self.field:
            body["field"] = self.field
        return body


class NotFound(DashboardError):
    code = "NOT_FOUND"
    http_status = 404


class Conflict(DashboardError):
    """Expected, non-fatal: the row the caller wants to create already exists."""

    code = "CONFLICT"
    http_status = 409


class UpstreamError(DashboardError):
    """The analysis service failed or answered with something unusable."""

    code = "UPSTREAM_ERROR"
    http_status = 502

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
    ):
        if upstream_status is not None:
            message = f"{message} (status {upstream_status}): {upstream_body or ''}".rstrip(": ")
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        body["upstream_status"] = self.upstream_status
        body["upstream_body"] = self.upstream_body
        return body


class PersistenceError(DashboardError):
    """A store operation that the whole request depends on failed."""

    code = "PERSISTENCE_ERROR"
    http_status = 500
