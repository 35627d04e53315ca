"""
Error taxonomy for GetStreetCred.

Every error the storage and API layers raise on purpose derives from
StreetCredError. Each class carries a stable machine-readable ``kind``
and the HTTP status the API boundary maps it to, so clients can branch
on ``kind`` instead of parsing messages.
"""

from typing import Any, Optional


class StreetCredError(Exception):
    """Base class for domain errors."""

    kind: str = "error"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Serialize to the JSON error body."""
        body = {"error": self.message, "kind": self.kind}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(StreetCredError):
    """Caller supplied a malformed or semantically invalid request."""

    kind = "validation_error"
    status_code = 400


class Unauthorized(StreetCredError):
    """Caller identity is missing or could not be verified."""

    kind = "unauthorized"
    status_code = 401


class Forbidden(StreetCredError):
    """Caller is known but not allowed to perform the action."""

    kind = "forbidden"
    status_code = 403


class NotFound(StreetCredError):
    """Requested resource does not exist."""

    kind = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} not found")


class ConflictError(StreetCredError):
    """Write rejected by a uniqueness rule (duplicate username, featured race)."""

    kind = "conflict"
    status_code = 409


class BackendError(StreetCredError):
    """The persistence backend failed (network, SQL, unexpected response)."""

    kind = "backend_error"
    status_code = 500


class NotConfigured(StreetCredError):
    """No usable backend credentials were provided."""

    kind = "not_configured"
    status_code = 503
