"""
Platform-wide exception hierarchy.

Services raise these types; ``middleware.error_handlers`` maps them to
JSON responses once for the whole application, so blueprints never have
to translate status codes by hand.

Usage:
    from producthub.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Product", resource_id=42)
    raise ValidationError("name is required", details={"name": "required"})
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist within the given scope.

    Security note: Used for BOTH genuinely missing records AND rows the
    caller is not allowed to see. A 403 would confirm the resource exists;
    a 404 does not.

    Args:
        resource: Human-readable model/entity name (e.g. "Product", "Role").
        resource_id: The PK that was looked up. Included in logs, not in HTTP response.
        scope: Optional description of the scope that was enforced. Debug logging only.
    """

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        scope: str | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.scope = scope
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        if scope is not None:
            msg += f" ({scope})"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input fails business-rule validation in the service layer.

    Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when an operation would create a duplicate unique constraint violation.

    Maps to HTTP 409.

    Args:
        resource: Model name.
        field: The unique field that would be duplicated.
        value: The conflicting value.
    """

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        msg = f"{resource} with {field}={value!r} already exists"
        super().__init__(msg)


class EpicConflictError(Exception):
    """Raised when a roadmap save assigns epics already planned in another quarter.

    Maps to HTTP 409. ``conflicts`` is a list of dicts with ``epic_id``,
    ``epic_name``, ``year``, ``quarter`` and a display ``label``.
    """

    def __init__(self, conflicts: list[dict]) -> None:
        self.conflicts = conflicts
        labels = ", ".join(c["label"] for c in conflicts)
        super().__init__(
            f"The following epics are already assigned to other quarters: {labels}"
        )


class AuthenticationError(Exception):
    """Raised when no valid principal can be resolved for the request. Maps to 401."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(Exception):
    """Raised when an authenticated principal lacks the required privilege.

    Maps to 403. Only used where the caller already knows the resource
    exists; otherwise services raise NotFoundError.
    """

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class InvalidStateError(Exception):
    """Raised when the acting user's own state makes the operation impossible.

    Example: an org-admin action by a user with no organization. Maps to 400.
    """
