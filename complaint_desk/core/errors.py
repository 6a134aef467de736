from typing import Any, List, Optional


class ComplaintDeskError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ComplaintDeskError):
    """Malformed or missing input, raised before anything is dispatched."""

    def __init__(self, detail: str, errors: Optional[List[Any]] = None):
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc, what: str) -> "ValidationError":
        errors = exc.errors()
        fields = ", ".join(
            ".".join(str(part) for part in err.get("loc", ())) or "<root>" for err in errors
        )
        return cls(f"Invalid {what}: {fields}", errors=errors)


class NotFoundError(ComplaintDeskError):
    pass


class InvalidTransitionError(ComplaintDeskError):
    def __init__(self, current, requested):
        current_value = getattr(current, "value", current)
        requested_value = getattr(requested, "value", requested)
        super().__init__(f"Cannot move complaint from '{current_value}' back to '{requested_value}'")
        self.current = current
        self.requested = requested


class TransportError(ComplaintDeskError):
    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.status_code = status_code
