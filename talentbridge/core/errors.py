"""
Domain errors.

Services raise these; the exception handlers installed by
``create_app`` turn them into HTTP responses:

- ValidationError / InvalidTransition -> 400 {"errors": [...]}
- ProfileRequired / DuplicateApplication -> 400 {"msg": ...}
- Unauthenticated / Forbidden -> 401 {"msg": ...}
- NotFound -> 404 {"msg": ...}
- StoreError -> 500 {"msg": "Server Error"}
"""

from typing import Any, Dict, Iterable, List, Optional


class DomainError(Exception):
    """Base class for every error a service may raise."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"msg": self.message}


class ValidationError(DomainError):
    """Malformed or missing input, with field-level detail."""

    status_code = 400
    default_message = "Invalid input"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_body(self) -> Dict[str, Any]:
        return {"errors": self.errors}

    @classmethod
    def single(cls, param: str, msg: str) -> "ValidationError":
        return cls([{"param": param, "msg": msg, "location": "body"}], msg)

    @classmethod
    def from_pydantic(cls, raw_errors: Iterable[dict], location: str = "body") -> "ValidationError":
        """Build from ``pydantic.ValidationError.errors()`` or FastAPI's request errors."""
        errors = []
        for err in raw_errors:
            loc = [str(part) for part in err.get("loc", ())]
            where = location
            if loc and loc[0] in ("body", "query", "path", "header"):
                where = loc.pop(0)
            errors.append({
                "param": ".".join(loc) or where,
                "msg": err.get("msg", "Invalid value"),
                "location": where,
            })
        return cls(errors)


class InvalidTransition(ValidationError):
    """Requested application status change is not in the transition table."""

    def __init__(self, current: str, requested: str):
        msg = f"Cannot move application from '{current}' to '{requested}'"
        super().__init__([{"param": "status", "msg": msg, "location": "body"}], msg)


class Unauthenticated(DomainError):
    status_code = 401
    default_message = "No token, authorization denied"


class Forbidden(DomainError):
    status_code = 401
    default_message = "Not authorized"


class NotFound(DomainError):
    status_code = 404
    default_message = "Not found"


class ProfileRequired(DomainError):
    status_code = 400
    default_message = "Profile not found"


class DuplicateApplication(DomainError):
    status_code = 400
    default_message = "Already applied"


class StoreError(DomainError):
    """Persistence failure. Detail stays in the server log."""

    status_code = 500

    def __init__(self, detail: str, cause: Optional[BaseException] = None):
        super().__init__()
        self.detail = detail
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.detail}: {self.cause}"
        return self.detail
