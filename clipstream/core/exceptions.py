"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any, ClassVar

_DEFAULT_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class AppException(Exception):
    """Base application exception.

    All custom exceptions inherit from this class. Handlers in
    ``clipstream.app.exception_handlers`` render it as RFC 7807 Problem
    Details.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (RFC 7807 ``type``).
        title: Short, human-readable summary of the problem type.
        instance: URI reference identifying this occurrence.
        extra: Additional context merged into the response body.

    Example:
        raise AppException(
            status_code=404,
            detail="Video not found",
            type="video-not-found",
            extra={"video_id": 42},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",  # noqa: A002
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or _DEFAULT_TITLES.get(status_code, "Error")
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)


class _HTTPProblem(AppException):
    """AppException with a fixed status code and default type."""

    status: ClassVar[int] = 500
    default_type: ClassVar[str] = "about:blank"

    def __init__(
        self,
        detail: str,
        type: str | None = None,  # noqa: A002
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=self.status,
            detail=detail,
            type=type or self.default_type,
            instance=instance,
            extra=extra,
        )


class BadRequestException(_HTTPProblem):
    """Malformed or semantically invalid request (400).

    Example:
        raise BadRequestException(detail="Cannot follow yourself", type="self-follow")
    """

    status = 400
    default_type = "bad-request"


class UnauthorizedException(_HTTPProblem):
    """Missing, invalid or expired credentials (401)."""

    status = 401
    default_type = "unauthorized"


class ForbiddenException(_HTTPProblem):
    """Authenticated caller is not allowed to act on the resource (403)."""

    status = 403
    default_type = "forbidden"


class NotFoundException(_HTTPProblem):
    """Referenced resource does not exist (404)."""

    status = 404
    default_type = "not-found"


class ConflictException(_HTTPProblem):
    """Request conflicts with current state (409)."""

    status = 409
    default_type = "conflict"


class PayloadTooLargeException(_HTTPProblem):
    """Uploaded file exceeds the configured size limit (413)."""

    status = 413
    default_type = "payload-too-large"


class InternalServerException(_HTTPProblem):
    """Unexpected server-side failure surfaced deliberately (500)."""

    status = 500
    default_type = "internal-error"


class ServiceUnavailableException(_HTTPProblem):
    """A backing service (database, blob store) is unavailable (503)."""

    status = 503
    default_type = "service-unavailable"


__all__ = [
    "AppException",
    "BadRequestException",
    "ConflictException",
    "ForbiddenException",
    "InternalServerException",
    "NotFoundException",
    "PayloadTooLargeException",
    "ServiceUnavailableException",
    "UnauthorizedException",
]
