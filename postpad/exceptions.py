"""
Postpad — Custom Exception Hierarchy
======================================

What:  Application-specific exceptions for the error scenarios of each flow.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned to the client) and the HTTP status it maps to.
       Global exception handlers registered in main.py turn them into
       plain-text responses.
Who:   Raised by stores, flow services and the session gate.

Exception Hierarchy:
    PostpadError (base)
    ├── ValidationError          → 400 Bad Request (missing/empty fields)
    ├── DuplicateUserError       → 400 Bad Request
    ├── InvalidCredentialsError  → 400 Bad Request (deliberately generic)
    ├── UnauthorizedError        → 403 Forbidden (edit by non-owner)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    ├── AuthExpiredOrInvalid     → 302 redirect to /login (not an error code)
    ├── DuplicateEmailError      (store level, translated by the auth flow)
    ├── InvalidOrExpiredToken    (token level, translated by the session gate)
    └── ConfigurationError       (fatal at startup)
"""

from typing import Any, Dict, Optional


class PostpadError(Exception):
    """
    Base exception for all Postpad application errors.

    Attributes:
        message:     User-facing error description (safe to return in a response)
        context:     Additional debug info (logged but NOT returned to client)
        status_code: HTTP status used by the global handler
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PostpadError):
    """Raised when submitted form data is missing or empty."""

    status_code = 400

    def __init__(
        self,
        message: str = "All fields are required!",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DuplicateUserError(PostpadError):
    """Registration attempted with an email that already has an account."""

    status_code = 400

    def __init__(
        self,
        message: str = "User already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(PostpadError):
    """
    Login failed.

    The same message is used for an unknown email and for a wrong password so
    the response never reveals which of the two was wrong.
    """

    status_code = 400

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid email or password", context=context)


class UnauthorizedError(PostpadError):
    """The authenticated user does not own the post being modified."""

    status_code = 403

    def __init__(
        self,
        message: str = "Unauthorized to edit this post",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PostpadError):
    """
    Raised when a requested user or post does not exist.

    SQLAlchemy returns None for missing rows; the services convert that into
    this exception so the route layer stays free of status-code logic.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(PostpadError):
    """
    Raised when a store operation fails unexpectedly (the "StoreFailure" case).

    The message returned to the client is always generic; the original error
    is recorded in `context` and logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthExpiredOrInvalid(PostpadError):
    """
    The session gate rejected the request.

    Not an HTTP error: the handler answers with a redirect to the login page,
    clearing the cookie when one was presented but failed verification.
    """

    status_code = 302

    def __init__(
        self,
        clear_cookie: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message="Authentication required", context=context)
        self.clear_cookie = clear_cookie


class DuplicateEmailError(PostpadError):
    """Raised by the credential store when the email is already registered."""

    def __init__(self, email: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["email"] = email
        super().__init__(message="Email already registered", context=ctx)
        self.email = email


class InvalidOrExpiredToken(PostpadError):
    """Raised by the token verifier for bad signatures, garbage or expiry."""

    def __init__(
        self,
        message: str = "Invalid or expired session token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(PostpadError):
    """Startup configuration is incomplete or invalid. Always fatal."""

    def __init__(
        self,
        message: str = "Configuration validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
