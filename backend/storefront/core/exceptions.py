class StorefrontError(Exception):
    """Base exception for the storefront backend.

    Every subclass carries the HTTP status the API layer renders it with.
    """

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    """Raised when a required field is missing or malformed."""

    status_code = 400


class AuthenticationError(StorefrontError):
    """Raised when no valid credential accompanies a protected request."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(StorefrontError):
    """Raised when a valid credential lacks the required role."""

    status_code = 403

    def __init__(self, message: str = "Forbidden: Admin privileges required"):
        super().__init__(message)


class NotFoundError(StorefrontError):
    """Raised when an id does not resolve to a stored record."""

    status_code = 404


class UpstreamError(StorefrontError):
    """Raised when the key-value store or the identity provider fails."""

    status_code = 500


class IdentityExistsError(StorefrontError):
    """Raised when signing up an email the identity provider already knows."""

    status_code = 409
