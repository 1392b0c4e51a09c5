class AuthorizationError(Exception):
    """Base class for authorization gate failures."""

    code = "forbidden"
    default_message = "Access denied."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AuthorizationError):
    """Raised when no bearer credential accompanies the call."""

    code = "unauthenticated"
    default_message = "Authentication credentials were not provided."


class Forbidden(AuthorizationError):
    """Raised when the credential is invalid/expired or the role does not match."""

    code = "forbidden"
    default_message = "You do not have permission to perform this action."
