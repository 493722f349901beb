"""Exception classes for the Subsonic API client."""

from typing import Any, Dict, Optional, Type


class SubsonicError(Exception):
    """Base exception for all Subsonic API errors.

    Attributes:
        code: Subsonic error code
        message: Error message from server
    """

    default_message = "Subsonic API error"

    def __init__(self, code: int, message: Optional[str] = None):
        """Initialize Subsonic error.

        Args:
            code: Subsonic error code (0, 10, 20, 30, 40, 41, 50, 60, 70)
            message: Human-readable error message; the class default if empty
        """
        self.code = code
        self.message = message or self.default_message
        super().__init__(f"Subsonic Error {code}: {self.message}")


class SubsonicGenericError(SubsonicError):
    """Generic server error (error codes 0 and 10, and any unknown code).

    Carries the server's message unchanged.
    """

    default_message = "Generic error"


class SubsonicVersionError(SubsonicError):
    """API version incompatibility (error codes 20, 30)."""

    pass


class ClientVersionTooOldError(SubsonicVersionError):
    """Incompatible protocol; client must upgrade (code 20)."""

    default_message = "Incompatible protocol; client must upgrade"


class ServerVersionTooOldError(SubsonicVersionError):
    """Incompatible protocol; server must upgrade (code 30)."""

    default_message = "Incompatible protocol; server must upgrade"


class SubsonicAuthenticationError(SubsonicError):
    """Wrong username or password (error code 40)."""

    default_message = "Wrong username or password"


class TokenAuthenticationNotSupportedError(SubsonicAuthenticationError):
    """Token authentication not supported for LDAP users (code 41).

    Retrying with a protocol version below 1.13.0 falls back to plaintext
    credentials.
    """

    default_message = "Token authentication not supported for LDAP users"


class SubsonicAuthorizationError(SubsonicError):
    """User not authorized for requested action (error code 50)."""

    default_message = "Not authorized"


class SubsonicTrialError(SubsonicError):
    """Trial period expired (error code 60).

    Only Subsonic proper sends this; its forks have no licensing.
    """

    default_message = "Subsonic trial period has expired"


class SubsonicNotFoundError(SubsonicError):
    """Requested resource not found (error code 70)."""

    default_message = "Requested data not found"


class SubsonicUrlError(ValueError):
    """The configured server address cannot be turned into a request URL."""

    pass


class SubsonicDecodeError(ValueError):
    """A response did not have the shape the decoder expected."""

    pass


ERROR_CODES: Dict[int, Type[SubsonicError]] = {
    0: SubsonicGenericError,
    10: SubsonicGenericError,
    20: ClientVersionTooOldError,
    30: ServerVersionTooOldError,
    40: SubsonicAuthenticationError,
    41: TokenAuthenticationNotSupportedError,
    50: SubsonicAuthorizationError,
    60: SubsonicTrialError,
    70: SubsonicNotFoundError,
}


def error_from_code(code: Any, message: Any = None) -> SubsonicError:
    """Map a Subsonic error code and message to an exception instance.

    Unknown codes become SubsonicGenericError with the raw code and message
    preserved. Servers disagree about codes, so this never raises.

    Example:
        >>> err = error_from_code(70, "Requested resource not found")
        >>> type(err).__name__
        'SubsonicNotFoundError'
    """
    try:
        code = int(code)
    except (TypeError, ValueError):
        code = 0

    if message is not None and not isinstance(message, str):
        message = str(message)

    error_class = ERROR_CODES.get(code, SubsonicGenericError)
    return error_class(code, message)


def error_from_json(error: Any) -> SubsonicError:
    """Build an exception from the envelope's ``error`` object."""
    if not isinstance(error, dict):
        return SubsonicGenericError(0, str(error) if error else None)
    return error_from_code(error.get("code", 0), error.get("message"))
