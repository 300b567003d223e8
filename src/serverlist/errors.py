"""
Exception taxonomy for ServerList.

Every expected failure raised by a resolver derives from ``ServerListError``.
The GraphQL layer turns these into ``MutationError`` values; anything else
propagates as a transport-level error.
"""


class ServerListError(Exception):
    """Base class for expected, user-facing failures."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServerListError):
    """Raised when an input field is rejected."""

    code = "VALIDATION_ERROR"


class AuthenticationError(ServerListError):
    """Raised when a credential is missing, invalid or expired."""

    code = "UNAUTHENTICATED"


class AuthorizationError(ServerListError):
    """Raised when an authenticated caller is not allowed to act."""

    code = "FORBIDDEN"


class NotFoundError(ServerListError):
    """Raised when the target row does not exist."""

    code = "NOT_FOUND"


class ExternalServiceError(ServerListError):
    """Raised when the OAuth provider or the status API fails."""

    code = "EXTERNAL_SERVICE_ERROR"


class ServerOfflineError(ExternalServiceError):
    """Raised when the status API reports the Minecraft server offline."""

    code = "SERVER_OFFLINE"


class AlreadyVotedError(ServerListError):
    """Raised when the caller already voted for a server this month."""

    code = "ALREADY_VOTED"


class ConfigurationError(ServerListError):
    """Raised when a required setting is missing."""

    code = "CONFIGURATION_ERROR"
