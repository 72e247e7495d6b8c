"""Error taxonomy shared by the engine, the transport and the view-models.

Every failure that reaches an operator is one of these four shapes. Pure
derivation code never raises them; only collaborators and commit-time
validation do.
"""

from __future__ import annotations

SESSION_EXPIRED_MESSAGE = "Session expirée. Veuillez vous reconnecter."
UNKNOWN_ERROR_MESSAGE = "Une erreur inconnue est survenue."
GENERIC_SERVER_MESSAGE = "Une erreur est survenue."


class ConsoleError(Exception):
    """Base class carrying a user-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SessionExpired(ConsoleError):
    """Authentication is no longer valid; the operator must log in again."""

    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE) -> None:
        super().__init__(message)


class ValidationError(ConsoleError):
    """Input rejected before any call is made; fixable by the operator."""


class ServerError(ConsoleError):
    """A fetch or mutation failed on the remote side or in transit."""

    def __init__(self, status: int | None, message: str = GENERIC_SERVER_MESSAGE) -> None:
        super().__init__(message)
        self.status = status


class UnknownError(ConsoleError):
    def __init__(self, message: str = UNKNOWN_ERROR_MESSAGE) -> None:
        super().__init__(message)


def normalize_error(exc: BaseException) -> ConsoleError:
    """Map any exception onto the taxonomy."""
    if isinstance(exc, ConsoleError):
        return exc
    return UnknownError()
