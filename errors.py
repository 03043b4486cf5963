from fastapi import status


class LedgerError(Exception):
    """Base exception for the score ledger."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTargetError(LedgerError):
    """Raised when a song identifier is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(LedgerError):
    """Raised when a song or attempt does not exist or belongs to someone else."""

    status_code = status.HTTP_404_NOT_FOUND


class AuthenticationError(LedgerError):
    """Raised when credentials are missing or invalid."""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidTokenError(AuthenticationError):
    """Raised when the auth cookie is missing, expired or names an unknown user."""
