"""Error taxonomy for clone operations."""

from typing import Optional


class ClonerError(Exception):
    """Base class for every error raised by the cloner."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ValidationError(ClonerError):
    """Bad input shape. The caller's fault; never retried."""


class ConfigError(ClonerError):
    """Required configuration is missing."""


class NotFoundError(ClonerError):
    """The remote service could not find the source database or parent page."""


class UnauthorizedError(ClonerError):
    """The integration token is invalid or lacks access."""


class TransientFetchError(ClonerError):
    """Pagination over a database was interrupted."""


class CloneError(ClonerError):
    """Unclassified remote failure during create/update."""
