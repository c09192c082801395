from typing import Optional


class JournalError(Exception):
    """Base exception for journal engine failures."""


class ValidationError(JournalError):
    """Raised when engine input is structurally invalid."""


class ConfigurationError(JournalError):
    """Raised at startup when required configuration is missing."""


class APIError(JournalError):
    """Raised when external API calls fail."""


class UpstreamFetchError(APIError):
    """Raised when the document store is unreachable or returns a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
