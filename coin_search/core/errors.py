class CoinSearchError(Exception):
    """Base exception for application-level errors."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class NetworkError(CoinSearchError):
    """Raised when a search request cannot be sent or completed."""


class ParsingError(CoinSearchError):
    """Raised when a response body cannot be decoded into domain records."""


class ProviderNotFoundError(CoinSearchError):
    """Raised when a provider id cannot be resolved."""
