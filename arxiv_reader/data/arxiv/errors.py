class ArxivFeedError(Exception):
    """Base exception for arXiv feed operations."""


class InvalidRequestError(ArxivFeedError):
    """Category and parameters cannot be turned into a valid request."""


class TransportError(ArxivFeedError):
    """Request failed at the HTTP or network level."""

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ParsingError(ArxivFeedError):
    """Response body could not be decoded as text."""


class DecodingError(ParsingError):
    """Feed bytes are not valid UTF-8."""
