"""Exceptions raised by crypto_news services."""


class CryptoNewsError(Exception):
    """Base class for crypto_news errors."""


class DecodeError(CryptoNewsError):
    """A raw article record is missing a required field."""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"Article is missing required field '{field}'")


class FetchError(CryptoNewsError):
    """The news API could not be reached or returned an unusable response."""
