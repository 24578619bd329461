"""Exceptions raised by the route search engine."""


class BesserBahnError(Exception):
    """Base exception for all route search errors."""
    pass


class NotFoundError(BesserBahnError):
    """Raised when a required station name resolves to zero matches."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Could not resolve station '{name}'")


class ProviderError(BesserBahnError):
    """Raised on transport, rate-limit or invalid-identifier failures upstream."""
    pass


class NoPriceDataError(BesserBahnError):
    """Raised when a journey candidate carries no usable price."""
    pass
