"""Domain errors — business rule violations raised by the search pipeline."""


class DomainError(Exception):
    """Base exception for domain errors."""

    field: str = "search"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        if field is not None:
            self.field = field


class InvalidSearchParametersError(DomainError):
    """Raised when a search parameter is out of its allowed range."""


class CurrencyNotFoundError(DomainError):
    """Raised when a currency code or id does not resolve."""

    field = "currency"


class UnsupportedCrossCurrencyPairError(DomainError):
    """Raised when neither side of the requested pair is the reference currency."""

    field = "currency"


class ReferenceCurrencyUnconfiguredError(DomainError):
    """Raised when the reference currency is missing from the currency table."""

    field = "currency"


class StoreUnavailableError(DomainError):
    """Raised when the office store cannot be queried."""

    field = "offices"


class SearchTimeoutError(DomainError):
    """Raised when the office query exceeds its deadline."""

    field = "offices"
