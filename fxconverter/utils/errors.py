"""Custom exception classes for the FX Converter."""
from enum import Enum


class FailureKind(Enum):
    """Classification of everything that can go wrong during a conversion."""
    PARSE_FAILURE = "parse_failure"
    LIMIT_EXCEEDED = "limit_exceeded"
    NETWORK_UNREACHABLE = "network_unreachable"
    SERVER_VALIDATION_REJECTED = "server_validation_rejected"
    SERVER_FAULT = "server_fault"
    GENERIC = "generic"


class CurrencyConverterError(Exception):
    """Base exception for all FX Converter errors."""
    pass


class ConfigurationError(CurrencyConverterError):
    """Raised when there's a configuration error."""
    pass


class ValidationError(CurrencyConverterError):
    """Raised when data validation fails."""
    pass


class UnknownCurrencyError(CurrencyConverterError, LookupError):
    """Raised when a currency code is not part of the registry.

    The registry is closed, so this always indicates a programming error.
    """

    def __init__(self, code: str):
        super().__init__(f"Unknown currency code: {code}")
        self.code = code


class QuoteError(CurrencyConverterError):
    """Base exception for quote gateway failures."""

    kind: FailureKind = FailureKind.GENERIC

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkUnreachableError(QuoteError):
    """Raised when the quote service cannot be reached (DNS, connect, IO)."""
    kind = FailureKind.NETWORK_UNREACHABLE


class ServerValidationRejectedError(QuoteError):
    """Raised when the server declines the requested amount or pair."""
    kind = FailureKind.SERVER_VALIDATION_REJECTED


class ServerFaultError(QuoteError):
    """Raised when the quote service fails on its side."""
    kind = FailureKind.SERVER_FAULT


class GenericQuoteError(QuoteError):
    """Raised for any other failure, including malformed responses."""
    kind = FailureKind.GENERIC
