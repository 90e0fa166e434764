"""Exceptions raised by product construction and payoff evaluation."""


class ProductError(Exception):
    """Base class for all product errors."""


class ProductConfigError(ProductError, ValueError):
    """
    Raised when commercial terms cannot produce a valid product.

    Products fail at construction, never later with a malformed timeline.
    """


class PathMismatchError(ProductError, ValueError):
    """Raised when a scenario path does not realize the product's dataline."""


class PayoffBufferError(ProductError, ValueError):
    """Raised when the output buffer width differs from the payoff labels."""
