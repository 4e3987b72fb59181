# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Exception types raised by FinDash.

Services raise these for business-rule violations so that user-facing
layers (CLI, Web UI) can report them without a traceback. They also derive
from the matching built-in exception, so callers that only catch
``ValueError`` / ``LookupError`` keep working.
"""


class FinDashError(Exception):
    """Base exception for all FinDash-specific errors."""


class ValidationError(FinDashError, ValueError):
    """Raised when user input does not satisfy a business rule."""


class NotFoundError(FinDashError, LookupError):
    """Raised when a referenced transaction, product, category or supplier
    does not exist."""


class InsufficientStockError(ValidationError):
    """Raised when a sale requests more units than the product has in stock."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name!r}: "
            f"requested {requested}, available {available}."
        )
