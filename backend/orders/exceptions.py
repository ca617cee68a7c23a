"""
Custom exceptions for order processing.
"""

from orders.calculators import PricingError


class OrderPricingError(ValueError):
    """Raised by the order service when the calculator rejects an order."""

    def __init__(self, error: PricingError):
        self.error = error
        super().__init__(error.message)

    @property
    def kind(self):
        return self.error.kind
