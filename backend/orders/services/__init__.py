"""
Orders services package.

- OrderCalculationService: pricing an order and writing the figures back
- OrderService: order lifecycle (create, update, status changes, bulk edits, delete)
"""

from orders.exceptions import OrderPricingError

# Calculation operations
from .calculation_service import OrderCalculationService

# Core order operations
from .order_service import OrderService

__all__ = [
    'OrderCalculationService',
    'OrderService',
    'OrderPricingError',
]
