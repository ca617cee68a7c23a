"""
Orders serializers package - modular serializer layer.
"""

# Line item serializers
from .order_item_serializers import (
    AddonSerializer,
    VariantOptionSerializer,
    VariantSerializer,
    OrderLineSerializer,
    OrderItemSerializer,
    to_line_requests,
)

# Order serializers
from .order_serializers import (
    OrderCalculationSerializer,
    OrderCreateSerializer,
    OrderUpdateSerializer,
    OrderSerializer,
)

# Status serializers
from .status_serializers import (
    OrderCustomUpdateSerializer,
    OrderBulkUpdateSerializer,
    OrderBulkDeleteSerializer,
)

__all__ = [
    # Line items
    'AddonSerializer',
    'VariantOptionSerializer',
    'VariantSerializer',
    'OrderLineSerializer',
    'OrderItemSerializer',
    'to_line_requests',
    # Orders
    'OrderCalculationSerializer',
    'OrderCreateSerializer',
    'OrderUpdateSerializer',
    'OrderSerializer',
    # Status
    'OrderCustomUpdateSerializer',
    'OrderBulkUpdateSerializer',
    'OrderBulkDeleteSerializer',
]
