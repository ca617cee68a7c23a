from rest_framework import viewsets

from core_backend.base.mixins import OptimizedQuerysetMixin, OwnerScopedQuerysetMixin
from orders.models import OrderItem
from orders.permissions import OrderAccessPermission
from orders.serializers import OrderItemSerializer


class OrderItemViewSet(OwnerScopedQuerysetMixin, OptimizedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    """
    Read-only access to the stored lines of one order. Lines are written only
    through the order endpoints so they always match the order totals.
    """

    queryset = OrderItem.objects.all()
    serializer_class = OrderItemSerializer
    permission_classes = [OrderAccessPermission]
    owner_field = "order__customer"
    pagination_class = None

    def get_queryset(self):
        return super().get_queryset().filter(order__pk=self.kwargs["order_pk"])
