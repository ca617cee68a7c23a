from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from core_backend.base import BaseViewSet
from core_backend.base.mixins import OwnerScopedQuerysetMixin
from orders.filters import OrderFilter
from orders.models import Order
from orders.permissions import OrderAccessPermission
from orders.serializers import (
    OrderCalculationSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    OrderUpdateSerializer,
)
from orders.services import OrderPricingError, OrderService

logger = logging.getLogger(__name__)


# Import action mixins
from .status_actions import StatusActionsMixin
from .bulk_actions import BulkActionsMixin


def pricing_error_response(error: OrderPricingError) -> Response:
    return Response(
        {"success": False, "message": str(error), "code": error.kind.value},
        status=status.HTTP_400_BAD_REQUEST,
    )


class OrderViewSet(
    StatusActionsMixin,
    BulkActionsMixin,
    OwnerScopedQuerysetMixin,
    BaseViewSet,
):
    """
    ViewSet for managing orders.

    - Pricing preview (calculate)
    - Create / full update / delete / duplicate
    - Per-status counts
    - Workflow update (StatusActionsMixin)
    - Bulk status changes and deletes (BulkActionsMixin)
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [OrderAccessPermission]
    filterset_class = OrderFilter
    search_fields = ["order_number", "customer__email", "customer__first_name", "customer__last_name"]
    ordering_fields = ["created_at", "delivery_date", "grand_total", "order_number", "status"]
    ordering = ["-created_at"]
    owner_field = "customer"

    def get_serializer_class(self):
        if self.action == "create":
            return OrderCreateSerializer
        if self.action == "update":
            return OrderUpdateSerializer
        if self.action == "calculate":
            return OrderCalculationSerializer
        return OrderSerializer

    def _content(self, order: Order):
        return OrderSerializer(order, context=self.get_serializer_context()).data

    @action(detail=False, methods=["post"])
    def calculate(self, request: Request) -> Response:
        """
        Price an order without storing it. Answers with the totals and the
        per-line figures, or 400 when the calculator rejects the input.
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = OrderService.calculate(
                data["lines"],
                data["order_type"],
                **{field: data.get(field) for field in OrderService.ADJUSTMENT_FIELDS},
            )
        except OrderPricingError as e:
            return pricing_error_response(e)

        return Response(result.as_dict())

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        # Only staff may place an order on behalf of someone else
        customer = data.pop("customer", None)
        if not request.user.is_staff:
            customer = request.user
            for field in ("status", "payment_status", "vendor_cost"):
                data.pop(field, None)

        try:
            order = OrderService.create_order(data, customer=customer)
        except OrderPricingError as e:
            return pricing_error_response(e)
        except ValueError as e:
            return Response(
                {"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            {
                "success": True,
                "message": "Order created successfully",
                "content": self._content(order),
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, *args, **kwargs) -> Response:
        order = self.get_object()
        serializer = self.get_serializer(order, data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        if "customer" in data:
            order.customer = data.pop("customer")

        try:
            order = OrderService.update_order(order, data)
        except OrderPricingError as e:
            return pricing_error_response(e)
        except ValueError as e:
            return Response(
                {"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            {
                "success": True,
                "message": "Order updated successfully",
                "content": self._content(order),
            }
        )

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        order = self.get_object()
        OrderService.delete_order(order)
        return Response({"success": True, "message": "Order deleted successfully"})

    @action(detail=True, methods=["post"])
    def duplicate(self, request: Request, pk=None) -> Response:
        """Copy the order and its items into a new quote."""
        order = self.get_object()
        duplicate = OrderService.duplicate_order(order)
        return Response(
            {
                "success": True,
                "message": "Order duplicated successfully",
                "content": self._content(duplicate),
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path="status-counts")
    def status_counts(self, request: Request) -> Response:
        """
        Number of visible orders per status.
        ?timeframe=lifetime (default), month or week.
        """
        timeframe = request.query_params.get("timeframe", "lifetime")
        try:
            counts = OrderService.status_counts(self.get_queryset(), timeframe)
        except ValueError as e:
            return Response(
                {"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST
            )
        return Response(counts)
