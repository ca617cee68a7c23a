from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.serializers import OrderCustomUpdateSerializer, OrderSerializer
from orders.services import OrderService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for the workflow update (PATCH /orders/{id}/).

    This mixin provides action methods for OrderViewSet.
    """

    def partial_update(self, request: Request, *args, **kwargs) -> Response:
        """
        Change status, payment status or vendor cost without re-pricing.
        Completing an order requires it to be paid; final statuses are locked.
        """
        order = self.get_object()
        serializer = OrderCustomUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = OrderService.update_status(order, **serializer.validated_data)
        except ValueError as e:
            return Response(
                {"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            {
                "success": True,
                "message": "Order updated successfully",
                "content": OrderSerializer(order, context=self.get_serializer_context()).data,
            }
        )
