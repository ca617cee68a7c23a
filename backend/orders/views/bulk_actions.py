from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.serializers import OrderBulkUpdateSerializer, OrderBulkDeleteSerializer
from orders.services import OrderService

logger = logging.getLogger(__name__)


class BulkActionsMixin:
    """
    Mixin for staff bulk edits over several orders.

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=False, methods=["patch"], url_path="bulk/update")
    def bulk_update(self, request: Request) -> Response:
        serializer = OrderBulkUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        ids = data.pop("ids")

        try:
            updated = OrderService.bulk_update(ids, **data)
        except ValueError as e:
            return Response(
                {"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            {"success": True, "message": f"{updated} order(s) updated successfully", "count": updated}
        )

    @action(detail=False, methods=["delete"], url_path="bulk/delete")
    def bulk_delete(self, request: Request) -> Response:
        serializer = OrderBulkDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            deleted = OrderService.bulk_delete(serializer.validated_data["ids"])
        except ValueError as e:
            return Response(
                {"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            {"success": True, "message": f"{deleted} order(s) deleted successfully", "count": deleted}
        )
