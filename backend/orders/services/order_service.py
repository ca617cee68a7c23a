from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from django.db import transaction
from django.db.models import Count, QuerySet
from django.utils import timezone
import logging

from orders.calculators import OrderCalculationResult, OrderLineRequest
from orders.models import Order, OrderItem
from orders.signals import broadcast_orders_changed, order_created, order_status_changed
from orders.statuses import (
    OrderStatus,
    PaymentStatus,
    can_transition,
    is_payment_settled,
    requires_payment,
    statuses_for_type,
)
from .calculation_service import OrderCalculationService

logger = logging.getLogger(__name__)


class OrderService:
    """Core service for order lifecycle management - pricing, creating, updating, deleting orders."""

    # Plain order columns a create/update payload may set directly
    DETAIL_FIELDS = (
        "payment_type",
        "payment_status",
        "customer_note",
        "note",
        "packaging_note",
        "dietary_restrictions",
        "reheat_method",
        "tail_number",
        "priority",
        "delivery_date",
        "delivery_time",
        "vendor_cost",
    )

    # Order-level inputs to the calculator besides the lines
    ADJUSTMENT_FIELDS = ("manual_discount", "specialty_item_shopping_fee", "service_charge")

    # Editing any of these (or the lines) starts a new revision
    REVISION_FIELDS = ("order_type", "delivery_date", "delivery_time") + ADJUSTMENT_FIELDS

    # Stored figures carried over when an order is duplicated
    FIGURE_FIELDS = (
        "total_quantity",
        "total",
        "total_tax",
        "total_charges",
        "discount",
        "delivery_charge",
        "grand_total",
    ) + ADJUSTMENT_FIELDS

    # Columns the bulk edit may touch
    BULK_UPDATE_FIELDS = ("status", "payment_status")

    # Days looked back by each status count timeframe
    STATUS_COUNT_TIMEFRAMES = {"lifetime": None, "month": 30, "week": 7}

    @staticmethod
    def calculate(
        lines: Iterable[OrderLineRequest],
        order_type: str,
        manual_discount=None,
        specialty_item_shopping_fee=None,
        service_charge=None,
    ) -> OrderCalculationResult:
        """
        Price an order without storing anything.

        Raises:
            OrderPricingError: If the calculator rejects the input
        """
        return OrderCalculationService.calculate(
            lines,
            order_type,
            manual_discount,
            specialty_item_shopping_fee=specialty_item_shopping_fee,
            service_charge=service_charge,
        )

    @staticmethod
    def validate_status_change(order: Order, new_status: str, new_payment_status: str) -> None:
        """
        Raises:
            ValueError: If the order may not move to new_status
        """
        if new_status not in statuses_for_type(order.order_type):
            raise ValueError(f"'{new_status}' is not a valid order status.")

        if not can_transition(order.status, new_status):
            raise ValueError(
                f"Cannot change the status of a {order.get_status_display()} order."
            )

        if (
            new_status != order.status
            and requires_payment(new_status)
            and not is_payment_settled(new_payment_status)
        ):
            raise ValueError("Order status can't be completed until paid!")

    @staticmethod
    def _notify_status_change(order: Order, previous_status: str) -> None:
        if order.status != previous_status:
            logger.info(f"Order {order.order_number} status {previous_status} -> {order.status}")
            transaction.on_commit(
                lambda: order_status_changed.send(
                    sender=Order, order=order, previous_status=previous_status
                )
            )

    @staticmethod
    def _edits_contents(order: Order, data: Dict[str, Any]) -> bool:
        for field in OrderService.REVISION_FIELDS:
            if field not in data:
                continue
            current = getattr(order, field)
            new = data[field]
            if field in OrderService.ADJUSTMENT_FIELDS:
                current, new = current or Decimal("0"), new or Decimal("0")
            if new != current:
                return True
        return False

    @staticmethod
    @transaction.atomic
    def create_order(data: Dict[str, Any], customer=None) -> Order:
        """
        Price and store a new order with its items.

        Args:
            data: Validated payload. "lines" holds the OrderLineRequest list,
                "order_type" and ADJUSTMENT_FIELDS drive the calculation and
                any of DETAIL_FIELDS are copied onto the order.
            customer: Owner of the order, None for orders entered by staff for a guest

        Raises:
            OrderPricingError: If the calculator rejects the order
        """
        order_type = data["order_type"]
        lines: List[OrderLineRequest] = list(data.get("lines") or [])

        adjustments = {field: data.get(field) for field in OrderService.ADJUSTMENT_FIELDS}
        result = OrderCalculationService.calculate(lines, order_type, **adjustments)

        order = Order(customer=customer, order_type=order_type)
        if data.get("status"):
            order.status = data["status"]
        for field in OrderService.DETAIL_FIELDS:
            if field in data:
                setattr(order, field, data[field])

        if requires_payment(order.status) and not is_payment_settled(order.payment_status):
            raise ValueError("Order status can't be completed until paid!")

        OrderCalculationService.apply_totals(order, result)
        order.save()
        OrderCalculationService.replace_items(order, result)

        logger.info(
            f"Order {order.order_number} created: {len(lines)} item(s), grand total {order.grand_total}"
        )
        transaction.on_commit(lambda: order_created.send(sender=Order, order=order))
        return order

    @staticmethod
    @transaction.atomic
    def update_order(order: Order, data: Dict[str, Any]) -> Order:
        """
        Full update. Items are replaced when "lines" is present, otherwise the
        stored items are re-priced. Switching to delivery picks up the configured
        delivery charge; an order that stays delivery keeps the charge it had.

        Raises:
            OrderPricingError: If the calculator rejects the new figures
            ValueError: If the status change is not allowed
        """
        previous_status = order.status
        order_type = data.get("order_type", order.order_type)
        new_status = data.get("status", order.status)
        new_payment_status = data.get("payment_status", order.payment_status)

        OrderService.validate_status_change(order, new_status, new_payment_status)

        adjustments = {
            field: data[field] if field in data else getattr(order, field)
            for field in OrderService.ADJUSTMENT_FIELDS
        }
        delivery_charge = order.delivery_charge if order.is_delivery else None

        replace_lines = "lines" in data
        lines = list(data["lines"] or []) if replace_lines else order.line_requests()

        result = OrderCalculationService.calculate(
            lines, order_type, delivery_charge=delivery_charge, **adjustments
        )

        if replace_lines or OrderService._edits_contents(order, data):
            order.revision += 1

        order.order_type = order_type
        order.status = new_status
        for field in OrderService.DETAIL_FIELDS:
            if field in data:
                setattr(order, field, data[field])

        OrderCalculationService.apply_totals(order, result)
        order.save()

        if replace_lines:
            OrderCalculationService.replace_items(order, result)
        else:
            OrderCalculationService.refresh_items(order, result)

        logger.info(f"Order {order.order_number} updated, grand total {order.grand_total}")
        OrderService._notify_status_change(order, previous_status)
        return order

    @staticmethod
    @transaction.atomic
    def update_status(
        order: Order,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        vendor_cost: Optional[Decimal] = None,
    ) -> Order:
        """
        Partial update of the workflow fields. Figures are not recalculated.

        Raises:
            ValueError: If the status change is not allowed
        """
        previous_status = order.status
        new_status = status or order.status
        new_payment_status = payment_status or order.payment_status

        OrderService.validate_status_change(order, new_status, new_payment_status)

        order.status = new_status
        order.payment_status = new_payment_status
        if vendor_cost is not None:
            order.vendor_cost = vendor_cost
        order.save()

        OrderService._notify_status_change(order, previous_status)
        return order

    @staticmethod
    @transaction.atomic
    def bulk_update(ids: Iterable[int], **fields) -> int:
        """
        Set status and/or payment_status on several orders at once.

        Returns:
            int: Number of orders updated

        Raises:
            ValueError: On unknown fields, missing orders or a disallowed change
        """
        ids = list(ids)
        unknown = set(fields) - set(OrderService.BULK_UPDATE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be bulk updated: {', '.join(sorted(unknown))}")
        if not fields:
            raise ValueError("Nothing to update.")

        orders = list(Order.objects.select_for_update().filter(id__in=ids))
        missing = set(ids) - {order.id for order in orders}
        if missing:
            raise ValueError(f"Orders not found: {', '.join(str(i) for i in sorted(missing))}")

        for order in orders:
            OrderService.validate_status_change(
                order,
                fields.get("status", order.status),
                fields.get("payment_status", order.payment_status),
            )

        updated = Order.objects.filter(id__in=ids).update(updated_at=timezone.now(), **fields)
        logger.info(f"Bulk updated {updated} order(s): {fields}")
        transaction.on_commit(lambda: broadcast_orders_changed("bulk_updated"))
        return updated

    @staticmethod
    @transaction.atomic
    def bulk_delete(ids: Iterable[int]) -> int:
        """
        Returns:
            int: Number of orders deleted
        """
        ids = list(ids)
        queryset = Order.objects.filter(id__in=ids)
        found = queryset.count()
        if found != len(set(ids)):
            raise ValueError("One or more orders do not exist.")

        queryset.delete()
        logger.info(f"Bulk deleted {found} order(s)")
        return found

    @staticmethod
    @transaction.atomic
    def delete_order(order: Order) -> None:
        order_number = order.order_number
        order.delete()
        logger.info(f"Order {order_number} deleted")

    @staticmethod
    def mark_as_paid(order: Order) -> Order:
        return OrderService.update_status(order, payment_status=PaymentStatus.PAID)

    @staticmethod
    def complete_order(order: Order) -> Order:
        return OrderService.update_status(order, status=OrderStatus.COMPLETED)

    @staticmethod
    @transaction.atomic
    def duplicate_order(order: Order) -> Order:
        """
        Copy an order and its items into a new quote. The copy gets the next
        order number, starts over as quote_pending/unpaid at revision 0 and
        keeps the stored figures as they are.
        """
        duplicate = Order(
            customer=order.customer,
            order_type=order.order_type,
            status=OrderStatus.QUOTE_PENDING,
            payment_status=PaymentStatus.UNPAID,
        )
        for field in OrderService.DETAIL_FIELDS + OrderService.FIGURE_FIELDS:
            if field != "payment_status":
                setattr(duplicate, field, getattr(order, field))
        duplicate.save()

        items = list(OrderItem.objects.filter(order=order).order_by("position", "id"))
        for item in items:
            item.pk = None
            item._state.adding = True
            item.order = duplicate
        OrderItem.objects.bulk_create(items)

        logger.info(f"Order {order.order_number} duplicated as {duplicate.order_number}")
        return duplicate

    @staticmethod
    def status_counts(
        queryset: Optional[QuerySet] = None, timeframe: str = "lifetime"
    ) -> Dict[str, int]:
        """
        Number of orders per status, with every status present.

        Args:
            queryset: Orders to count, all orders by default
            timeframe: lifetime, month (last 30 days) or week (last 7 days),
                counted from the start of that day

        Raises:
            ValueError: On an unknown timeframe
        """
        if timeframe not in OrderService.STATUS_COUNT_TIMEFRAMES:
            raise ValueError(
                f"Unknown timeframe '{timeframe}'. "
                f"Use one of: {', '.join(OrderService.STATUS_COUNT_TIMEFRAMES)}"
            )

        queryset = Order.objects.all() if queryset is None else queryset
        days = OrderService.STATUS_COUNT_TIMEFRAMES[timeframe]
        if days is not None:
            since = timezone.localtime() - timedelta(days=days)
            queryset = queryset.filter(
                created_at__gte=since.replace(hour=0, minute=0, second=0, microsecond=0)
            )

        counts = dict.fromkeys(OrderStatus.values, 0)
        rows = queryset.order_by().prefetch_related(None).values("status").annotate(count=Count("id"))
        for row in rows:
            counts[row["status"]] = row["count"]
        return counts
