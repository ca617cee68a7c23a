"""
Order status lookup table.

Status behaviour is described by a read-only table instead of being spread
over the views: every status key maps to its label and the flags the order
service needs to validate a change.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderType(models.TextChoices):
    DINE_IN = "dine_in", _("Dine In")
    DELIVERY = "delivery", _("Delivery")
    PICKUP = "pickup", _("Pickup")


class OrderStatus(models.TextChoices):
    QUOTE_PENDING = "quote_pending", _("Quote Pending")
    QUOTE_SENT = "quote_sent", _("Quote Sent")
    AWAITING_VENDOR_QUOTE = "awaiting_vendor_quote", _("Awaiting Vendor Quote")
    AWAITING_VENDOR_CONFIRMATION = "awaiting_vendor_confirmation", _("Awaiting Vendor Confirmation")
    VENDOR_CONFIRMED = "vendor_confirmed", _("Vendor Confirmed")
    AWAITING_CLIENT_CONFIRMATION = "awaiting_client_confirmation", _("Awaiting Client Confirmation")
    CLIENT_CONFIRMED = "client_confirmed", _("Client Confirmed")
    OUT_FOR_DELIVERY = "out_for_delivery", _("Out for Delivery")
    COMPLETED = "completed", _("Completed")
    CANCELLED_NOT_BILLABLE = "cancelled_not_billable", _("Cancelled (Not Billable)")
    CANCELLED_BILLABLE = "cancelled_billable", _("Cancelled (Billable)")


class PaymentStatus(models.TextChoices):
    UNPAID = "unpaid", _("Unpaid")
    PAYMENT_REQUESTED = "payment_requested", _("Payment Requested")
    PAID = "paid", _("Paid")


class PaymentType(models.TextChoices):
    CASH = "cash", _("Cash")
    CARD = "card", _("Card")
    PAYPAL = "paypal", _("PayPal")
    STRIPE = "stripe", _("Stripe")
    ACH = "ach", _("ACH")


@dataclass(frozen=True)
class StatusInfo:
    label: str
    is_final: bool = False
    requires_payment: bool = False
    billable: bool = True


STATUS_TABLE: Mapping[str, StatusInfo] = MappingProxyType({
    OrderStatus.QUOTE_PENDING: StatusInfo("Quote Pending"),
    OrderStatus.QUOTE_SENT: StatusInfo("Quote Sent"),
    OrderStatus.AWAITING_VENDOR_QUOTE: StatusInfo("Awaiting Vendor Quote"),
    OrderStatus.AWAITING_VENDOR_CONFIRMATION: StatusInfo("Awaiting Vendor Confirmation"),
    OrderStatus.VENDOR_CONFIRMED: StatusInfo("Vendor Confirmed"),
    OrderStatus.AWAITING_CLIENT_CONFIRMATION: StatusInfo("Awaiting Client Confirmation"),
    OrderStatus.CLIENT_CONFIRMED: StatusInfo("Client Confirmed"),
    OrderStatus.OUT_FOR_DELIVERY: StatusInfo("Out for Delivery"),
    OrderStatus.COMPLETED: StatusInfo("Completed", is_final=True, requires_payment=True),
    OrderStatus.CANCELLED_NOT_BILLABLE: StatusInfo(
        "Cancelled (Not Billable)", is_final=True, billable=False
    ),
    OrderStatus.CANCELLED_BILLABLE: StatusInfo("Cancelled (Billable)", is_final=True),
})

# Back-office list groups: orders still being arranged vs. dispatched or closed
HISTORY_STATUSES = (
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED_NOT_BILLABLE,
    OrderStatus.CANCELLED_BILLABLE,
)
ACTIVE_STATUSES = tuple(s for s in OrderStatus.values if s not in HISTORY_STATUSES)

# Payment states that still block completion
UNSETTLED_PAYMENT_STATUSES = frozenset({PaymentStatus.UNPAID, PaymentStatus.PAYMENT_REQUESTED})

# Every order type currently shares the same workflow.
_STATUSES_BY_TYPE: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    OrderType.DINE_IN: tuple(OrderStatus.values),
    OrderType.PICKUP: tuple(OrderStatus.values),
    OrderType.DELIVERY: tuple(OrderStatus.values),
})


def status_info(status: str) -> StatusInfo:
    try:
        return STATUS_TABLE[status]
    except KeyError:
        raise ValueError(f"'{status}' is not a valid order status.")


def statuses_for_type(order_type: str) -> Tuple[str, ...]:
    """Statuses an order of the given type may be put in."""
    return _STATUSES_BY_TYPE.get(order_type, tuple(OrderStatus.values))


def can_transition(current: str, new: str) -> bool:
    """Final statuses are locked; everything else may move freely."""
    if current == new:
        return True
    return not status_info(current).is_final


def requires_payment(status: str) -> bool:
    return status_info(status).requires_payment


def is_payment_settled(payment_status: str) -> bool:
    return payment_status not in UNSETTLED_PAYMENT_STATUSES
