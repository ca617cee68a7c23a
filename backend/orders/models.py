from decimal import Decimal
from django.db import models, transaction, IntegrityError
from django.db.models import BigIntegerField, Max
from django.db.models.functions import Cast, Substr
from django.conf import settings
from django.utils.translation import gettext_lazy as _
from django.utils import timezone
import re

from orders.calculators import OrderLineRequest, DiscountType
from orders.statuses import OrderType, OrderStatus, PaymentStatus, PaymentType


MONEY_MAX_DIGITS = 14
MONEY_DECIMAL_PLACES = 2
QUANTITY_MAX_DIGITS = 12

# Smallest absolute values the columns can no longer hold
MONEY_LIMIT = Decimal(10) ** (MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES)
QUANTITY_LIMIT = Decimal(10) ** (QUANTITY_MAX_DIGITS - 2)


def money_field(**kwargs):
    """DecimalField sized for the calculator's 999,999,999 ceiling."""
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(
        max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES, **kwargs
    )


class Order(models.Model):
    OrderType = OrderType
    OrderStatus = OrderStatus
    PaymentStatus = PaymentStatus
    PaymentType = PaymentType

    order_number = models.CharField(max_length=20, unique=True, blank=True, null=True)

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    order_type = models.CharField(
        max_length=10, choices=OrderType.choices, default=OrderType.PICKUP
    )
    status = models.CharField(
        max_length=32, choices=OrderStatus.choices, default=OrderStatus.QUOTE_PENDING
    )
    payment_type = models.CharField(
        max_length=10, choices=PaymentType.choices, default=PaymentType.CASH
    )
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID
    )

    # --- Financial Fields (snapshot of the last calculation) ---
    total_quantity = models.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=2, default=Decimal("0")
    )
    total = money_field(help_text=_("Sum of line totals including addons and variants, before discounts."))
    total_tax = money_field()
    total_charges = money_field()
    discount = money_field(help_text=_("Sum of per-item discounts."))
    manual_discount = money_field(help_text=_("Order-level discount applied on top of item discounts."))
    delivery_charge = money_field()
    specialty_item_shopping_fee = money_field()
    service_charge = money_field()
    grand_total = money_field()
    vendor_cost = money_field()
    revision = models.PositiveIntegerField(
        default=0, help_text=_("Bumped every time the order contents are edited.")
    )

    # --- Customer-facing details ---
    customer_note = models.TextField(blank=True, null=True)
    note = models.TextField(blank=True, null=True)
    packaging_note = models.TextField(blank=True, null=True)
    dietary_restrictions = models.TextField(blank=True, null=True)
    reheat_method = models.CharField(max_length=255, blank=True, null=True)
    tail_number = models.CharField(max_length=50, blank=True, null=True)
    priority = models.CharField(max_length=50, blank=True, null=True)
    delivery_date = models.DateField(blank=True, null=True)
    delivery_time = models.CharField(max_length=20, blank=True, null=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        ordering = ["-created_at", "order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["status"], name="order_status_idx"),
            models.Index(fields=["order_type"], name="order_type_idx"),
            models.Index(fields=["payment_status"], name="order_pay_status_idx"),
            models.Index(fields=["customer", "status"], name="order_cust_status_idx"),
            models.Index(fields=["created_at"], name="order_created_idx"),
        ]

    def __str__(self):
        return f"Order {self.order_number or self.pk} ({self.order_type}) - {self.status}"

    @property
    def is_delivery(self) -> bool:
        return self.order_type == OrderType.DELIVERY

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def customer_email(self):
        return self.customer.email if self.customer else None

    @property
    def customer_display_name(self):
        if not self.customer:
            return "Guest Customer"
        full_name = f"{self.customer.first_name or ''} {self.customer.last_name or ''}".strip()
        return full_name or self.customer.get_username() or self.customer.email

    def line_requests(self):
        """Rebuild calculator input from the stored items."""
        return [item.to_line_request() for item in self.items.all()]

    def save(self, *args, **kwargs):
        # Generate order_number only if it's not already set
        if not self.order_number:
            max_retries = 5  # Prevent infinite loop in extreme race conditions
            for _attempt in range(max_retries):
                self.order_number = self._generate_sequential_order_number()
                try:
                    with transaction.atomic():
                        super().save(*args, **kwargs)
                    break
                except IntegrityError as e:
                    if "order_number" not in str(e).lower() and "unique" not in str(e).lower():
                        raise
                    # Another process took the number, retry with the next one
                    self.order_number = None
            else:
                raise IntegrityError(
                    "Failed to generate a unique order number after multiple retries."
                )
        else:
            if not self._state.adding:
                self.updated_at = timezone.now()
            super().save(*args, **kwargs)

    def _generate_sequential_order_number(self):
        """
        Generates the next order number: two-letter prefix + zero-padded
        sequence, e.g. KA00001. The sequence is global, not per day, and
        grows past five digits once 99999 is reached.
        """
        from settings.config import app_settings

        prefix = app_settings.order_number_prefix
        last_number = Order.objects.filter(
            order_number__regex=rf"^{re.escape(prefix)}[0-9]+$"
        ).aggregate(
            last=Max(Cast(Substr("order_number", len(prefix) + 1), BigIntegerField()))
        )["last"]
        next_number = (last_number or 0) + 1
        return f"{prefix}{next_number:05d}"


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    name = models.CharField(max_length=255, blank=True, null=True)
    description = models.TextField(blank=True, null=True)

    price = money_field(help_text=_("Unit price at the time of the order."))
    quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("1"))
    discount = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    discount_type = models.CharField(
        max_length=10,
        choices=[(t.value, t.value.title()) for t in DiscountType],
        default=DiscountType.AMOUNT.value,
    )

    # Snapshot of the selections as sent by the client
    addons = models.JSONField(default=list, blank=True)
    variants = models.JSONField(default=list, blank=True)

    addons_amount = money_field(null=True, blank=True, default=None)
    variants_amount = money_field(null=True, blank=True, default=None)
    discount_amount = money_field(null=True, blank=True, default=None)
    total_price = money_field()
    grand_price = money_field()

    position = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.quantity} of {self.name or 'item'} in Order {self.order.order_number}"

    def to_line_request(self) -> OrderLineRequest:
        return OrderLineRequest.from_dict({
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "quantity": self.quantity,
            "discount": self.discount,
            "discount_type": self.discount_type,
            "addons": self.addons or [],
            "variants": self.variants or [],
        })
