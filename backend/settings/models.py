from django.db import models
from django.core.exceptions import ValidationError
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


class BusinessSetup(models.Model):
    """
    Business-wide settings for the catering back office.

    There is a single row. Access it through SettingsService.get_business_setup()
    or, for read-only values used in calculations, through
    settings.config.app_settings.
    """

    name = models.CharField(
        max_length=100,
        default="Catering Co",
        help_text="Business name used in emails and order documents."
    )
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    notification_email = models.EmailField(
        blank=True,
        help_text="Address that receives a copy of every new order notification."
    )

    # === FINANCIAL SETTINGS ===
    currency = models.CharField(
        max_length=3,
        default="USD",
        help_text="Three-letter currency code (ISO 4217)."
    )
    delivery_charge = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Flat charge added to every delivery order."
    )

    # === ORDER NUMBERING ===
    order_number_prefix = models.CharField(
        max_length=2,
        default="KA",
        help_text="Two-letter prefix for order numbers (e.g. KA00042)."
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Business Setup"
        verbose_name_plural = "Business Setup"

    def __str__(self):
        return self.name

    def clean(self):
        if self.delivery_charge is not None and self.delivery_charge < 0:
            raise ValidationError({"delivery_charge": "Delivery charge can't be negative."})
        if self.order_number_prefix and not self.order_number_prefix.isalpha():
            raise ValidationError({"order_number_prefix": "Prefix must contain letters only."})

    def save(self, *args, **kwargs):
        self.currency = (self.currency or "USD").upper()
        self.order_number_prefix = (self.order_number_prefix or "KA").upper()[:2].ljust(2, "A")
        super().save(*args, **kwargs)
