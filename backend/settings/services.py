"""
Settings service layer - business logic for the BusinessSetup row.
"""
from typing import Dict, Any
from django.db import transaction
from django.core.exceptions import ValidationError
import logging

from .models import BusinessSetup

logger = logging.getLogger(__name__)


class SettingsService:
    """
    Service layer for managing business settings.
    Views and AppSettings go through here instead of touching the model directly.
    """

    @staticmethod
    def get_business_setup() -> BusinessSetup:
        """
        Get the BusinessSetup row, creating it with defaults on first access.

        Returns:
            BusinessSetup: The single settings instance
        """
        obj = BusinessSetup.objects.order_by("id").first()
        if obj is None:
            obj = BusinessSetup()
            obj.save()
            logger.info("Created default BusinessSetup instance")
        return obj

    @staticmethod
    @transaction.atomic
    def update_business_setup(update_data: Dict[str, Any]) -> BusinessSetup:
        """
        Update business settings with model validation.

        The post_save signal reloads app_settings, so the new delivery charge
        applies to the next calculation.

        Raises:
            ValidationError: If validation fails
        """
        instance = SettingsService.get_business_setup()

        for field, value in update_data.items():
            if not hasattr(instance, field):
                raise ValidationError({field: "Unknown setting."})
            setattr(instance, field, value)

        instance.full_clean()
        instance.save()
        logger.info(f"Business setup updated: {', '.join(sorted(update_data))}")
        return instance
