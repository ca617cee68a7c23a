"""
Signal handlers for the settings app.
Keeps the AppSettings singleton in step with the BusinessSetup row.
"""

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from .models import BusinessSetup
import logging

logger = logging.getLogger(__name__)


@receiver(post_save, sender=BusinessSetup)
def reload_app_settings(sender, instance, **kwargs):
    """
    Reload the AppSettings cache when BusinessSetup is saved so a new
    delivery charge or prefix is picked up by the next order.
    """
    # Import here to avoid circular imports and ensure the singleton is loaded
    from .config import app_settings

    app_settings.reload()
    logger.info(f"Configuration cache updated: {app_settings}")


@receiver(post_delete, sender=BusinessSetup)
def invalidate_app_settings(sender, instance, **kwargs):
    from .config import app_settings

    app_settings.invalidate()
