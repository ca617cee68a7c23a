"""
Centralized configuration access using a lazy singleton.

Business logic reads configured values (delivery charge, currency, order
number prefix) from here instead of querying BusinessSetup directly. The
database is only hit on first attribute access, so management commands like
'makemigrations' can import this module before the schema exists.
"""

from decimal import Decimal
from typing import Optional, Any
from django.core.exceptions import ImproperlyConfigured
import logging

logger = logging.getLogger(__name__)


class AppSettings:
    """
    A LAZY singleton that exposes the BusinessSetup row as plain attributes.
    """

    _instance: Optional["AppSettings"] = None
    _initialized: bool = False

    def __new__(cls) -> "AppSettings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialization is deferred to the first attribute access.
        """
        pass

    def _setup(self):
        if not self._initialized:
            self.load_settings()
            self._initialized = True

    def __getattr__(self, name: str) -> Any:
        """
        Lazily loads settings on first access, then retrieves the attribute.
        """
        if not self._initialized:
            self._setup()

        # Only consult __dict__ here; a missing name must not recurse.
        try:
            return self.__dict__[name]
        except KeyError:
            raise AttributeError(f"'AppSettings' object has no attribute '{name}'")

    def load_settings(self) -> None:
        """
        Load the BusinessSetup row and copy its values onto the instance.
        """
        from .services import SettingsService

        try:
            setup = SettingsService.get_business_setup()
        except Exception as e:
            raise ImproperlyConfigured(f"Failed to load settings: {e}")

        self.business_name: str = setup.name
        self.business_email: str = setup.email
        self.notification_email: str = setup.notification_email
        self.currency: str = setup.currency
        self.delivery_charge: Decimal = setup.delivery_charge
        self.order_number_prefix: str = setup.order_number_prefix

    def reload(self) -> None:
        """
        Reload settings from the database after BusinessSetup changes.
        """
        self.load_settings()
        self._initialized = True
        logger.info("AppSettings reloaded")

    def invalidate(self) -> None:
        """Drop loaded values; the next attribute access reloads them."""
        for key in list(self.__dict__):
            del self.__dict__[key]
        self._initialized = False

    def get_financial_settings(self) -> dict:
        """Values the order calculator needs from configuration."""
        return {
            "currency": self.currency,
            "delivery_charge": self.delivery_charge,
        }

    def __str__(self) -> str:
        if not self._initialized:
            return "AppSettings(not loaded)"
        return (
            f"AppSettings(business='{self.business_name}', "
            f"currency={self.currency}, "
            f"delivery_charge={self.delivery_charge})"
        )


# Create the singleton instance at module level
app_settings = AppSettings()
