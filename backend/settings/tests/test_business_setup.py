"""
Business setup tests.

The delivery charge configured here feeds every delivery order, so these
tests check that edits are validated and reach app_settings immediately.
"""
import logging
import pytest
from decimal import Decimal
from django.core.exceptions import ValidationError

from settings.config import app_settings
from settings.models import BusinessSetup
from settings.services import SettingsService


SETTINGS_URL = "/api/settings/business/"


@pytest.mark.django_db
class TestSettingsService:
    def test_get_creates_defaults(self):
        setup = SettingsService.get_business_setup()

        assert BusinessSetup.objects.count() == 1
        assert setup.currency == "USD"
        assert setup.delivery_charge == 0
        assert setup.order_number_prefix == "KA"

    def test_get_returns_existing_row(self, business_setup):
        assert SettingsService.get_business_setup().pk == business_setup.pk
        assert BusinessSetup.objects.count() == 1

    def test_update(self, business_setup):
        setup = SettingsService.update_business_setup({"delivery_charge": Decimal("30.00"), "currency": "eur"})

        setup.refresh_from_db()
        assert setup.delivery_charge == Decimal("30.00")
        assert setup.currency == "EUR"

    def test_update_logs_changed_fields(self, business_setup, caplog):
        with caplog.at_level(logging.INFO, logger="settings.services"):
            SettingsService.update_business_setup({"delivery_charge": Decimal("30.00"), "currency": "eur"})

        messages = [record.getMessage() for record in caplog.records]
        assert "Business setup updated: currency, delivery_charge" in messages
        assert all(record.args == () for record in caplog.records if record.name == "settings.services")

    def test_negative_delivery_charge(self, business_setup):
        with pytest.raises(ValidationError) as exc_info:
            SettingsService.update_business_setup({"delivery_charge": Decimal("-1")})

        assert "delivery_charge" in exc_info.value.message_dict
        business_setup.refresh_from_db()
        assert business_setup.delivery_charge == Decimal("25.00")

    def test_prefix_must_be_letters(self, business_setup):
        with pytest.raises(ValidationError):
            SettingsService.update_business_setup({"order_number_prefix": "K1"})

    def test_prefix_is_uppercased(self, business_setup):
        setup = SettingsService.update_business_setup({"order_number_prefix": "cx"})
        assert setup.order_number_prefix == "CX"

    def test_unknown_field(self, business_setup):
        with pytest.raises(ValidationError):
            SettingsService.update_business_setup({"tax_rate": "0.08"})


@pytest.mark.django_db
class TestAppSettings:
    def test_loads_lazily(self, business_setup):
        app_settings.invalidate()
        assert str(app_settings) == "AppSettings(not loaded)"

        assert app_settings.delivery_charge == Decimal("25.00")
        assert app_settings.business_name == "Test Catering"

    def test_reloads_after_update(self, business_setup):
        assert app_settings.delivery_charge == Decimal("25.00")

        SettingsService.update_business_setup({"delivery_charge": Decimal("12.50")})

        assert app_settings.delivery_charge == Decimal("12.50")
        assert app_settings.get_financial_settings() == {
            "currency": "USD",
            "delivery_charge": Decimal("12.50"),
        }

    def test_unknown_attribute(self, business_setup):
        with pytest.raises(AttributeError):
            app_settings.tax_rate

    def test_new_prefix_applies_to_next_order(self, business_setup, simple_line):
        from orders.services import OrderService
        from orders.statuses import OrderType

        SettingsService.update_business_setup({"order_number_prefix": "CX"})
        order = OrderService.create_order({"order_type": OrderType.PICKUP, "lines": [simple_line]})

        assert order.order_number == "CX00001"


@pytest.mark.django_db
class TestBusinessSetupAPI:
    def test_customer_can_read(self, customer_client, business_setup):
        response = customer_client.get(SETTINGS_URL)

        assert response.status_code == 200
        assert response.data["name"] == "Test Catering"
        assert Decimal(response.data["delivery_charge"]) == Decimal("25.00")

    def test_customer_cannot_edit(self, customer_client, business_setup):
        response = customer_client.patch(SETTINGS_URL, {"delivery_charge": "0"}, format="json")

        assert response.status_code == 403
        business_setup.refresh_from_db()
        assert business_setup.delivery_charge == Decimal("25.00")

    def test_staff_edit(self, staff_client, business_setup):
        response = staff_client.patch(SETTINGS_URL, {"delivery_charge": "40.00"}, format="json")

        assert response.status_code == 200
        assert Decimal(response.data["delivery_charge"]) == Decimal("40.00")
        assert app_settings.delivery_charge == Decimal("40.00")

    def test_invalid_currency(self, staff_client, business_setup):
        response = staff_client.patch(SETTINGS_URL, {"currency": "DOLLARS"}, format="json")

        assert response.status_code == 400
        assert "currency" in response.data["messages"]

    def test_negative_charge(self, staff_client, business_setup):
        response = staff_client.patch(SETTINGS_URL, {"delivery_charge": "-5"}, format="json")

        assert response.status_code == 400
        assert response.data["success"] is False

    def test_anonymous(self, api_client):
        response = api_client.get(SETTINGS_URL)
        assert response.status_code in (401, 403)
