"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like users, business settings, order lines and stored orders.
"""
import pytest
from decimal import Decimal
from django.contrib.auth import get_user_model

from orders.calculators import AddonRequest, DiscountType, OrderLineRequest, VariantOptionRequest, VariantRequest
from orders.statuses import OrderType

User = get_user_model()


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def staff_user(db):
    """Back-office user"""
    return User.objects.create_user(
        username='manager',
        email='manager@catering.test',
        password='password123',
        first_name='Morgan',
        last_name='Lee',
        is_staff=True,
    )


@pytest.fixture
def customer_user(db):
    """Customer placing orders"""
    return User.objects.create_user(
        username='client',
        email='client@example.com',
        password='password123',
        first_name='Sam',
        last_name='Rivera',
    )


@pytest.fixture
def other_customer(db):
    """A second customer, for ownership checks"""
    return User.objects.create_user(
        username='other',
        email='other@example.com',
        password='password123',
    )


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def business_setup(db):
    """BusinessSetup row with a $25 delivery charge"""
    from settings.services import SettingsService

    return SettingsService.update_business_setup({
        'name': 'Test Catering',
        'email': 'hello@catering.test',
        'notification_email': 'kitchen@catering.test',
        'currency': 'USD',
        'delivery_charge': Decimal('25.00'),
    })


# ============================================================================
# ORDER LINE FIXTURES
# ============================================================================

@pytest.fixture
def simple_line():
    """10.00 x 2, no extras"""
    return OrderLineRequest(price=Decimal('10.00'), quantity=Decimal('2'), name='Sandwich Platter')


@pytest.fixture
def full_line():
    """20.00 x 2 with an addon, a variant and a 10% discount"""
    return OrderLineRequest(
        price=Decimal('20.00'),
        quantity=Decimal('2'),
        discount=Decimal('10'),
        discount_type=DiscountType.PERCENTAGE,
        addons=(AddonRequest(price=Decimal('2.50'), quantity=Decimal('2'), id=1, name='Extra Sauce'),),
        variants=(
            VariantRequest(
                id=3,
                name='Size',
                options=(VariantOptionRequest(price=Decimal('4.00'), id=7, name='Large', variant_id=3),),
            ),
        ),
        name='Salad Bowl',
    )


@pytest.fixture
def line_payload():
    """API payload for one line item"""
    return {
        'id': 1,
        'name': 'Sandwich Platter',
        'description': 'Assorted',
        'price': '10.00',
        'quantity': '2',
        'addons': [{'id': 5, 'name': 'Chips', 'price': '1.50', 'quantity': '2'}],
        'variants': [
            {
                'id': 3,
                'name': 'Bread',
                'option': [{'id': 9, 'name': 'Sourdough', 'price': '2.00', 'variant_id': 3}],
            }
        ],
    }


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def pickup_order(business_setup, customer_user, simple_line):
    """Stored pickup order for customer_user: 10.00 x 2, grand total 20.00"""
    from orders.services import OrderService

    return OrderService.create_order(
        {'order_type': OrderType.PICKUP, 'lines': [simple_line]},
        customer=customer_user,
    )


@pytest.fixture
def delivery_order(business_setup, customer_user, simple_line):
    """Stored delivery order: 20.00 + 25.00 delivery"""
    from orders.services import OrderService

    return OrderService.create_order(
        {'order_type': OrderType.DELIVERY, 'lines': [simple_line]},
        customer=customer_user,
    )


@pytest.fixture
def other_order(business_setup, other_customer, simple_line):
    """Order that belongs to other_customer"""
    from orders.services import OrderService

    return OrderService.create_order(
        {'order_type': OrderType.DINE_IN, 'lines': [simple_line]},
        customer=other_customer,
    )


__all__ = [
    'staff_user',
    'customer_user',
    'other_customer',
    'business_setup',
    'simple_line',
    'full_line',
    'line_payload',
    'pickup_order',
    'delivery_order',
    'other_order',
]
