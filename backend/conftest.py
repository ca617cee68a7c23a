"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from django.core.cache import cache


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_app_settings():
    """
    Drop the loaded business settings around each test.

    app_settings is a process-wide singleton; without this a delivery charge
    configured in one test would leak into the next.
    """
    from settings.config import app_settings

    app_settings.invalidate()
    yield
    app_settings.invalidate()


@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache after each test to prevent cache pollution.
    """
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def locmem_email(settings):
    """Keep every test on the in-memory mail outbox."""
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.ORDER_NOTIFICATION_EMAILS = []


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/orders/')
            assert response.status_code == 403
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def staff_client(api_client, staff_user):
    """API client logged in as a back-office staff user."""
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def customer_client(customer_user):
    """API client logged in as a customer (separate from api_client)."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=customer_user)
    return client


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *
