"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from unittest.mock import MagicMock, patch


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def celery_eager():
    """
    Run Celery tasks in-process so tests never need a broker.
    """
    from core_backend.celery import app
    app.conf.task_always_eager = True
    app.conf.task_eager_propagates = True


@pytest.fixture(autouse=True)
def in_memory_channel_layer(settings):
    """
    Keep every test on the in-memory channel layer, even when REDIS_URL is
    set in the developer's environment.
    """
    settings.CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
    }


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.post('/api/orders/', payload, format='json')
            assert response.status_code == 201
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def staff_client(api_client, staff_user):
    """
    Provide an API client authenticated as café staff.

    Usage:
        def test_protected_endpoint(staff_client):
            response = staff_client.get('/api/orders/')
            assert response.status_code == 200
    """
    api_client.force_authenticate(user=staff_user)
    return api_client


# ============================================================================
# EVENT FIXTURES
# ============================================================================

@pytest.fixture
def channel_layer():
    """
    Replace the channel layer the order publisher sends to with a mock.

    Usage:
        def test_event(channel_layer, django_capture_on_commit_callbacks):
            with django_capture_on_commit_callbacks(execute=True):
                OrderService.mark_as_paid(order)
            sent = [call.args[1] for call in channel_layer.group_send.call_args_list]
    """
    layer = MagicMock()
    layer.group_send = MagicMock()
    with patch("orders.events.publishers.get_channel_layer", return_value=layer), \
            patch("orders.events.publishers.async_to_sync", side_effect=lambda fn: fn):
        yield layer


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *
