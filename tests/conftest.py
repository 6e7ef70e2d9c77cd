"""Pytest fixtures for the checkout relay tests."""

import pytest
from fastapi.testclient import TestClient

import src.api.dependencies as dependencies
from src.api.main import app
from src.integrations.clients.mocks.stripe_checkout import MockStripeCheckoutClient
from src.utils.config_loader import RelayConfig, Settings


@pytest.fixture
def settings():
    """Mock-mode settings with the default site configuration."""
    return Settings(integrations_mode="mock", relay=RelayConfig())


@pytest.fixture
def mock_processor():
    """In-memory processor that records every session request."""
    return MockStripeCheckoutClient()


@pytest.fixture
def client(settings, mock_processor):
    app.dependency_overrides[dependencies.get_settings] = lambda: settings
    app.dependency_overrides[dependencies.get_payment_client] = lambda: mock_processor
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_processor():
    yield
    dependencies.reset_processor()
