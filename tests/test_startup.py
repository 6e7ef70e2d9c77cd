import pytest

import src.api.dependencies as dependencies
import src.api.main as main_module
from src.error_handler import ConfigError
from src.integrations.clients.mocks.stripe_checkout import MockStripeCheckoutClient
from src.integrations.clients.real_http.stripe_checkout import StripeCheckoutClient


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("STRIPE_SECRET_KEY", "INTEGRATIONS_MODE", "PORT", "STRIPE_TIMEOUT_SECONDS", "RELAY_CONFIG_PATH"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.asyncio
async def test_startup_aborts_without_processor_credential(clean_env):
    with pytest.raises(ConfigError):
        await main_module.startup_event()
    assert dependencies.payment_client is None


@pytest.mark.asyncio
async def test_startup_initialises_stripe_client(clean_env):
    clean_env.setenv("STRIPE_SECRET_KEY", "sk_test_123")

    await main_module.startup_event()

    assert isinstance(dependencies.get_payment_client(), StripeCheckoutClient)
    assert dependencies.get_settings().stripe_secret_key == "sk_test_123"


@pytest.mark.asyncio
async def test_startup_in_mock_mode_uses_in_memory_processor(clean_env):
    clean_env.setenv("INTEGRATIONS_MODE", "mock")

    await main_module.startup_event()

    assert isinstance(dependencies.get_payment_client(), MockStripeCheckoutClient)


@pytest.mark.asyncio
async def test_shutdown_releases_processor(clean_env):
    clean_env.setenv("INTEGRATIONS_MODE", "mock")
    await main_module.startup_event()

    await main_module.shutdown_event()

    assert dependencies.payment_client is None


def test_requests_before_initialisation_get_error_envelope():
    from fastapi.testclient import TestClient

    response = TestClient(main_module.app).post("/verify-payment", json={"sessionId": "cs_1"})

    assert response.status_code == 500
    assert response.json() == {"error": "Payment processor is not initialised", "success": False}


def test_health_is_served_after_mock_startup(clean_env):
    from fastapi.testclient import TestClient

    clean_env.setenv("INTEGRATIONS_MODE", "mock")
    with TestClient(main_module.app) as client:
        assert client.get("/health").json()["status"] == "healthy"


def test_main_exits_before_listening_without_credential(clean_env):
    started = []
    clean_env.setattr(main_module.uvicorn, "run", lambda *args, **kwargs: started.append(kwargs))

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 1
    assert started == []


def test_main_binds_all_interfaces_on_configured_port(clean_env):
    started = []
    clean_env.setattr(main_module.uvicorn, "run", lambda app, **kwargs: started.append(kwargs))
    clean_env.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    clean_env.setenv("PORT", "4242")

    main_module.main()

    assert started == [{"host": "0.0.0.0", "port": 4242}]
