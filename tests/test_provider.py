"""Unit tests for provider.py - provider configuration and plugin wiring."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from client import AirbrakeClient, Session
from config import DEFAULT_AIRBRAKE_URL, AirbrakeConfig, get_config
from errors import InvalidCredentials, TransportError
from plugins.registry import PluginRegistry, register_builtin_plugins
from projects import ProjectReconciler
from provider import AirbrakeProvider


@pytest.fixture
def registry():
    registry = PluginRegistry()
    register_builtin_plugins(registry)
    return registry


@pytest.fixture
def mock_authenticate():
    client = AirbrakeClient(Session(DEFAULT_AIRBRAKE_URL, "k"))
    with patch("provider.authenticate", AsyncMock(return_value=client)) as mock:
        yield mock


class TestProviderMetadata:
    """Tests for provider metadata."""

    def test_type_name(self, registry):
        provider = AirbrakeProvider(registry=registry)
        assert provider.type_name == "airbrake"

    def test_version(self, registry):
        provider = AirbrakeProvider(version="1.2.3", registry=registry)
        assert provider.version == "1.2.3"

    def test_default_registry_has_builtins(self):
        provider = AirbrakeProvider()
        assert provider.registry.has_resource_plugin("airbrake_project")
        assert provider.registry.has_data_source_plugin("airbrake_project")

    def test_not_configured_initially(self, registry):
        assert AirbrakeProvider(registry=registry).is_configured is False


@pytest.mark.asyncio
class TestProviderConfigure:
    """Tests for AirbrakeProvider.configure."""

    async def test_configure_with_api_key(self, registry, mock_authenticate):
        provider = AirbrakeProvider(registry=registry, env_config=AirbrakeConfig())

        result = await provider.configure({"api_key": "k"})

        assert not result.has_error
        assert provider.is_configured
        assert isinstance(provider.reconciler, ProjectReconciler)
        mock_authenticate.assert_awaited_once_with(
            DEFAULT_AIRBRAKE_URL, email="", password="", api_key="k", timeout=30
        )

    async def test_configure_hands_reconciler_to_plugins(
        self, registry, mock_authenticate
    ):
        provider = AirbrakeProvider(registry=registry, env_config=AirbrakeConfig())
        resource = provider.resource("airbrake_project")

        await provider.configure({"api_key": "k"})

        assert resource.reconciler is provider.reconciler
        assert provider.data_source("airbrake_project").reconciler is provider.reconciler

    async def test_explicit_config_overrides_environment(
        self, registry, mock_authenticate
    ):
        env = AirbrakeConfig(
            base_url="https://env.example.test/api/v4",
            email="env@example.test",
            password="env-pw",
        )
        provider = AirbrakeProvider(registry=registry, env_config=env)

        await provider.configure(
            {"base_url": "https://explicit.example.test/v4", "email": None}
        )

        mock_authenticate.assert_awaited_once_with(
            "https://explicit.example.test/v4/",
            email="env@example.test",
            password="env-pw",
            api_key="",
            timeout=30,
        )

    async def test_missing_credentials(self, registry, mock_authenticate):
        provider = AirbrakeProvider(registry=registry, env_config=AirbrakeConfig())

        result = await provider.configure({"email": "me@example.test"})

        assert result.has_error
        assert result.diagnostics[0].summary == "Missing Airbrake credentials"
        assert result.diagnostics[0].attribute == "api_key"
        mock_authenticate.assert_not_called()
        assert not provider.is_configured

    async def test_invalid_config_shape(self, registry, mock_authenticate):
        provider = AirbrakeProvider(registry=registry, env_config=AirbrakeConfig())

        result = await provider.configure({"api_key": "k", "region": "eu"})

        assert result.has_error
        mock_authenticate.assert_not_called()

    @pytest.mark.parametrize(
        "error", [InvalidCredentials("rejected"), TransportError("refused")]
    )
    async def test_authentication_failure(self, registry, error):
        provider = AirbrakeProvider(registry=registry, env_config=AirbrakeConfig())

        with patch("provider.authenticate", AsyncMock(side_effect=error)):
            result = await provider.configure({"api_key": "k"})

        assert result.has_error
        assert result.diagnostics[0].summary == "Unable to connect to Airbrake API client"
        assert error.message in result.diagnostics[0].detail
        assert not provider.is_configured

    async def test_environment_used_when_no_env_config(self, registry, mock_authenticate):
        provider = AirbrakeProvider(registry=registry)

        with patch.dict(
            "os.environ",
            {"AIRBRAKE_API_KEY": "from-env", "AIRBRAKE_BASE_URL": ""},
            clear=True,
        ):
            result = await provider.configure()

        assert not result.has_error
        assert mock_authenticate.await_args.kwargs["api_key"] == "from-env"

    async def test_environment_comes_from_shared_config(
        self, registry, mock_authenticate
    ):
        with patch.dict(
            "os.environ", {"AIRBRAKE_EMAIL": "env@example.test"}, clear=True
        ):
            shared = get_config()

        provider = AirbrakeProvider(registry=registry)
        await provider.configure({"password": "pw"})

        assert provider.config.email == "env@example.test"
        assert get_config() is shared

    async def test_invalid_timeout_in_environment(self, registry, mock_authenticate):
        provider = AirbrakeProvider(registry=registry)

        with patch.dict(
            "os.environ",
            {"AIRBRAKE_API_KEY": "k", "AIRBRAKE_TIMEOUT": "abc"},
            clear=True,
        ):
            result = await provider.configure()

        assert result.has_error
        diagnostic = result.diagnostics[0]
        assert diagnostic.summary == "Invalid Airbrake environment configuration"
        assert "AIRBRAKE_TIMEOUT" in diagnostic.detail
        mock_authenticate.assert_not_called()
        assert not provider.is_configured


class TestProviderAccessors:
    """Tests for resource and data source accessors."""

    def test_unknown_resource(self, registry):
        provider = AirbrakeProvider(registry=registry)
        with pytest.raises(ValueError, match="Unknown resource type"):
            provider.resource("airbrake_deploy")

    def test_uses_given_registry(self):
        registry = MagicMock()
        provider = AirbrakeProvider(registry=registry)
        provider.resource("airbrake_project")
        registry.get_resource_plugin.assert_called_once_with("airbrake_project")
