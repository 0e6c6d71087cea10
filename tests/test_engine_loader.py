"""Tests for loading the authentication engine factory."""

import pytest

from auth_starter.config.exceptions import ConfigurationError
from auth_starter.hooks.engine import AuthEngine, EngineSettings, load_engine_factory
from tests.helpers.fake_engine import FakeEngine, create_fake_engine


def test_load_factory():
    """Test a valid 'module:callable' path is imported."""
    factory = load_engine_factory("tests.helpers.fake_engine:create_fake_engine")
    assert factory is create_fake_engine


def test_factory_builds_engine():
    """Test the loaded factory receives triggers, database and settings."""
    factory = load_engine_factory("tests.helpers.fake_engine:create_fake_engine")
    settings = EngineSettings(app_name="Acme", base_path="/api/auth")
    engine = factory("triggers", "database", settings)

    assert isinstance(engine, FakeEngine)
    assert isinstance(engine, AuthEngine)
    assert engine.settings is settings


@pytest.mark.parametrize("path", ["no_colon", ":factory", "module:", ""])
def test_invalid_format(path):
    """Test malformed paths raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        load_engine_factory(path)


def test_missing_module():
    """Test an unimportable module raises ConfigurationError."""
    with pytest.raises(ConfigurationError) as exc_info:
        load_engine_factory("does_not_exist_pkg.engine:factory")
    assert "does_not_exist_pkg.engine" in str(exc_info.value)


def test_missing_attribute():
    """Test a missing factory attribute raises ConfigurationError."""
    with pytest.raises(ConfigurationError):
        load_engine_factory("tests.helpers.fake_engine:nope")


def test_non_callable_attribute():
    """Test a non-callable attribute raises ConfigurationError."""
    with pytest.raises(ConfigurationError):
        load_engine_factory("auth_starter:__version__")


def test_auth_engine_is_abstract():
    """Test AuthEngine cannot be instantiated without handle()."""
    with pytest.raises(TypeError):
        AuthEngine()


@pytest.mark.parametrize(
    "path",
    ["no_colon", "does_not_exist_pkg.engine:factory", "tests.helpers.fake_engine:nope"],
)
def test_loader_errors_point_at_auth_engine(path):
    """Test every loader failure names AUTH_ENGINE as the variable to check."""
    with pytest.raises(ConfigurationError) as exc_info:
        load_engine_factory(path)

    assert exc_info.value.variables == ["AUTH_ENGINE"]
    assert "Check: AUTH_ENGINE" in str(exc_info.value)
