"""Shared test fixtures for the Switchyard test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from switchyard.config.settings import Settings
from switchyard.tenants.models import ScenarioSummary, SharedTemplate
from switchyard.tenants.stores.inmemory import InMemoryTemplateCatalog, InMemoryTenantStore
from switchyard.trace.emitter import TraceEmitter
from switchyard.trace.stores.inmemory import InMemoryTraceSink
from switchyard.wiring.catalog import WiringCatalog, get_catalog
from tests.factories.tenants import TEMPLATE_ID, wired_tenant


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"SWITCHYARD_DEBUG": "true"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    from switchyard.api.dependencies import get_settings as get_api_settings
    from switchyard.config import get_settings

    get_settings.cache_clear()
    get_api_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_api_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_enforcement_state() -> Generator[None, None, None]:
    """Reset the process-wide enforcement mode and default trace emitter."""
    from switchyard.wiring.reader import set_default_emitter, set_process_enforcement_mode

    set_process_enforcement_mode(None)
    set_default_emitter(None)
    yield
    set_process_enforcement_mode(None)
    set_default_emitter(None)


@pytest.fixture
def settings() -> Settings:
    """Settings built from model defaults only, in a development environment."""
    return Settings(environment="development")


@pytest.fixture
def catalog() -> WiringCatalog:
    return get_catalog()


@pytest.fixture
def trace_sink() -> InMemoryTraceSink:
    return InMemoryTraceSink()


@pytest.fixture
def emitter(trace_sink: InMemoryTraceSink) -> TraceEmitter:
    return TraceEmitter(trace_sink)


@pytest.fixture
def shared_template() -> SharedTemplate:
    return SharedTemplate(
        id=TEMPLATE_ID,
        name="HVAC Complete",
        category_key="hvac",
        scenarios=[
            ScenarioSummary(id="scn-ac-not-cooling", name="AC not cooling", scenario_type="FAQ"),
            ScenarioSummary(id="scn-book-tuneup", name="Book a tune-up", scenario_type="BOOKING"),
            ScenarioSummary(id="scn-gas-smell", name="Gas smell", scenario_type="EMERGENCY"),
        ],
    )


@pytest.fixture
def template_catalog(shared_template: SharedTemplate) -> InMemoryTemplateCatalog:
    return InMemoryTemplateCatalog([shared_template])


@pytest.fixture
async def tenant_store() -> InMemoryTenantStore:
    store = InMemoryTenantStore()
    await store.save(wired_tenant())
    return store
