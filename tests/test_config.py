from __future__ import annotations

import allure
import pytest

from msdev_batch.batch.locator import TOOL_DIR_ENV_VAR
from msdev_batch.batch.models import BatchPolicy
from msdev_batch.config import Settings

pytestmark = [
    allure.epic("Batch Build"),
    allure.feature("Configuration"),
]

_ENV_VARS = (
    "MSDEV_BATCH_TOOL_PATH",
    "MSDEV_BATCH_TARGET",
    "MSDEV_BATCH_TIMEOUT_MINUTES",
    "MSDEV_BATCH_STOP_ON_ERROR",
    "MSDEV_BATCH_TERMINATE_ON_TIMEOUT",
    "MSDEV_BATCH_PLATFORM",
    "MSDEV_BATCH_CONFIGURATION",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_from_env_uses_legacy_defaults() -> None:
    settings = Settings.from_env()

    assert settings == Settings()
    assert settings.timeout_minutes == 5
    assert settings.platform == "Win32"
    assert settings.configuration == "Debug"
    assert settings.stop_on_error is False
    assert settings.terminate_on_timeout is True


def test_from_env_reads_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MSDEV_BATCH_TOOL_PATH", r"C:\VS\msdev.exe")
    monkeypatch.setenv("MSDEV_BATCH_TARGET", "CLEAN")
    monkeypatch.setenv("MSDEV_BATCH_TIMEOUT_MINUTES", "12")
    monkeypatch.setenv("MSDEV_BATCH_STOP_ON_ERROR", "yes")
    monkeypatch.setenv("MSDEV_BATCH_TERMINATE_ON_TIMEOUT", "off")
    monkeypatch.setenv("MSDEV_BATCH_CONFIGURATION", "Release")

    settings = Settings.from_env()

    assert settings.tool_path == r"C:\VS\msdev.exe"
    assert settings.target == "CLEAN"
    assert settings.timeout_minutes == 12
    assert settings.stop_on_error is True
    assert settings.terminate_on_timeout is False
    assert settings.configuration == "Release"


def test_from_env_rejects_invalid_boolean(monkeypatch) -> None:
    monkeypatch.setenv("MSDEV_BATCH_STOP_ON_ERROR", "maybe")

    with pytest.raises(ValueError, match="Invalid boolean value for MSDEV_BATCH_STOP_ON_ERROR"):
        Settings.from_env()


def test_from_env_rejects_invalid_integer(monkeypatch) -> None:
    monkeypatch.setenv("MSDEV_BATCH_TIMEOUT_MINUTES", "five")

    with pytest.raises(ValueError, match="Invalid integer value"):
        Settings.from_env()


def test_validate_rejects_non_positive_timeout() -> None:
    with pytest.raises(ValueError, match="TIMEOUT_MINUTES"):
        Settings(timeout_minutes=0).validate()


def test_validate_rejects_blank_configuration() -> None:
    with pytest.raises(ValueError, match="CONFIGURATION"):
        Settings(configuration="").validate()


def test_to_batch_config_converts_minutes_and_policy() -> None:
    config = Settings(timeout_minutes=2, stop_on_error=True, target="REBUILD").to_batch_config(
        environ={TOOL_DIR_ENV_VAR: "/opt/devstudio"},
    )

    assert config.timeout_seconds == 120
    assert config.policy is BatchPolicy.STOP_ON_ERROR
    assert config.defaults.action == "REBUILD"
    assert config.environ == {TOOL_DIR_ENV_VAR: "/opt/devstudio"}


def test_to_batch_config_seconds_override_wins() -> None:
    config = Settings(timeout_minutes=5).to_batch_config(environ={}, timeout_seconds=7)

    assert config.timeout_seconds == 7


def test_to_batch_config_snapshots_process_environment(monkeypatch) -> None:
    monkeypatch.setenv(TOOL_DIR_ENV_VAR, "/snap")

    config = Settings().to_batch_config()
    monkeypatch.setenv(TOOL_DIR_ENV_VAR, "/changed")

    assert config.environ[TOOL_DIR_ENV_VAR] == "/snap"
