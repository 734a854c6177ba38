"""Runtime configuration for batch builds."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from msdev_batch.batch.models import (
    DEFAULT_CONFIGURATION,
    DEFAULT_PLATFORM,
    BatchConfig,
    BatchPolicy,
    BuildDefaults,
)

_SECONDS_PER_MINUTE = 60


@dataclass(slots=True)
class Settings:
    """Batch defaults, overridable from the environment and the CLI."""

    tool_path: str = ""
    target: str = ""
    timeout_minutes: int = 5
    stop_on_error: bool = False
    terminate_on_timeout: bool = True
    platform: str = DEFAULT_PLATFORM
    configuration: str = DEFAULT_CONFIGURATION

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with the legacy tool's defaults."""

        return cls(
            tool_path=os.getenv("MSDEV_BATCH_TOOL_PATH", "").strip(),
            target=os.getenv("MSDEV_BATCH_TARGET", "").strip(),
            timeout_minutes=_env_int("MSDEV_BATCH_TIMEOUT_MINUTES", default=5),
            stop_on_error=_env_bool("MSDEV_BATCH_STOP_ON_ERROR", default=False),
            terminate_on_timeout=_env_bool("MSDEV_BATCH_TERMINATE_ON_TIMEOUT", default=True),
            platform=os.getenv("MSDEV_BATCH_PLATFORM", DEFAULT_PLATFORM).strip(),
            configuration=os.getenv("MSDEV_BATCH_CONFIGURATION", DEFAULT_CONFIGURATION).strip(),
        )

    def validate(self) -> None:
        """Raise configuration error if a batch could not run with these settings."""

        if self.timeout_minutes <= 0:
            raise ValueError("MSDEV_BATCH_TIMEOUT_MINUTES must be > 0.")
        if not self.platform:
            raise ValueError("MSDEV_BATCH_PLATFORM must not be empty.")
        if not self.configuration:
            raise ValueError("MSDEV_BATCH_CONFIGURATION must not be empty.")

    def to_batch_config(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        timeout_seconds: int | None = None,
    ) -> BatchConfig:
        """Freeze settings into a batch config, snapshotting the environment."""

        self.validate()
        return BatchConfig(
            tool_path=self.tool_path,
            defaults=BuildDefaults(
                platform=self.platform,
                configuration=self.configuration,
                action=self.target,
            ),
            timeout_seconds=timeout_seconds or self.timeout_minutes * _SECONDS_PER_MINUTE,
            policy=BatchPolicy.STOP_ON_ERROR if self.stop_on_error else BatchPolicy.RUN_ALL,
            terminate_on_timeout=self.terminate_on_timeout,
            environ=dict(os.environ if environ is None else environ),
        )


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
