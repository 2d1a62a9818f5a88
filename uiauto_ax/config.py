# uiauto_ax/config.py
"""
@file config.py
@brief Centralized timeout and retry configuration for provider operations.
"""

from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Generator, Optional

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError
from .timings import TIMEOUT_FIELDS, build_preset_values, list_presets


def _setting_schema(retried: bool) -> Dict[str, Any]:
    # A retried operation uses its interval as the retry delay, which must be positive.
    interval: Dict[str, Any] = {"type": "number", "maximum": 10}
    interval["exclusiveMinimum" if retried else "minimum"] = 0
    return {
        "type": "object",
        "properties": {
            "timeout": {"type": "number", "exclusiveMinimum": 0, "maximum": 300},
            "interval": interval,
            "retry_count": {"type": ["integer", "null"], "minimum": 1, "maximum": 10},
        },
        "additionalProperties": False,
    }


RETRIED_FIELDS = frozenset(name for name, spec in TIMEOUT_FIELDS.items() if spec.get("retry_count"))

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "preset": {"type": "string", "enum": sorted(list_presets().keys())},
        "timeouts": {
            "type": "object",
            "properties": {
                name: _setting_schema(name in RETRIED_FIELDS) for name in sorted(TIMEOUT_FIELDS)
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


@dataclass
class TimeoutSettings:
    """Timeout settings for one operation type."""
    timeout: float
    interval: float
    retry_count: Optional[int] = None

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        retry_count: Optional[int] = None,
    ) -> TimeoutSettings:
        """Create a new settings instance with overrides applied."""
        return TimeoutSettings(
            timeout=timeout if timeout is not None else self.timeout,
            interval=interval if interval is not None else self.interval,
            retry_count=retry_count if retry_count is not None else self.retry_count,
        )


class TimeConfig:
    """
    Timeout configuration for the engine.

    Precedence is applied per run via build/install APIs:
      base defaults -> preset -> file/overrides

    Components receive a config explicitly where possible; ``current()``
    is the fallback when none was injected.
    """

    _default_instance: Optional[TimeConfig] = None
    _local = threading.local()
    _lock = threading.Lock()

    def __init__(self, preset: Optional[str] = None):
        self.preset = (preset or "default").lower()
        self._apply_values(build_preset_values(self.preset))

    def _apply_values(self, values: Dict[str, Any]) -> None:
        for name in TIMEOUT_FIELDS:
            val = values.get(name)
            if isinstance(val, TimeoutSettings):
                setting = deepcopy(val)
            elif isinstance(val, dict):
                setting = TimeoutSettings(
                    timeout=float(val["timeout"]),
                    interval=float(val["interval"]),
                    retry_count=val.get("retry_count"),
                )
            else:
                raise ValueError(f"Invalid timeout setting for {name}: {val}")
            setattr(self, name, setting)

    def get(self, name: str) -> TimeoutSettings:
        if name not in TIMEOUT_FIELDS:
            raise ValueError(f"Unknown TimeConfig field: {name}")
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in TIMEOUT_FIELDS:
            setting: TimeoutSettings = getattr(self, name)
            data[name] = {
                "timeout": setting.timeout,
                "interval": setting.interval,
                "retry_count": setting.retry_count,
            }
        return data

    def clone(self) -> TimeConfig:
        """Return a deep clone of this config."""
        clone = TimeConfig(self.preset)
        clone._apply_values(self.to_dict())
        return clone

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> TimeConfig:
        """Build a run-scope config snapshot."""
        cfg = cls(preset)
        if overrides:
            _apply_overrides(cfg, overrides)
        return cfg

    @classmethod
    def from_yaml(cls, path: str) -> TimeConfig:
        """
        Load a config from a YAML file.

        The file may name a ``preset`` and a ``timeouts`` mapping of
        per-operation overrides.

        @throws ConfigError if the file is missing or invalid
        """
        path = os.path.abspath(path)
        if not os.path.exists(path):
            raise ConfigError(f"Timing config not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("Timing config must be a mapping at root.")

        errors = sorted(Draft202012Validator(CONFIG_SCHEMA).iter_errors(data), key=lambda e: list(e.path))
        if errors:
            details = "; ".join(
                f"{'/'.join(str(p) for p in err.path) or '<root>'}: {err.message}" for err in errors
            )
            raise ConfigError(f"Invalid timing config {path}: {details}")

        return cls.build_from(preset=data.get("preset", "default"), overrides=data.get("timeouts"))

    @classmethod
    def default(cls) -> TimeConfig:
        """Get the process default configuration (singleton)."""
        if cls._default_instance is None:
            with cls._lock:
                if cls._default_instance is None:
                    cls._default_instance = cls()
        return cls._default_instance

    @classmethod
    def install_run_config(cls, config: TimeConfig) -> None:
        """Install per-thread run configuration snapshot."""
        cls._local.run_config = config

    @classmethod
    def clear_run_config(cls) -> None:
        """Clear per-thread run configuration snapshot."""
        cls._local.run_config = None

    @classmethod
    def current(cls) -> TimeConfig:
        """Get the current effective configuration."""
        override = getattr(cls._local, "override", None)
        if override is not None:
            return override

        run_cfg = getattr(cls._local, "run_config", None)
        if run_cfg is not None:
            return run_cfg

        return cls.default()

    @classmethod
    @contextmanager
    def override(cls, **kwargs: Any) -> Generator[TimeConfig, None, None]:
        """Context manager for temporary configuration overrides."""
        previous = getattr(cls._local, "override", None)
        new_config = cls.current().clone()
        _apply_overrides(new_config, kwargs)

        cls._local.override = new_config
        try:
            yield new_config
        finally:
            cls._local.override = previous

    @classmethod
    def reset_to_defaults(cls) -> None:
        """Reset default and clear all thread-local config state."""
        with cls._lock:
            cls._default_instance = cls()
        cls._local.override = None
        cls._local.run_config = None


def _apply_overrides(config: TimeConfig, overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key not in TIMEOUT_FIELDS:
            raise ValueError(f"Unknown TimeConfig field: {key}")
        base_setting: TimeoutSettings = getattr(config, key)
        if isinstance(value, TimeoutSettings):
            setattr(config, key, deepcopy(value))
        elif isinstance(value, dict):
            setattr(config, key, base_setting.with_overrides(
                timeout=value.get("timeout"),
                interval=value.get("interval"),
                retry_count=value.get("retry_count"),
            ))
        elif isinstance(value, (int, float)):
            setattr(config, key, base_setting.with_overrides(timeout=float(value)))
        else:
            raise ValueError(f"Invalid override for {key}: {value}")
        if key in RETRIED_FIELDS and getattr(config, key).interval <= 0:
            raise ValueError(f"Retry interval for {key} must be greater than 0")


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()
