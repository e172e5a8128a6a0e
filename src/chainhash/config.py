"""Typed configuration loader for chainhash containers."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import ConfigError
from .core.policy import ResizePolicy

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _coerce_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in _TRUTHY:
            return True
        if normalized in _FALSY:
            return False
    raise ConfigError(f"{name} must be boolean")


@dataclass
class LoggingPolicy:
    level: str = "WARNING"
    use_json: bool = False
    log_file: str | None = None

    def validate(self) -> None:
        if not isinstance(logging.getLevelName(self.level.upper()), int):
            raise ConfigError(f"logging.level {self.level!r} is not a known level")


@dataclass
class AppConfig:
    resize: ResizePolicy = field(default_factory=ResizePolicy)
    logging: LoggingPolicy = field(default_factory=LoggingPolicy)

    @classmethod
    def load(cls, path: Path | None) -> AppConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise ConfigError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        resize_data = data.get("resize", {})
        if not isinstance(resize_data, dict):
            raise ConfigError("[resize] section must be a table")
        if "on_resize" in resize_data:
            raise ConfigError("resize.on_resize cannot be set from configuration")
        try:
            resize = ResizePolicy(**resize_data)
        except TypeError as exc:
            raise ConfigError(f"Unknown key in [resize]: {exc}") from exc

        logging_data = data.get("logging", {})
        if not isinstance(logging_data, dict):
            raise ConfigError("[logging] section must be a table")
        logging_kwargs: dict[str, Any] = {}
        if "level" in logging_data:
            logging_kwargs["level"] = str(logging_data["level"])
        if "use_json" in logging_data:
            logging_kwargs["use_json"] = _coerce_bool("logging.use_json", logging_data["use_json"])
        if "log_file" in logging_data:
            raw_file = logging_data["log_file"]
            logging_kwargs["log_file"] = str(raw_file) if raw_file else None
        unknown = set(logging_data) - {"level", "use_json", "log_file"}
        if unknown:
            raise ConfigError(f"Unknown key in [logging]: {', '.join(sorted(unknown))}")
        return cls(resize=resize, logging=LoggingPolicy(**logging_kwargs))

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        resize_mapping: dict[str, tuple[str, Callable[[str], Any]]] = {
            "CHAINHASH_START_CAPACITY": ("start_capacity", int),
            "CHAINHASH_LOWER_BOUNDARY": ("lower_boundary", float),
            "CHAINHASH_UPPER_BOUNDARY": ("upper_boundary", float),
        }
        for key, (attr, caster) in resize_mapping.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = caster(raw_value)
            except ValueError as exc:
                raise ConfigError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(self.resize, attr, value)

        raw_level = env.get("CHAINHASH_LOG_LEVEL")
        if raw_level is not None:
            self.logging.level = raw_level.strip()
        raw_json = env.get("CHAINHASH_LOG_JSON")
        if raw_json is not None:
            try:
                self.logging.use_json = _coerce_bool("CHAINHASH_LOG_JSON", raw_json)
            except ConfigError as exc:
                raise ConfigError(f"Invalid env override CHAINHASH_LOG_JSON={raw_json!r}") from exc
        raw_file = env.get("CHAINHASH_LOG_FILE")
        if raw_file is not None:
            self.logging.log_file = raw_file or None

    def validate(self) -> None:
        self.resize.validate()
        self.logging.validate()


DEFAULT_CONFIG = AppConfig()


def load_app_config(path: str | None) -> AppConfig:
    config_path = Path(path) if path else None
    return AppConfig.load(config_path)


__all__ = ["AppConfig", "DEFAULT_CONFIG", "LoggingPolicy", "load_app_config"]
