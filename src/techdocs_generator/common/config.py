"""Runtime settings loaded from YAML and environment variables."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from techdocs_generator.common.errors import ConfigError
from techdocs_generator.common.schema import CustomizationParams, TemplateId, Tone

LOGGER = logging.getLogger("techdocs.config")

DEFAULT_CONFIG_PATH = "configs/techdocs.yaml"

# Environment variable -> settings field. Earlier names win.
_ENV_OVERRIDES: list[tuple[str, str]] = [
    ("GEMINI_API_KEY", "api_key"),
    ("API_KEY", "api_key"),
    ("GEMINI_MODEL", "model"),
    ("GEMINI_BASE_URL", "base_url"),
    ("GEMINI_TIMEOUT", "timeout"),
    ("LOG_LEVEL", "log_level"),
    ("TECHDOCS_HOST", "host"),
    ("TECHDOCS_PORT", "port"),
]


@dataclass
class Settings:
    api_key: str | None = None
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float | None = None
    log_level: str = "INFO"
    default_template: str = TemplateId.API_ENDPOINT.value
    default_tone: str = Tone.FORMAL.value
    default_language: str = "JavaScript"
    default_max_length: int = 250
    host: str = "127.0.0.1"
    port: int = 8000

    def default_params(self) -> CustomizationParams:
        try:
            return CustomizationParams(
                tone=Tone(self.default_tone),
                language=self.default_language,
                max_length=self.default_max_length,
            )
        except ValueError as e:
            raise ConfigError(f"invalid default parameters: {e}") from e


def load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    return data


def _coerce(name: str, value: Any) -> Any:
    if name == "timeout":
        if value in (None, "", "none", "None"):
            return None
        return float(value)
    if name in ("port", "default_max_length"):
        return int(value)
    return None if value is None else str(value)


def load_settings(path: str | None = None) -> Settings:
    """
    Build settings from an optional YAML file, then environment overrides.

    Args:
        path: Config file. Falls back to $TECHDOCS_CONFIG, then
            configs/techdocs.yaml when that file exists.

    Raises:
        ConfigError: On unknown keys or values that fail conversion.
    """
    cfg_path = path or os.getenv("TECHDOCS_CONFIG")
    if cfg_path is None and Path(DEFAULT_CONFIG_PATH).exists():
        cfg_path = DEFAULT_CONFIG_PATH

    raw: dict[str, Any] = {}
    if cfg_path:
        raw = load_yaml(cfg_path)
        LOGGER.debug("Loaded config from %s", cfg_path)

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    seen: set[str] = set()
    for env_name, field_name in _ENV_OVERRIDES:
        value = os.getenv(env_name)
        if value and field_name not in seen:
            raw[field_name] = value
            seen.add(field_name)

    try:
        values = {k: _coerce(k, v) for k, v in raw.items()}
    except ValueError as e:
        raise ConfigError(f"invalid config value: {e}") from e

    settings = Settings(**values)
    if settings.default_template not in {t.value for t in TemplateId}:
        raise ConfigError(f"unknown default_template: {settings.default_template!r}")
    settings.default_params()
    return settings
