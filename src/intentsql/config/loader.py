"""Configuration loading with pydantic-settings.

Sources, highest precedence first:

1. Keyword overrides passed to ``load_config``
2. Environment variables (``INTENTSQL__SECTION__KEY``)
3. Repo YAML (``.intentsql/config.yaml``)
4. Global YAML (``~/.config/intentsql/config.yaml``)
5. Model defaults

The two YAML files are deep-merged into a single layer before settings
validation, so a repo file may override one key of a section and inherit
the rest from the global file.
"""

from contextvars import ContextVar
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from intentsql.config.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME
from intentsql.config.models import (
    CacheConfig,
    IntentSQLConfig,
    LoggingConfig,
    PathsConfig,
    RecognitionConfig,
)
from intentsql.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/intentsql/config.yaml").expanduser()

# Merged YAML for the load_config call in progress
_yaml_layer: ContextVar[dict[str, Any] | None] = ContextVar("yaml_layer", default=None)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Top-level mapping of a YAML file; empty when the file does not exist.

    Raises:
        ConfigError: Invalid YAML, or a top level that is not a mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """``override`` on top of ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class _YamlLayer(PydanticBaseSettingsSource):
    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = (_yaml_layer.get() or {}).get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return dict(_yaml_layer.get() or {})


class IntentSQLSettings(BaseSettings):
    """Root settings. Env vars: INTENTSQL__PATHS__SCHEMA, INTENTSQL__CACHE__ENABLED, ..."""

    model_config = SettingsConfigDict(
        env_prefix="INTENTSQL__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    recognition: RecognitionConfig = Field(default_factory=RecognitionConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # First source wins
        return (init_settings, env_settings, _YamlLayer(settings_cls))


def config_path(repo_root: Path) -> Path:
    """Location of the repo-level config file."""
    return repo_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(repo_root: Path | None = None, **overrides: Any) -> IntentSQLConfig:
    """Resolve configuration for ``repo_root`` (default: the working directory).

    Raises:
        ConfigError: A YAML file does not parse, or a value fails validation.
    """
    repo_root = repo_root or Path.cwd()
    layer = _deep_merge(_load_yaml(GLOBAL_CONFIG_PATH), _load_yaml(config_path(repo_root)))

    token = _yaml_layer.set(layer)
    try:
        settings = IntentSQLSettings(**overrides)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    finally:
        _yaml_layer.reset(token)

    return IntentSQLConfig.model_validate(settings.model_dump(by_alias=True))


def resolve_path(repo_root: Path, value: str) -> Path:
    """Resolve a configured path against the repo root (absolute paths pass through)."""
    path = Path(value).expanduser()
    return path if path.is_absolute() else repo_root / path
