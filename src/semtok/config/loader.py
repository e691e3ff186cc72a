"""Configuration loading with pydantic-settings.

Layers, lowest to highest precedence:

1. Built-in defaults (``semtok.config.models``)
2. Global YAML: ``~/.config/semtok/config.yaml``
3. Repo YAML: ``<repo>/.semtok/config.yaml``, or an explicit ``--config`` file
4. Environment variables: ``SEMTOK__SECTION__KEY``
5. Keyword arguments to :func:`load_config`
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from semtok.config.models import (
    GrammarConfig,
    LegendConfig,
    LoggingConfig,
    SemtokConfig,
    TokensConfig,
)
from semtok.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/semtok/config.yaml").expanduser()
REPO_CONFIG_NAME = Path(".semtok") / "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML layer. A missing file is an empty layer."""
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _settings_for(yaml_layers: dict[str, Any]) -> type[BaseSettings]:
    """Settings class whose lowest non-default layer is ``yaml_layers``.

    Built per call so concurrent loads never share YAML state.
    """

    class SemtokSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="SEMTOK__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        legend: LegendConfig = LegendConfig()
        grammar: GrammarConfig = GrammarConfig()
        tokens: TokensConfig = TokensConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # First wins: kwargs, then env, then YAML
            yaml_settings = InitSettingsSource(settings_cls, init_kwargs=yaml_layers)
            return (init_settings, env_settings, yaml_settings)

    return SemtokSettings


def load_config(
    repo_root: Path | None = None,
    config_file: Path | None = None,
    **kwargs: Any,
) -> SemtokConfig:
    """Resolve the full configuration.

    Args:
        repo_root: Directory holding ``.semtok/config.yaml``. Defaults to the
            current working directory.
        config_file: YAML file used in place of the repo config. Must exist.
        **kwargs: Section overrides, e.g. ``tokens={"strict_types": True}``.

    Raises:
        ConfigError: Missing explicit file, unreadable YAML, or a value that
            fails validation (``details["field"]`` is the dotted field path).
    """
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError.file_not_found(str(config_file))
        local_layer = _load_yaml(config_file)
    else:
        local_layer = _load_yaml((repo_root or Path.cwd()) / REPO_CONFIG_NAME)

    yaml_layers = _deep_merge(_load_yaml(GLOBAL_CONFIG_PATH), local_layer)

    try:
        settings = _settings_for(yaml_layers)(**kwargs)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(field, first.get("input"), first["msg"]) from e

    return SemtokConfig(
        logging=settings.logging,  # type: ignore[attr-defined]
        legend=settings.legend,  # type: ignore[attr-defined]
        grammar=settings.grammar,  # type: ignore[attr-defined]
        tokens=settings.tokens,  # type: ignore[attr-defined]
    )
