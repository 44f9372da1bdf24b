"""Layered loading of peelfs settings.

Layers apply in order, each overriding the previous one: model defaults, the
YAML file, `PEELFS__SECTION__KEY` environment variables, then `KEY=VALUE`
overrides given on the command line.
"""

from __future__ import annotations

import os
import textwrap
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import PeelConfig

DEFAULT_CONFIG_PATH = Path("~/.peelfs/config.yaml")
ENV_PREFIX = "PEELFS__"

_FILE_HEADER = textwrap.dedent(
    """\
    # peelfs configuration file
    # Values here can be overridden by PEELFS__SECTION__KEY variables or `peelfs -s KEY=VALUE`.
    """
)


def parse_override(text: str) -> tuple[str, Any]:
    """Split a `section.key=value` override, parsing the value as YAML.

    Raises:
        ConfigError: If `text` has no `=` or an empty key.
    """
    key, sep, raw = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ConfigError(f"Override '{text}' must look like section.key=value.")
    return key, _parse_scalar(raw.strip())


class ConfigLoader:
    """Resolve a `PeelConfig` from file, environment, and explicit overrides."""

    def __init__(
        self,
        path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._path = (path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def path(self) -> Path:
        return self._path

    def load(
        self,
        overrides: Mapping[str, Any] | None = None,
        *,
        include_env: bool = True,
    ) -> PeelConfig:
        """Return the effective configuration.

        Args:
            overrides: Dotted keys (`unpacking.chunk_size`) taking precedence
                over every other layer.
            include_env: Whether `PEELFS__` environment variables are applied.

        Raises:
            ConfigError: If the file is unreadable or a value fails validation.
        """
        layers: list[Mapping[str, Any]] = [self._file_layer()]
        if include_env:
            layers.append(self._env_layer())
        if overrides:
            layers.append(overrides)

        data: dict[str, Any] = {}
        for layer in layers:
            for dotted, value in _leaves(layer):
                _set_dotted(data, dotted, value)

        try:
            return PeelConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration values: {exc}") from exc

    def write_defaults(self) -> bool:
        """Create the configuration file with default values.

        Returns:
            bool: False when a file already exists and was left alone.
        """
        if self._path.exists():
            return False
        self._path.parent.mkdir(parents=True, exist_ok=True)
        body = yaml.safe_dump(PeelConfig().model_dump(mode="json"), sort_keys=False)
        self._path.write_text(_FILE_HEADER + body, encoding="utf-8")
        return True

    def _file_layer(self) -> Mapping[str, Any]:
        if not self._path.exists():
            return {}
        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{self._path} must contain a mapping at the top level.")
        return raw

    def _env_layer(self) -> dict[str, Any]:
        return {
            name[len(ENV_PREFIX) :].lower().replace("__", "."): _parse_scalar(value)
            for name, value in self._env.items()
            if name.startswith(ENV_PREFIX) and len(name) > len(ENV_PREFIX)
        }


def _parse_scalar(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _leaves(layer: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield `(dotted_key, value)` pairs; empty mappings count as leaves."""
    for key, value in layer.items():
        if not isinstance(key, str):
            raise ConfigError(f"Configuration keys must be strings, got {key!r}.")
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping) and value:
            yield from _leaves(value, dotted + ".")
        else:
            yield dotted, value


def _set_dotted(target: dict[str, Any], dotted: str, value: Any) -> None:
    *sections, leaf = dotted.split(".")
    node = target
    for section in sections:
        child = node.setdefault(section, {})
        if not isinstance(child, dict):
            raise ConfigError(f"'{section}' in '{dotted}' is a value, not a section.")
        node = child
    node[leaf] = value


__all__ = ["ConfigLoader", "DEFAULT_CONFIG_PATH", "ENV_PREFIX", "parse_override"]
