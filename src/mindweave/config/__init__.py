"""
mindweave.config - Configuration loading and defaults

Configuration lives in a ``.mindweave.toml`` file, found by walking up
from the working directory. Values are merged over DEFAULT_CONFIG and
can be overridden per key with ``MINDWEAVE_<SECTION>_<KEY>`` environment
variables.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from mindweave.config.defaults import DEFAULT_CONFIG

CONFIG_FILENAME = ".mindweave.toml"
ENV_PREFIX = "MINDWEAVE_"


class ConfigError(Exception):
    """A configuration file could not be read or parsed."""


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest configuration file.

    Args:
        start: Directory to start from (default: current directory).

    Returns:
        Path to ``.mindweave.toml``, or None if no ancestor has one.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def parse_toml_document(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python containers.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomlkit.parse(content).unwrap()
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` onto a copy of ``base``."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment value into a typed Python value.

    JSON lists and objects are decoded, ``true``/``false`` become bools and
    integer strings become ints. Anything else (including malformed JSON)
    is returned unchanged.
    """
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return int(value)
    except ValueError:
        return value


def apply_env_overrides(
    config: dict[str, Any], environ: dict[str, str] | None = None
) -> dict[str, Any]:
    """Apply ``MINDWEAVE_<SECTION>_<KEY>`` overrides to a config dict.

    The section is the first underscore-separated word after the prefix;
    the rest, lowercased, is the key (``MINDWEAVE_TUNING_READER_ROLE`` sets
    ``tuning.reader_role``). Missing sections are created.
    """
    env = os.environ if environ is None else environ
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not section or not key:
            continue
        config.setdefault(section, {})[key] = _try_parse_env_value(raw)
    return config


def load_config(path: Path) -> dict[str, Any]:
    """Load a configuration file merged over the defaults.

    Environment overrides are applied last.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    merged = merge_configs(DEFAULT_CONFIG, parse_toml_document(content))
    return apply_env_overrides(merged)


def get_config(start: Path | None = None, config_path: Path | None = None) -> dict[str, Any]:
    """Resolve the effective configuration.

    Args:
        start: Directory to search from when no explicit path is given.
        config_path: Explicit configuration file.

    Returns:
        The merged configuration; defaults plus env overrides if no file
        is found.
    """
    path = config_path or find_config_file(start)
    if path is None:
        return apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))
    return load_config(path)


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_CONFIG",
    "find_config_file",
    "parse_toml_document",
    "merge_configs",
    "apply_env_overrides",
    "load_config",
    "get_config",
]
