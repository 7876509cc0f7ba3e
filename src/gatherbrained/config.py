"""Configuration loading for gatherbrained.

Two sources:
1. The ``EDITOR`` environment variable - the only source of the editor command
2. An optional settings file (.toml or .json) for the interactive shell
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

# Python 3.11+ has tomllib in stdlib; fall back to tomli for older versions
try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # Python <3.11
    except ImportError:  # pragma: no cover
        tomllib = None

logger = logging.getLogger(__name__)

EDITOR_VARIABLE = "EDITOR"

CONFIG_CANDIDATES = (
    "gatherbrained.toml",
    "gatherbrained.json",
    ".gatherbrained.toml",
    ".gatherbrained.json",
)


@dataclass
class GatherConfig:
    """Settings passed explicitly into the store and the shell."""

    # Editor command, e.g. "vim" or "code --wait"; None when EDITOR is unset
    editor: Optional[str] = None

    # Interactive shell
    prompt: str = "gatherbrained> "
    history_size: int = 1_000_000
    vi_mode: bool = True
    history_ignore_dups: bool = True
    history_ignore_space: bool = True


def config_from_environment(environ: Optional[Mapping[str, str]] = None) -> GatherConfig:
    """Build a config whose editor comes from the process environment."""
    if environ is None:
        environ = os.environ
    editor = environ.get(EDITOR_VARIABLE) or None
    return GatherConfig(editor=editor)


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    if tomllib is None:
        raise ImportError("tomli required for TOML config: pip install tomli")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def dict_to_config(data: dict[str, Any], base: Optional[GatherConfig] = None) -> GatherConfig:
    """Apply the ``[shell]`` table of a settings dict on top of base."""
    config = base if base is not None else GatherConfig()

    shell = data.get("shell", {})
    if not isinstance(shell, dict):
        raise ValueError("[shell] must be a table")

    updates: dict[str, Any] = {}
    if "prompt" in shell:
        updates["prompt"] = str(shell["prompt"])
    if "history_size" in shell:
        updates["history_size"] = int(shell["history_size"])
    for flag in ("vi_mode", "history_ignore_dups", "history_ignore_space"):
        if flag in shell:
            updates[flag] = bool(shell[flag])

    if "editor" in data or "editor" in shell:
        logger.warning("Ignoring 'editor' in settings file; set $%s instead", EDITOR_VARIABLE)

    return replace(config, **updates)


def find_config_file(*directories: Path) -> Optional[Path]:
    """Find a settings file in the given directories, first match wins.

    Search order within each directory:
    1. gatherbrained.toml
    2. gatherbrained.json
    3. .gatherbrained.toml
    4. .gatherbrained.json
    """
    for directory in directories:
        for name in CONFIG_CANDIDATES:
            path = directory / name
            if path.exists():
                return path

    return None


def load_config(
    gatherbrained_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GatherConfig:
    """Load configuration.

    Args:
        gatherbrained_path: The gatherbrained file; its directory is searched
            for a settings file before the current directory
        config_path: Optional explicit path to a settings file
        environ: Environment mapping (default: os.environ)

    Returns:
        GatherConfig instance
    """
    config = config_from_environment(environ)

    if config_path is None:
        directories = []
        if gatherbrained_path is not None:
            directories.append(Path(gatherbrained_path).resolve().parent)
        directories.append(Path.cwd())
        config_path = find_config_file(*directories)

    if config_path is None:
        # No settings file - use defaults
        return config

    logger.debug("Loading settings from %s", config_path)
    suffix = config_path.suffix.lower()

    if suffix == ".toml":
        return dict_to_config(load_toml_config(config_path), config)

    elif suffix == ".json":
        return dict_to_config(load_json_config(config_path), config)

    else:
        raise ValueError(f"Unsupported config file type: {suffix}")
