# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Settings loading and merging for cfgfs.

cfgfs settings describe how a configuration file is turned into a mount:
which file to read, where to mount it, what the root settings file is
called and how naming conflicts are handled.

Settings Layers:
    1. **Built-in defaults** (DEFAULT_SETTINGS)
       - Always present; a bare ``cfgfs mount`` works out of the box

    2. **Settings file** (YAML)
       - ``--settings PATH`` if given, else ``$CFGFS_SETTINGS``, else
         ``~/.config/cfgfs/settings.yaml`` when it exists
       - Overrides built-in defaults

    3. **Overrides** (usually from CLI flags)
       - Keys whose value is None are ignored
       - Override everything else

Merge Behavior:
    The loader performs deep merging with "last wins" semantics:

    - **Dicts**: Recursively merged (keys from overlay override base)
    - **Lists**: Completely replaced (NOT appended/extended)
    - **Scalars**: Overwritten (strings, numbers, booleans)

Path Resolution:
    Relative ``source`` and ``mountpoint`` values from a settings file are
    resolved against the directory of that file. ``~`` is expanded in
    every layer.

Error Handling:
    - ConfigError: Settings file missing (when named explicitly), YAML parse
        errors, non-mapping content, or invalid values
    - All errors are chained with "from err" for better debugging

Example:
    Basic usage:
        ```python
        from pathlib import Path
        from cfgfs.settings import load_settings

        settings = load_settings(Path("cfgfs.yaml"), overrides={"on_conflict": "error"})
        print(settings["source"])
        ```
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

from cfgfs.exceptions import ConfigError
from cfgfs.tree.builder import DEFAULT_ROOT_FILE, ON_CONFLICT_CHOICES

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_ENV_VAR",
    "find_settings_file",
    "load_settings",
]

SETTINGS_ENV_VAR = "CFGFS_SETTINGS"
USER_SETTINGS_PATH = Path("~/.config/cfgfs/settings.yaml")

DEFAULT_SETTINGS: dict[str, Any] = {
    "source": "~/.mednafen/mednafen-09x.cfg",
    "mountpoint": "./mnt",
    "root_file": DEFAULT_ROOT_FILE,
    "encoding": "utf-8",
    "on_conflict": "warn",
    "fuse": {
        "foreground": True,
        "allow_other": False,
        "nothreads": False,
    },
}

_PATH_KEYS = ("source", "mountpoint")
_FUSE_FLAGS = ("foreground", "allow_other", "nothreads")

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Loads a YAML file and returns the parsed Python object.

    Args:
        p: Path to the YAML file to load.

    Returns:
        The parsed Python object, or an empty dict for an empty file.

    Raises:
        ConfigError: When the file does not exist or is not valid YAML.
    """
    if not p.exists():
        raise ConfigError(f"settings file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    return {} if data is None else data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merges two dicts with "overlay wins" semantics.

    - dict + dict -> deep merge
    - anything else -> overlay replaces base

    Does not mutate inputs.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def _drop_unset(overrides: dict[str, Any]) -> dict[str, Any]:
    """Removes None values so unset CLI flags do not mask lower layers."""
    cleaned: dict[str, Any] = {}
    for k, v in overrides.items():
        if isinstance(v, dict):
            nested = _drop_unset(v)
            if nested:
                cleaned[k] = nested
        elif v is not None:
            cleaned[k] = v
    return cleaned


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_known_paths(layer: dict[str, Any], base_dir: Path | None) -> None:
    """Expands ``~`` and anchors relative paths of one layer in place.

    Args:
        layer: A single settings layer (not yet merged).
        base_dir: Directory relative paths are resolved against, or None to
            leave them relative to the working directory.
    """
    for key in _PATH_KEYS:
        raw = layer.get(key)
        if not isinstance(raw, (str, Path)) or not str(raw):
            continue
        p = Path(raw).expanduser()
        if base_dir is not None and not p.is_absolute():
            p = base_dir / p
        layer[key] = p


# -------------------------------
# Validation
# -------------------------------


def _validate(settings: dict[str, Any]) -> None:
    on_conflict = settings.get("on_conflict")
    if on_conflict not in ON_CONFLICT_CHOICES:
        raise ConfigError(
            f"on_conflict must be one of {', '.join(ON_CONFLICT_CHOICES)}, "
            f"got {on_conflict!r}"
        )

    root_file = settings.get("root_file")
    if not isinstance(root_file, str) or not root_file or "/" in root_file:
        raise ConfigError(f"root_file must be a plain file name, got {root_file!r}")

    encoding = settings.get("encoding")
    if not isinstance(encoding, str) or not encoding:
        raise ConfigError(f"encoding must be a codec name, got {encoding!r}")

    for key in _PATH_KEYS:
        value = settings.get(key)
        if not isinstance(value, Path):
            raise ConfigError(f"{key} must be a non-empty path, got {value!r}")

    fuse = settings.get("fuse")
    if not isinstance(fuse, dict):
        raise ConfigError("fuse settings must be a mapping")
    for key in _FUSE_FLAGS:
        flag = fuse.get(key)
        if not isinstance(flag, bool):
            raise ConfigError(f"fuse.{key} must be true or false, got {flag!r}")


# -------------------------------
# Public API
# -------------------------------


def find_settings_file(explicit: Path | None = None) -> Path | None:
    """Locates the settings file to use, if any.

    Priority: explicit path > $CFGFS_SETTINGS > ~/.config/cfgfs/settings.yaml
    (only when it exists).

    Args:
        explicit: Path given on the command line.

    Returns:
        The settings file path, or None when no settings file applies.
    """
    if explicit is not None:
        return explicit
    from_env = os.environ.get(SETTINGS_ENV_VAR)
    if from_env:
        return Path(from_env)
    user_path = USER_SETTINGS_PATH.expanduser()
    if user_path.exists():
        return user_path
    return None


def load_settings(
    settings_path: Path | None = None,
    *,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Loads and merges the effective settings.

    Performs the following operations:

    1. Start from DEFAULT_SETTINGS
    2. Locate the settings file (see find_settings_file)
    3. Load it, resolve its paths against its directory, merge it
    4. Merge overrides (None values ignored)
    5. Expand ``~`` in path settings and validate the result

    Args:
        settings_path: Explicit settings file. Must exist if given.
        overrides: Highest-priority values, typically from CLI flags.

    Returns:
        The merged settings dict. ``source`` and ``mountpoint`` are Path
        objects.

    Raises:
        ConfigError: On YAML parse errors, non-mapping content, a missing
            explicit settings file, or invalid values.
    """
    from cfgfs.logging import get_global_logger

    logger = get_global_logger()
    merged = copy.deepcopy(DEFAULT_SETTINGS)
    _resolve_known_paths(merged, None)

    settings_file = find_settings_file(settings_path)
    if settings_file is not None:
        settings_file = settings_file.expanduser().resolve()
        logger.verbose("SETTINGS", f"Loading: {settings_file}")
        layer = _load_yaml_file(settings_file)
        if not isinstance(layer, dict):
            raise ConfigError(
                f"top-level YAML must be a mapping (dict): {settings_file}"
            )
        _resolve_known_paths(layer, settings_file.parent)
        merged = _deep_merge_dicts(merged, layer)
    else:
        logger.verbose("SETTINGS", "No settings file found, using defaults")

    if overrides:
        layer = _drop_unset(overrides)
        _resolve_known_paths(layer, None)
        merged = _deep_merge_dicts(merged, layer)

    _validate(merged)

    for key, value in merged.items():
        logger.debug("SETTINGS", f"{key}: {value}")
    return merged
