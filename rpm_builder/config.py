"""
config.py

Responsibility: load an optional YAML defaults file into a deterministic mapping.

The file is a single top-level mapping keyed by the CLI option names with
underscores, e.g.:

    version: 2.1.0
    license: Apache-2.0
    requires:
      - bash >= 4
    exec_file:
      - build/tool:/usr/bin/tool

Values given on the command line win for single-valued options; repeatable
options are concatenated (config entries first).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from rpm_builder.errors import ConfigError

SCALAR_KEYS = frozenset(
    {
        "out",
        "epoch",
        "version",
        "release",
        "arch",
        "license",
        "summary",
        "compression",
        "pre_install_script",
        "post_install_script",
        "pre_uninstall_script",
        "post_uninstall_script",
        "sign_with_pgp_asc",
    }
)

LIST_KEYS = frozenset(
    {
        "file",
        "exec_file",
        "doc_file",
        "config_file",
        "dir",
        "config_dir",
        "doc_dir",
        "changelog",
        "requires",
        "provides",
        "obsoletes",
        "conflicts",
        "suggests",
        "recommends",
        "enhances",
        "supplements",
    }
)


def load_config(config_path: str | Path) -> dict[str, Any]:
    """
    Parse a YAML defaults file.

    Values are read verbatim as strings. Returns a mapping with string
    scalars (int for `epoch`) and tuples of strings for repeatable options.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        # BaseLoader keeps every scalar a string, so `version: 1.10` stays "1.10".
        data = yaml.load(path.read_text(encoding="utf-8"), Loader=yaml.BaseLoader) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must be a mapping/object at the top level.")

    out: dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")
        if key in SCALAR_KEYS:
            out[key] = _scalar(path, key, value)
        elif key in LIST_KEYS:
            out[key] = _string_list(path, key, value)
        else:
            raise ConfigError(f"Unknown key `{raw_key}` in config file {path}")

    # Ensure deterministic ordering at the boundary.
    return dict(sorted(out.items()))


def _scalar(path: Path, key: str, value: Any) -> Any:
    if isinstance(value, (dict, list)):
        raise ConfigError(f"`{key}` must be a single value in config file {path}")
    if key == "epoch":
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"`epoch` must be an integer in config file {path}") from e
    return value


def _string_list(path: Path, key: str, value: Any) -> tuple[str, ...]:
    if value == "":
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"`{key}` must be a list of strings in config file {path}")
    return tuple(value)
