"""
config.py

Responsibility: Load and persist `kickstart.config.json` as a deterministic, typed model.

This implementation intentionally stays conservative:
- The file is parsed with `yaml.safe_load` (a JSON document is valid YAML),
  so hand-edited files with comments or trailing structure still load.
- It is always written back as plain, sorted JSON.

Everything else (layout patching, installers, summary) should treat the parsed
`ProjectConfig` as the single source of truth about the target project.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE = "kickstart.config.json"

PACKAGE_MANAGERS = ("npm", "yarn", "pnpm", "bun")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ProjectConfig:
    """Project configuration shared by every setup step."""

    has_src: bool = False
    alias: str = "@"
    preferred_package_manager: str = "npm"
    packages: tuple[str, ...] = ()
    orm: str | None = None
    driver: str | None = None
    provider: str | None = None
    auth: str | None = None
    component_lib: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


# Python attribute -> key in the JSON file.
_KEYS = {
    "has_src": "hasSrc",
    "alias": "alias",
    "preferred_package_manager": "preferredPackageManager",
    "packages": "packages",
    "orm": "orm",
    "driver": "driver",
    "provider": "provider",
    "auth": "auth",
    "component_lib": "componentLib",
}


def config_path(root: str | Path) -> Path:
    return Path(root) / CONFIG_FILE


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _from_mapping(data: dict[str, Any]) -> ProjectConfig:
    alias = str(data.get("alias") or "@").strip().rstrip("/") or "@"

    pm = str(data.get("preferredPackageManager") or "npm").strip()
    if pm not in PACKAGE_MANAGERS:
        raise ConfigError(
            f"`preferredPackageManager` must be one of {', '.join(PACKAGE_MANAGERS)} (got {pm!r})."
        )

    packages_raw = data.get("packages") or []
    if not isinstance(packages_raw, list):
        raise ConfigError("`packages` must be a list when provided.")

    known = set(_KEYS.values())
    extra = {k: v for k, v in sorted(data.items(), key=lambda kv: str(kv[0])) if k not in known}

    return ProjectConfig(
        has_src=bool(data.get("hasSrc", False)),
        alias=alias,
        preferred_package_manager=pm,
        packages=tuple(str(p) for p in packages_raw),
        orm=_optional_str(data, "orm"),
        driver=_optional_str(data, "driver"),
        provider=_optional_str(data, "provider"),
        auth=_optional_str(data, "auth"),
        component_lib=_optional_str(data, "componentLib"),
        extra=extra,
    )


def _to_mapping(config: ProjectConfig) -> dict[str, Any]:
    out: dict[str, Any] = dict(config.extra)
    for attr, key in _KEYS.items():
        value = getattr(config, attr)
        if isinstance(value, tuple):
            value = list(value)
        if value is None:
            continue
        out[key] = value
    return dict(sorted(out.items()))


def read_config(root: str | Path) -> ProjectConfig:
    """
    Parse `kickstart.config.json` under `root` into a `ProjectConfig`.

    Raises ConfigError when the file is missing or malformed.
    """
    path = config_path(root)
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path} (run `kickstart init` first)")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid JSON/YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config file must be a mapping/object at the top level.")

    logger.debug("Loaded config from %s", path)
    return _from_mapping(data)


def write_config(root: str | Path, config: ProjectConfig) -> Path:
    path = config_path(root)
    text = json.dumps(_to_mapping(config), indent=2) + "\n"
    path.write_text(text, encoding="utf-8", newline="\n")
    logger.debug("Wrote config to %s", path)
    return path


def update_config(root: str | Path, **changes: Any) -> ProjectConfig:
    """
    Read, update and persist the config. Returns the updated config.
    """
    config = dataclasses.replace(read_config(root), **changes)
    write_config(root, config)
    return config
