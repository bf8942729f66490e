"""Configuration loading for hdrgen (.hdrgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .errors import GenerationError
from .postproc.replace import DEFAULT_REPLACEMENTS, Replacement

CONFIG_FILENAME = ".hdrgen.yml"

DEFAULT_BANNER = r"""//
// Copyright (c) 2022 ZettaScale Technology
//
// This program and the accompanying materials are made available under the
// terms of the Eclipse Public License 2.0 which is available at
// http://www.eclipse.org/legal/epl-2.0, or the Apache License, Version 2.0
// which is available at https://www.apache.org/licenses/LICENSE-2.0.
//
// SPDX-License-Identifier: EPL-2.0 OR Apache-2.0
//
// Contributors:
//   ZettaScale Zenoh Team, <zenoh@zettascale.tech>
//
#ifdef DOCS
#define ALIGN(n)
#define ZENOHC_API
#endif
"""


class ConfigError(GenerationError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OpaqueTypesConfig:
    """Inputs and output of the opaque type stage."""

    layout: Path
    docs: Path
    output: Path
    field_names: Dict[str, str] = field(default_factory=dict)


@dataclass
class HdrGenConfig:
    """Represents the settings defined in .hdrgen.yml."""

    root: Path
    generated: Path = Path("include/zenoh-gen.h")
    include_dir: Path = Path("include")
    splitguide: Path = Path("splitguide.yaml")
    macros_header: Path = Path("include/zenoh_macros.h")
    configure_header: Path = Path("include/zenoh_configure.h")
    generic_prefix: str = "z_"
    banner: str = DEFAULT_BANNER
    replacements: List[Replacement] = field(default_factory=lambda: list(DEFAULT_REPLACEMENTS))
    keep_generated: bool = False
    opaque_types: Optional[OpaqueTypesConfig] = None

    def __post_init__(self) -> None:
        self.generated = self._resolve(self.generated)
        self.include_dir = self._resolve(self.include_dir)
        self.splitguide = self._resolve(self.splitguide)
        self.macros_header = self._resolve(self.macros_header)
        self.configure_header = self._resolve(self.configure_header)

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path


def load_config(config_path: Path) -> HdrGenConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return HdrGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    kwargs: Dict[str, Any] = {}
    for key in ("generated", "include_dir", "splitguide", "macros_header", "configure_header"):
        value = _as_str(data.get(key))
        if value:
            kwargs[key] = Path(value)

    prefix = _as_str(data.get("generic_prefix"))
    if prefix is not None:
        kwargs["generic_prefix"] = prefix

    banner = data.get("banner")
    if banner is not None:
        if not isinstance(banner, str):
            raise ConfigError("banner must be a string")
        kwargs["banner"] = banner if not banner or banner.endswith("\n") else banner + "\n"

    if "replacements" in data:
        kwargs["replacements"] = _as_replacements(data.get("replacements"))

    keep = _as_bool(data.get("keep_generated"))
    if keep is not None:
        kwargs["keep_generated"] = keep

    opaque_data = _as_dict(data.get("opaque_types"))
    if opaque_data:
        kwargs["opaque_types"] = _as_opaque_types(opaque_data, root)

    return HdrGenConfig(root=root, **kwargs)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_opaque_types(data: Dict[str, Any], root: Path) -> OpaqueTypesConfig:
    paths: Dict[str, Path] = {}
    for key in ("layout", "docs", "output"):
        value = _as_str(data.get(key))
        if not value:
            raise ConfigError(f"opaque_types.{key} is required")
        path = Path(value)
        paths[key] = path if path.is_absolute() else root / path
    field_names = {
        str(name): str(value)
        for name, value in _as_dict(data.get("field_names")).items()
        if isinstance(value, str)
    }
    return OpaqueTypesConfig(field_names=field_names, **paths)


def _as_replacements(value: Any) -> List[Replacement]:
    if value is None:
        return []
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise ConfigError("replacements must be a list of [old, new] pairs")
    pairs: List[Tuple[str, str]] = []
    for item in value:
        if (
            not isinstance(item, Sequence)
            or isinstance(item, str)
            or len(item) != 2
            or not all(isinstance(part, str) for part in item)
        ):
            raise ConfigError(f"Invalid replacement entry: {item!r}")
        if not item[0]:
            raise ConfigError("Replacement source text must not be empty")
        pairs.append((item[0], item[1]))
    return pairs


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_BANNER",
    "HdrGenConfig",
    "OpaqueTypesConfig",
    "load_config",
]
