"""Final textual fixups on split headers and the configure header."""

from __future__ import annotations

import platform
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from ..logging import get_logger
from ..stores.locked_file import rewrite_locked, write_locked

_LOGGER = get_logger("postproc.replace")

Replacement = Tuple[str, str]

DEFAULT_REPLACEMENTS: Tuple[Replacement, ...] = (
    # enum variants: Z_SAMPLE_KIND_T_PUT -> Z_SAMPLE_KIND_PUT
    ("_T_", "_"),
    # union tags: z_value_t_Tag -> z_value_tag_t
    ("_t_Tag", "_tag_t"),
    # the bindings generator can prefix functions but not extern variables
    ("extern const", "ZENOHC_API extern const"),
)


def apply_replacements(text: str, replacements: Sequence[Replacement]) -> str:
    for old, new in replacements:
        text = text.replace(old, new)
    return text


def replace_in_files(paths: Iterable[Path], replacements: Sequence[Replacement]) -> List[Path]:
    """Apply ``replacements`` in order to each file, holding its lock throughout."""
    touched: List[Path] = []
    for path in paths:
        rewrite_locked(path, lambda text: apply_replacements(text, replacements))
        touched.append(path)
        _LOGGER.debug("Applied %d replacements to %s", len(replacements), path)
    return touched


def target_arch(machine: str | None = None) -> str:
    arch = machine if machine is not None else platform.machine()
    return arch.upper().replace("-", "_")


def render_configure_header(arch: str | None = None) -> str:
    return f"#pragma once\n#define TARGET_ARCH_{target_arch(arch)}\n"


def write_configure_header(path: Path, arch: str | None = None) -> Path:
    write_locked(path, render_configure_header(arch))
    _LOGGER.info("Wrote %s", path)
    return path


__all__ = [
    "DEFAULT_REPLACEMENTS",
    "Replacement",
    "apply_replacements",
    "render_configure_header",
    "replace_in_files",
    "target_arch",
    "write_configure_header",
]
