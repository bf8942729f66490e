"""Opaque type definitions reconciled against their documentation.

Opaque types are fixed-size byte blobs whose layout (alignment and size) is
reported by a separate probe build. Each one must also be documented; a type
without docs, or docs for a type the probe never reported, fails the run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

from .errors import OpaqueTypeError
from .logging import get_logger
from .stores.locked_file import write_locked

_LOGGER = get_logger("opaque")

_LAYOUT = re.compile(r"type: (\w+), align: (\d+), size: (\d+)")
_DOC_TARGET = re.compile(r"^\s*get_opaque_type_data!\(\s*(.*)\s*,\s*(\w+)\)")
_DEFAULT_FIELD = "_0"


@dataclass(frozen=True)
class OpaqueType:
    name: str
    align: int
    size: int
    docs: Tuple[str, ...] = ()


def parse_layouts(text: str) -> List[Tuple[str, int, int]]:
    """``(name, align, size)`` for every layout line in probe output, in order."""
    return [(name, int(align), int(size)) for name, align, size in _LAYOUT.findall(text)]


def parse_docs(text: str) -> Dict[str, List[str]]:
    """Map each documented type to the ``///`` lines directly above its declaration."""
    docs: Dict[str, List[str]] = {}
    pending: List[str] = []
    for line in text.splitlines():
        if line.startswith("///"):
            pending.append(line)
            continue
        match = _DOC_TARGET.match(line)
        if match:
            docs[match.group(2)] = list(pending)
        pending = []
    return docs


def reconcile(layouts: List[Tuple[str, int, int]], docs: Mapping[str, List[str]]) -> List[OpaqueType]:
    """Pair layouts with docs, requiring a one-to-one match."""
    remaining = dict(docs)
    types: List[OpaqueType] = []
    for name, align, size in layouts:
        if name not in remaining:
            raise OpaqueTypeError(f"Failed to extract docs for opaque type: {name}")
        types.append(OpaqueType(name, align, size, tuple(remaining.pop(name))))
    if remaining:
        raise OpaqueTypeError(
            f"Failed to find type information for opaque type: {', '.join(sorted(remaining))}"
        )
    return types


def render_opaque_types(
    types: List[OpaqueType], field_names: Mapping[str, str] | None = None, banner: str = ""
) -> str:
    field_names = field_names or {}
    lines: List[str] = []
    if banner:
        lines.append(banner.rstrip("\n"))
    lines.extend(["#pragma once", "#include <stdint.h>", ""])
    for opaque in types:
        lines.extend(opaque.docs)
        field = field_names.get(opaque.name, _DEFAULT_FIELD)
        lines.append(
            f"typedef struct ALIGN({opaque.align}) {opaque.name} {{ "
            f"uint8_t {field}[{opaque.size}]; }} {opaque.name};"
        )
    return "\n".join(lines) + "\n"


def load_opaque_types(layout_path: Path, docs_path: Path) -> List[OpaqueType]:
    layouts = parse_layouts(layout_path.read_text(encoding="utf-8"))
    docs = parse_docs(docs_path.read_text(encoding="utf-8"))
    return reconcile(layouts, docs)


def write_opaque_types(
    types: List[OpaqueType],
    output_path: Path,
    *,
    field_names: Mapping[str, str] | None = None,
    banner: str = "",
) -> List[OpaqueType]:
    write_locked(output_path, render_opaque_types(types, field_names, banner))
    _LOGGER.info("Wrote %d opaque types to %s", len(types), output_path)
    return types


def generate_opaque_types(
    layout_path: Path,
    docs_path: Path,
    output_path: Path,
    *,
    field_names: Mapping[str, str] | None = None,
    banner: str = "",
) -> List[OpaqueType]:
    types = load_opaque_types(layout_path, docs_path)
    return write_opaque_types(types, output_path, field_names=field_names, banner=banner)


__all__ = [
    "OpaqueType",
    "generate_opaque_types",
    "load_opaque_types",
    "parse_docs",
    "parse_layouts",
    "reconcile",
    "render_opaque_types",
    "write_opaque_types",
]
