"""Render type-generic dispatch macros and their C++ overload equivalents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader

from ..logging import get_logger
from ..models import FunctionSignature
from ..stores.locked_file import write_locked
from .miner import CONVENTIONS

_LOGGER = get_logger("generics.dispatch")

# conventions whose generic selects on a pointer to the owner rather than the owner itself
_POINTER_SELECTED = {"drop", "null"}


@dataclass(frozen=True)
class GenericEntry:
    selector: str
    func: str


@dataclass(frozen=True)
class GenericTable:
    """One ``_Generic`` selection macro."""

    name: str
    params: str
    invocation: str
    entries: Tuple[GenericEntry, ...]


def generic_table(
    convention: str, signatures: Sequence[FunctionSignature], prefix: str = "z_"
) -> GenericTable:
    """Build the selection table mapping each owner type to its concrete function."""
    pointer = convention in _POINTER_SELECTED
    entries = tuple(
        GenericEntry(
            selector=f"{sig.owner.typename} *" if pointer else sig.owner.typename,
            func=sig.func_name,
        )
        for sig in signatures
    )
    if convention == "call":
        params, invocation = "x, ...", "(&x, __VA_ARGS__)"
    elif pointer:
        params, invocation = "x", "(x)"
    else:
        params, invocation = "x", "(&x)"
    return GenericTable(f"{prefix}{convention}", params, invocation, entries)


class DispatchGenerator:
    """Produces the generics header from mined convention families."""

    TEMPLATE = "macros.h.j2"

    def __init__(self, *, prefix: str = "z_", templates_dir: Path | None = None) -> None:
        self.prefix = prefix
        self._env = self._create_env(templates_dir)

    def render(self, families: Mapping[str, Sequence[FunctionSignature]]) -> str:
        """Render the full header; conventions without signatures still get a table."""
        complete: Dict[str, List[FunctionSignature]] = {
            convention.name: list(families.get(convention.name, ())) for convention in CONVENTIONS
        }
        tables = [
            generic_table(name, signatures, self.prefix) for name, signatures in complete.items()
        ]
        template = self._env.get_template(self.TEMPLATE)
        rendered = template.render(prefix=self.prefix, tables=tables, families=complete)
        return rendered if rendered.endswith("\n") else rendered + "\n"

    def write(self, path: Path, families: Mapping[str, Sequence[FunctionSignature]]) -> Path:
        write_locked(path, self.render(families))
        counts = ", ".join(f"{name}={len(sigs)}" for name, sigs in families.items())
        _LOGGER.info("Wrote %s (%s)", path, counts)
        return path

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["DispatchGenerator", "GenericEntry", "GenericTable", "generic_table"]
