"""Split the generated declarations header into topic headers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from ..errors import ExhaustivenessError, SplitGuideError
from ..logging import get_logger
from ..models import Record
from ..parsing import group_tokens, tokenize
from ..stores.locked_file import read_locked, write_locked
from .guide import SplitGuide

_LOGGER = get_logger("splitter")


@dataclass(frozen=True)
class Routing:
    """A record together with the output files it was routed to."""

    record: Record
    files: Tuple[str, ...]


def resolve(records: Iterable[Record], guide: SplitGuide) -> Tuple[Routing, ...]:
    routings = []
    for record in records:
        files = tuple(guide.appropriate_files(record))
        if files:
            _LOGGER.debug("%s %s -> %s", record.kind.value, list(record.ids), ", ".join(files))
        routings.append(Routing(record, files))
    return tuple(routings)


def missing_ids(records: Sequence[Record], guide: SplitGuide) -> List[str]:
    """Identifiers requested by the guide that no record declares."""
    declared = {ident for record in records for ident in record.ids}
    missing: List[str] = []
    for ident in guide.requested_ids():
        if ident not in declared and ident not in missing:
            missing.append(ident)
    return missing


def unused_records(routings: Iterable[Routing]) -> List[Record]:
    """Non-trivial records that were routed to no file."""
    return [r.record for r in routings if not r.files and not r.record.is_trivial]


def render_files(
    routings: Iterable[Routing], files: Sequence[str], banner: str = ""
) -> Dict[str, str]:
    """Return the text of every output file, banner first, records in input order."""
    chunks: Dict[str, List[str]] = {name: [banner] for name in files}
    for routing in routings:
        rendered = routing.record.render()
        for name in routing.files:
            chunks[name].append(rendered)
    return {name: "".join(parts) for name, parts in chunks.items()}


class Splitter:
    """Groups declarations, routes them with a split guide and writes the headers."""

    def __init__(self, guide: SplitGuide, *, banner: str = "") -> None:
        self.guide = guide
        self.banner = banner

    def split_text(self, text: str, filename: str = "<input>") -> Dict[str, str]:
        """Compute output file contents without touching the filesystem.

        Raises :class:`SplitGuideError` for identifiers the guide requests but
        the input never declares, and :class:`ExhaustivenessError` listing every
        record that would end up in no file.
        """
        records = group_tokens(tokenize(text, filename), filename)
        missing = missing_ids(records, self.guide)
        if missing:
            raise SplitGuideError(
                f"{', '.join(missing)} not found (requested explicitly by the split guide)",
                missing,
            )
        routings = resolve(records, self.guide)
        omitted = unused_records(routings)
        if omitted:
            raise ExhaustivenessError(
                [f"Unused {record.kind.value} record: {record.token_ids}" for record in omitted]
            )
        return render_files(routings, self.guide.files, self.banner)

    def split_file(self, source: Path, output_dir: Path) -> List[Path]:
        outputs = self.split_text(read_locked(source), filename=str(source))
        return self.write_outputs(outputs, output_dir)

    @staticmethod
    def write_outputs(outputs: Dict[str, str], output_dir: Path) -> List[Path]:
        written: List[Path] = []
        for name, content in outputs.items():
            target = output_dir / name
            write_locked(target, content)
            written.append(target)
            _LOGGER.info("Wrote %s", target)
        return written


__all__ = [
    "Routing",
    "Splitter",
    "missing_ids",
    "render_files",
    "resolve",
    "unused_records",
]
