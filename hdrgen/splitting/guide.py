"""Split guide: which output header each declaration record belongs to."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple, Union

import yaml

from ..errors import SplitGuideError
from ..models import Record, RecordKind

BRAND_MARKERS: Dict[str, RecordKind] = {
    ":functions": RecordKind.FUNCTION,
    ":typedefs": RecordKind.TYPEDEF,
    ":includes": RecordKind.INCLUDE,
    ":defines": RecordKind.DEFINE,
    ":const": RecordKind.CONST,
    ":multiples": RecordKind.MULTIPLE,
}
EXCLUSIVE_MARKER = "!"


@dataclass(frozen=True)
class Brand:
    """Matches every record of one classification."""

    kind: RecordKind

    def matches(self, record: Record) -> bool:
        return record.kind is self.kind


@dataclass(frozen=True)
class Shared:
    """Matches records declaring ``ident``; other files may receive them too."""

    ident: str

    def matches(self, record: Record) -> bool:
        return record.contains_id(self.ident)


@dataclass(frozen=True)
class Exclusive:
    """Matches records declaring ``ident`` and overrides every shared match."""

    ident: str

    def matches(self, record: Record) -> bool:
        return record.contains_id(self.ident)


SplitRule = Union[Brand, Shared, Exclusive]


def parse_rule(token: str) -> SplitRule:
    """Translate one rule token of the guide into a rule object."""
    token = token.strip()
    if not token:
        raise SplitGuideError("Empty rule in split guide")
    if token.startswith(":"):
        try:
            return Brand(BRAND_MARKERS[token])
        except KeyError as exc:
            known = ", ".join(BRAND_MARKERS)
            raise SplitGuideError(f"Unknown brand marker {token!r} (expected one of {known})") from exc
    if token.endswith(EXCLUSIVE_MARKER):
        ident = token[: -len(EXCLUSIVE_MARKER)]
        if not ident:
            raise SplitGuideError("Exclusive rule without an identifier")
        return Exclusive(ident)
    return Shared(token)


class SplitGuide:
    """Ordered mapping from output file name to its split rules."""

    def __init__(self, rules: Sequence[Tuple[str, Sequence[SplitRule]]]) -> None:
        self._rules: Tuple[Tuple[str, Tuple[SplitRule, ...]], ...] = tuple(
            (name, tuple(file_rules)) for name, file_rules in rules
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SplitGuide":
        if not isinstance(data, Mapping):
            raise SplitGuideError("Split guide must be a mapping of file names to rule lists")
        rules: List[Tuple[str, List[SplitRule]]] = []
        for name, tokens in data.items():
            if not isinstance(name, str) or not name:
                raise SplitGuideError(f"Invalid output file name in split guide: {name!r}")
            if tokens is None:
                tokens = []
            if not isinstance(tokens, list) or not all(isinstance(t, str) for t in tokens):
                raise SplitGuideError(f"Rules for {name} must be a list of strings")
            rules.append((name, [parse_rule(token) for token in tokens]))
        return cls(rules)

    @classmethod
    def from_yaml(cls, path: Path) -> "SplitGuide":
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SplitGuideError(f"Cannot read split guide {path}: {exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SplitGuideError(f"Failed to parse {path.name}: {exc}") from exc
        return cls.from_mapping(data or {})

    @property
    def files(self) -> List[str]:
        return [name for name, _ in self._rules]

    @property
    def rules(self) -> Tuple[Tuple[str, Tuple[SplitRule, ...]], ...]:
        return self._rules

    def requested_ids(self) -> Iterator[str]:
        """Identifiers named explicitly by shared or exclusive rules."""
        for _, file_rules in self._rules:
            for rule in file_rules:
                if isinstance(rule, (Shared, Exclusive)):
                    yield rule.ident

    def appropriate_files(self, record: Record) -> List[str]:
        """Files ``record`` should be written to.

        Any exclusive match replaces the shared/brand candidates entirely.
        """
        shared: List[str] = []
        exclusive: List[str] = []
        for name, file_rules in self._rules:
            for rule in file_rules:
                if not rule.matches(record):
                    continue
                target = exclusive if isinstance(rule, Exclusive) else shared
                if name not in target:
                    target.append(name)
        return exclusive if exclusive else shared


__all__ = [
    "BRAND_MARKERS",
    "Brand",
    "Exclusive",
    "Shared",
    "SplitGuide",
    "SplitRule",
    "parse_rule",
]
