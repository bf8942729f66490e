"""Tests for hdrgen.splitting.guide."""

from __future__ import annotations

from pathlib import Path

import pytest

from hdrgen.errors import SplitGuideError
from hdrgen.models import Record, RecordKind
from hdrgen.splitting.guide import Brand, Exclusive, Shared, SplitGuide, parse_rule


def _record(kind: RecordKind, *ids: str) -> Record:
    return Record(kind=kind, tokens=(), ids=ids)


def test_parse_rule_recognises_every_form() -> None:
    assert parse_rule(":functions") == Brand(RecordKind.FUNCTION)
    assert parse_rule(":typedefs") == Brand(RecordKind.TYPEDEF)
    assert parse_rule(":includes") == Brand(RecordKind.INCLUDE)
    assert parse_rule(":defines") == Brand(RecordKind.DEFINE)
    assert parse_rule(":const") == Brand(RecordKind.CONST)
    assert parse_rule(":multiples") == Brand(RecordKind.MULTIPLE)
    assert parse_rule("z_session_t!") == Exclusive("z_session_t")
    assert parse_rule("z_session_t") == Shared("z_session_t")


def test_parse_rule_rejects_unknown_brand() -> None:
    with pytest.raises(SplitGuideError, match="Unknown brand marker"):
        parse_rule(":structs")


def test_exclusive_rule_overrides_shared_rule() -> None:
    guide = SplitGuide.from_mapping({"a.h": ["x!"], "b.h": ["x"]})

    assert guide.appropriate_files(_record(RecordKind.FUNCTION, "x")) == ["a.h"]


def test_exclusive_rule_overrides_brand_rules_in_earlier_files() -> None:
    guide = SplitGuide.from_mapping({"commons.h": [":functions"], "special.h": ["f!"]})

    assert guide.appropriate_files(_record(RecordKind.FUNCTION, "f")) == ["special.h"]
    assert guide.appropriate_files(_record(RecordKind.FUNCTION, "g")) == ["commons.h"]


def test_shared_and_brand_matches_can_fan_out() -> None:
    guide = SplitGuide.from_mapping({"a.h": [":typedefs"], "b.h": ["t"], "c.h": [":functions"]})

    assert guide.appropriate_files(_record(RecordKind.TYPEDEF, "t")) == ["a.h", "b.h"]


def test_record_matching_two_rules_of_one_file_is_listed_once() -> None:
    guide = SplitGuide.from_mapping({"a.h": [":functions", "f"]})

    assert guide.appropriate_files(_record(RecordKind.FUNCTION, "f")) == ["a.h"]


def test_unmatched_record_gets_no_files() -> None:
    guide = SplitGuide.from_mapping({"a.h": [":functions"]})

    assert guide.appropriate_files(_record(RecordKind.CONST, "c")) == []


def test_requested_ids_skip_brand_rules() -> None:
    guide = SplitGuide.from_mapping({"a.h": [":functions", "x!"], "b.h": ["y"]})

    assert list(guide.requested_ids()) == ["x", "y"]


def test_from_yaml_preserves_file_order(tmp_path: Path) -> None:
    path = tmp_path / "splitguide.yaml"
    path.write_text(
        "zenoh_concrete.h:\n  - z_session_t!\nzenoh_commons.h:\n  - :functions\n  - :typedefs\n",
        encoding="utf-8",
    )

    guide = SplitGuide.from_yaml(path)

    assert guide.files == ["zenoh_concrete.h", "zenoh_commons.h"]
    assert guide.rules[1][1] == (Brand(RecordKind.FUNCTION), Brand(RecordKind.TYPEDEF))


def test_from_yaml_rejects_non_list_rules(tmp_path: Path) -> None:
    path = tmp_path / "splitguide.yaml"
    path.write_text("a.h: :functions\n", encoding="utf-8")

    with pytest.raises(SplitGuideError, match="must be a list of strings"):
        SplitGuide.from_yaml(path)


def test_parse_rule_rejects_empty_token() -> None:
    with pytest.raises(SplitGuideError, match="Empty rule"):
        parse_rule("   ")


def test_parse_rule_rejects_bare_exclusive_marker() -> None:
    with pytest.raises(SplitGuideError, match="Exclusive rule without an identifier"):
        parse_rule("!")


def test_from_mapping_rejects_empty_rule_in_list() -> None:
    with pytest.raises(SplitGuideError):
        SplitGuide.from_mapping({"a.h": [":functions", ""]})
