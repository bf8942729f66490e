"""Tests for hdrgen.splitting.splitter."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from hdrgen.errors import ExhaustivenessError, SplitGuideError
from hdrgen.parsing import group_tokens, tokenize
from hdrgen.splitting import SplitGuide, Splitter, resolve, unused_records
from tests._fixtures.header_builder import SAMPLE_DECLARATIONS, SAMPLE_SPLITGUIDE


def _guide(text: str = SAMPLE_SPLITGUIDE) -> SplitGuide:
    return SplitGuide.from_mapping(yaml.safe_load(text))


def test_split_text_routes_records_by_rule() -> None:
    outputs = Splitter(_guide(), banner="// banner\n").split_text(SAMPLE_DECLARATIONS)

    assert list(outputs) == ["zenoh_commons.h", "zenoh_constants.h", "zenoh_concrete.h"]
    assert all(text.startswith("// banner\n") for text in outputs.values())

    concrete = outputs["zenoh_concrete.h"]
    assert "} z_owned_bytes_t;" in concrete
    assert "An owned payload." in concrete
    assert "} z_owned_bytes_t;" not in outputs["zenoh_commons.h"]

    constants = outputs["zenoh_constants.h"]
    assert "#include <stdbool.h>\n" in constants
    assert "#define Z_ROUTER 1\n" in constants
    assert "_Z_PRIVATE" not in "".join(outputs.values())

    commons = outputs["zenoh_commons.h"]
    assert "extern const unsigned int Z_SHM_ID;\n" in commons
    assert "#if defined(SHARED_MEMORY)\nZENOHC_API void zc_shm_drop(struct zc_owned_shm_t *this_);\n#endif\n" in commons


def test_split_text_is_deterministic() -> None:
    splitter = Splitter(_guide(), banner="// banner\n")

    assert splitter.split_text(SAMPLE_DECLARATIONS) == splitter.split_text(SAMPLE_DECLARATIONS)


def test_exclusive_routing_keeps_record_out_of_shared_file() -> None:
    text = "void x(void);\n"
    outputs = Splitter(_guide("a.h: ['x!']\nb.h: ['x']\n")).split_text(text)

    assert outputs == {"a.h": "void x(void);\n", "b.h": ""}


def test_missing_requested_id_is_a_configuration_error() -> None:
    guide = _guide("a.h: [':functions', 'z_missing_t', 'z_gone_t!']\n")

    with pytest.raises(SplitGuideError) as excinfo:
        Splitter(guide).split_text("void f(void);\n")

    assert excinfo.value.missing == ["z_missing_t", "z_gone_t"]


def test_unrouted_record_fails_with_every_omission() -> None:
    guide = _guide("a.h: [':functions']\n")
    text = "void f(void);\ntypedef int z_a_t;\nconst int z_b;\n"

    with pytest.raises(ExhaustivenessError) as excinfo:
        Splitter(guide).split_text(text)

    assert len(excinfo.value.omissions) == 2
    assert "z_a_t" in excinfo.value.omissions[0]
    assert "z_b" in excinfo.value.omissions[1]


def test_private_and_empty_records_may_stay_unrouted() -> None:
    guide = _guide("a.h: [':functions']\n")
    records = group_tokens(tokenize("#define _Z_HIDDEN 1\ntypedef int _z_t;\nvoid f(void);\n// end\n"))

    assert unused_records(resolve(records, guide)) == []


def test_split_file_writes_each_output(tmp_path: Path) -> None:
    source = tmp_path / "gen.h"
    source.write_text(SAMPLE_DECLARATIONS, encoding="utf-8")
    out_dir = tmp_path / "include"

    written = Splitter(_guide(), banner="// banner\n").split_file(source, out_dir)

    assert [p.name for p in written] == ["zenoh_commons.h", "zenoh_constants.h", "zenoh_concrete.h"]
    assert (out_dir / "zenoh_concrete.h").read_text(encoding="utf-8").startswith("// banner\n")


def test_conditional_block_of_functions_follows_function_rules() -> None:
    text = "#ifdef SHARED_MEMORY\nvoid zc_a(void);\nvoid zc_b(void);\n#endif\n"

    outputs = Splitter(_guide("a.h: [':functions']\n")).split_text(text)

    assert outputs["a.h"] == text


def test_unused_record_report_names_declarations_only() -> None:
    with pytest.raises(ExhaustivenessError) as excinfo:
        Splitter(_guide("a.h: [':functions']\n")).split_text("// doc\nconst int z_b;\n")

    assert excinfo.value.omissions == ["Unused const record: ['z_b']"]
