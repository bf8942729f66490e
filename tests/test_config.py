"""Tests for hdrgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from hdrgen.config import DEFAULT_BANNER, ConfigError, HdrGenConfig, load_config
from hdrgen.postproc import DEFAULT_REPLACEMENTS


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, HdrGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.generated == tmp_path.resolve() / "include" / "zenoh-gen.h"
    assert config.splitguide == tmp_path.resolve() / "splitguide.yaml"
    assert config.generic_prefix == "z_"
    assert config.banner == DEFAULT_BANNER
    assert config.replacements == list(DEFAULT_REPLACEMENTS)
    assert config.keep_generated is False
    assert config.opaque_types is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".hdrgen.yml"
    config_file.write_text(
        """
generated: "build/gen.h"
include_dir: "out"
splitguide: "guides/split.yaml"
macros_header: "out/macros.h"
configure_header: "out/configure.h"
generic_prefix: "zc_"
banner: "// generated"
keep_generated: yes
replacements:
  - ["_T_", "_"]
opaque_types:
  layout: "build/layout.txt"
  docs: "src/opaque_types.rs"
  output: "out/opaque.h"
  field_names:
    z_moved_t: "_this"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.generated == root / "build" / "gen.h"
    assert config.include_dir == root / "out"
    assert config.splitguide == root / "guides" / "split.yaml"
    assert config.macros_header == root / "out" / "macros.h"
    assert config.configure_header == root / "out" / "configure.h"
    assert config.generic_prefix == "zc_"
    assert config.banner == "// generated\n"
    assert config.keep_generated is True
    assert config.replacements == [("_T_", "_")]
    assert config.opaque_types is not None
    assert config.opaque_types.layout == root / "build" / "layout.txt"
    assert config.opaque_types.output == root / "out" / "opaque.h"
    assert config.opaque_types.field_names == {"z_moved_t": "_this"}


def test_empty_replacement_list_disables_fixups(tmp_path: Path) -> None:
    (tmp_path / ".hdrgen.yml").write_text("replacements: []\n", encoding="utf-8")

    assert load_config(tmp_path).replacements == []


def test_invalid_replacement_entry_raises(tmp_path: Path) -> None:
    (tmp_path / ".hdrgen.yml").write_text("replacements:\n  - only-one\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid replacement entry"):
        load_config(tmp_path)


def test_opaque_types_requires_every_path(tmp_path: Path) -> None:
    (tmp_path / ".hdrgen.yml").write_text(
        "opaque_types:\n  layout: layout.txt\n  docs: opaque.rs\n", encoding="utf-8"
    )

    with pytest.raises(ConfigError, match="opaque_types.output is required"):
        load_config(tmp_path)


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    (tmp_path / ".hdrgen.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_malformed_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / ".hdrgen.yml").write_text("banner: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
