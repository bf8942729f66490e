"""CLI parser behaviour tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from hdrgen.cli import _build_parser, main
from tests._fixtures.header_builder import ProjectBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "split"])
    assert args.verbose is True
    assert args.command == "split"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["split", "--verbose"])
    assert args.verbose is True
    assert args.command == "split"


def test_cli_accepts_keep_generated_flag() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "--keep-generated", "--arch", "aarch64", "proj"])
    assert args.command == "generate"
    assert args.keep_generated is True
    assert args.arch == "aarch64"
    assert args.path == "proj"


def test_cli_leaves_keep_generated_to_config_by_default() -> None:
    parser = _build_parser()
    args = parser.parse_args(["split"])
    assert args.keep_generated is None
    assert args.path == "."


def test_main_split_reports_written_files(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.seed()

    main(["-q", "split", str(project_builder.path())])

    out = capsys.readouterr().out
    assert "zenoh_commons.h" in out
    assert (project_builder.path() / "include" / "zenoh_concrete.h").exists()


def test_main_exits_with_message_on_failure(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.seed(splitguide="zenoh_commons.h:\n  - z_unknown_t!\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["-q", "split", str(project_builder.path())])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "hdrgen split failed: z_unknown_t not found" in err


def test_main_reports_missing_generated_header(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit):
        main(["-q", "generics", os.fspath(tmp_path)])

    assert "zenoh-gen.h does not exist" in capsys.readouterr().err
