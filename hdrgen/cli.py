"""CLI entrypoints for hdrgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import GenerationError
from .logging import configure_logging
from .orchestrator import GenerateOutcome, Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root or .hdrgen.yml path (defaults to current directory).",
    )


def _add_keep_generated_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--keep-generated",
        action="store_true",
        default=None,
        help="Keep the generated declarations header after splitting it.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdrgen",
        description="Split generated C declarations into public headers and emit generic dispatch macros.",
    )
    _add_verbose_option(parser)
    parser.add_argument("-q", "--quiet", action="store_true", help="Only report warnings and errors.")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Run the whole pipeline: opaque types, generics, configure header and split.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    _add_keep_generated_option(generate_parser)
    generate_parser.add_argument(
        "--arch",
        default=None,
        help="Target architecture for the configure header (defaults to the host machine).",
    )

    split_parser = subparsers.add_parser(
        "split",
        help="Split the generated header according to the split guide.",
    )
    _add_verbose_option(split_parser, suppress_default=True)
    _add_path_argument(split_parser)
    _add_keep_generated_option(split_parser)

    generics_parser = subparsers.add_parser(
        "generics",
        help="Write the type-generic macros header only.",
    )
    _add_verbose_option(generics_parser, suppress_default=True)
    _add_path_argument(generics_parser)

    opaque_parser = subparsers.add_parser(
        "opaque",
        help="Write the opaque type definitions only.",
    )
    _add_verbose_option(opaque_parser, suppress_default=True)
    _add_path_argument(opaque_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for hdrgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file)

    orchestrator = Orchestrator()
    keep_generated = getattr(args, "keep_generated", None)

    try:
        if args.command == "generate":
            outcome = orchestrator.run_generate(
                args.path, keep_generated=keep_generated, arch=args.arch
            )
        elif args.command == "split":
            outcome = orchestrator.run_split(args.path, keep_generated=keep_generated)
        elif args.command == "generics":
            outcome = orchestrator.run_generics(args.path)
        elif args.command == "opaque":
            outcome = orchestrator.run_opaque(args.path)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (GenerationError, FileNotFoundError) as exc:
        parser.exit(1, f"hdrgen {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    for path in _written(outcome):
        print(f"Wrote {_relativize(path)}")


def _written(outcome: GenerateOutcome) -> list[Path]:
    paths = [outcome.opaque_header, outcome.macros_header, outcome.configure_header]
    return [path for path in paths if path is not None] + list(outcome.split_files)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
