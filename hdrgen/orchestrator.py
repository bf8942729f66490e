"""High-level orchestration for the header generation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .config import HdrGenConfig, OpaqueTypesConfig, load_config
from .errors import GenerationError
from .generics import DispatchGenerator, mine
from .logging import get_logger
from .models import FunctionSignature
from .opaque import OpaqueType, load_opaque_types, write_opaque_types
from .postproc.replace import replace_in_files, write_configure_header
from .splitting import SplitGuide, Splitter
from .stores.locked_file import read_locked


@dataclass
class GenerateOutcome:
    """Files produced by one pipeline run."""

    split_files: List[Path] = field(default_factory=list)
    macros_header: Optional[Path] = None
    configure_header: Optional[Path] = None
    opaque_header: Optional[Path] = None
    opaque_types: List[OpaqueType] = field(default_factory=list)
    families: Dict[str, List[FunctionSignature]] = field(default_factory=dict)


class Orchestrator:
    """Coordinates the opaque-type, generics, configure and split stages."""

    def __init__(self) -> None:
        self._logger = get_logger("orchestrator")

    def run_generate(
        self,
        path: str,
        *,
        keep_generated: bool | None = None,
        arch: str | None = None,
    ) -> GenerateOutcome:
        """Run every stage against the project at ``path``.

        The split and the opaque types are validated before any header is
        written, so a bad split guide or undocumented opaque type leaves the
        include directory untouched.
        """
        config = self._load_config(Path(path))
        source = self._require(config.generated)
        text = read_locked(source)
        split_outputs = self._plan_split(config, text, source)
        opaque = config.opaque_types
        opaque_types: List[OpaqueType] = []
        if opaque is not None:
            opaque_types = load_opaque_types(opaque.layout, opaque.docs)

        outcome = GenerateOutcome()
        if opaque is not None:
            self._write_opaque(config, opaque, opaque_types, outcome)
        self._write_generics(config, text, source, outcome)
        outcome.configure_header = write_configure_header(config.configure_header, arch)
        self._write_split(config, split_outputs, source, outcome, keep_generated=keep_generated)
        self._logger.info(
            "Generated %d headers from %s", len(outcome.split_files), config.generated
        )
        return outcome

    def run_split(self, path: str, *, keep_generated: bool | None = None) -> GenerateOutcome:
        config = self._load_config(Path(path))
        source = self._require(config.generated)
        outputs = self._plan_split(config, read_locked(source), source)
        outcome = GenerateOutcome()
        self._write_split(config, outputs, source, outcome, keep_generated=keep_generated)
        return outcome

    def run_generics(self, path: str) -> GenerateOutcome:
        config = self._load_config(Path(path))
        source = self._require(config.generated)
        outcome = GenerateOutcome()
        self._write_generics(config, read_locked(source), source, outcome)
        return outcome

    def run_opaque(self, path: str) -> GenerateOutcome:
        config = self._load_config(Path(path))
        opaque = config.opaque_types
        if opaque is None:
            raise GenerationError("No opaque_types section in the project configuration")
        outcome = GenerateOutcome()
        types = load_opaque_types(opaque.layout, opaque.docs)
        self._write_opaque(config, opaque, types, outcome)
        return outcome

    def _write_opaque(
        self,
        config: HdrGenConfig,
        opaque: OpaqueTypesConfig,
        types: List[OpaqueType],
        outcome: GenerateOutcome,
    ) -> None:
        outcome.opaque_types = write_opaque_types(
            types, opaque.output, field_names=opaque.field_names, banner=config.banner
        )
        outcome.opaque_header = opaque.output

    def _write_generics(
        self, config: HdrGenConfig, text: str, source: Path, outcome: GenerateOutcome
    ) -> None:
        families = mine(text, filename=str(source))
        generator = DispatchGenerator(prefix=config.generic_prefix)
        outcome.macros_header = generator.write(config.macros_header, families)
        outcome.families = families

    def _plan_split(self, config: HdrGenConfig, text: str, source: Path) -> Dict[str, str]:
        guide = SplitGuide.from_yaml(self._require(config.splitguide))
        return Splitter(guide, banner=config.banner).split_text(text, filename=str(source))

    def _write_split(
        self,
        config: HdrGenConfig,
        outputs: Dict[str, str],
        source: Path,
        outcome: GenerateOutcome,
        *,
        keep_generated: bool | None,
    ) -> None:
        written = Splitter.write_outputs(outputs, config.include_dir)
        if config.replacements:
            replace_in_files(written, config.replacements)
        outcome.split_files = written

        keep = config.keep_generated if keep_generated is None else keep_generated
        if not keep:
            source.unlink()
            self._logger.debug("Removed %s", source)

    @staticmethod
    def _load_config(path: Path) -> HdrGenConfig:
        return load_config(path)

    @staticmethod
    def _require(path: Path) -> Path:
        if not path.exists():
            raise FileNotFoundError(f"{path} does not exist")
        return path


__all__ = ["GenerateOutcome", "Orchestrator"]
