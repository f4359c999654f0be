"""Mining pipeline - collect evidence, synthesize, diff and publish definitions."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from permminer.codemodel.models import CodeModel
from permminer.config.models import MiningConfig
from permminer.core.errors import ConfigError
from permminer.core.logging import get_logger, set_run_id
from permminer.data import (
    EXCLUDED_DEFS_FILE,
    OVERRIDES_FILE,
    VOCABULARY_FILE,
    resolve_data_path,
)
from permminer.mining.builder import DefinitionBuilder
from permminer.mining.collector import EvidenceCollector
from permminer.mining.differ import diff_definitions
from permminer.mining.document import load_definitions, write_document
from permminer.mining.models import DefinitionSet, ParametricSensDef
from permminer.mining.overrides import (
    OverrideResolver,
    OverrideTables,
    covered_class_names,
    load_overrides,
)
from permminer.mining.scanner import OccurrenceScanner
from permminer.mining.vocabulary import PermissionVocabulary, load_vocabulary

log = get_logger(__name__)

NEW_DEFS_FILE = "new-defs.xml"
MANUAL_DEFS_FILE = "manual-defs.xml"
PARAMETRIC_DEFS_FILE = "parametric-sens-defs.xml"


@dataclass
class MiningResult:
    """Everything one mining run produced."""

    collected: DefinitionSet
    after_subtraction: DefinitionSet
    new: DefinitionSet
    manual: DefinitionSet
    parametric: tuple[ParametricSensDef, ...]
    written: list[Path] = field(default_factory=list)
    duration_sec: float = 0.0

    @property
    def counts(self) -> dict[str, int]:
        return {
            "collected": len(self.collected),
            "after_subtraction": len(self.after_subtraction),
            "final": len(self.new),
            "manual": len(self.manual),
            "parametric": len(self.parametric),
        }


@dataclass(frozen=True)
class _Inputs:
    vocabulary: PermissionVocabulary
    overrides: OverrideTables
    baseline: DefinitionSet
    excluded: DefinitionSet


class MiningOps:
    """Runs the mining pipeline over one code model.

    Configuration and input documents are loaded before any evidence is
    collected, so a bad vocabulary or a missing baseline aborts the run
    without touching the outputs. Outputs are written only once every
    set has been computed.
    """

    def __init__(self, config: MiningConfig, model: CodeModel) -> None:
        self._config = config
        self._model = model

    def run(self, *, write: bool = True) -> MiningResult:
        inputs = self._load_inputs()
        set_run_id()
        start = time.perf_counter()
        log.info("mining_started", files=len(self._model.files))

        scanner = OccurrenceScanner(inputs.vocabulary)
        collector = EvidenceCollector(self._model, scanner, self._config.hidden_markers)
        builder = DefinitionBuilder(self._model, self._config.context_width)
        resolver = OverrideResolver(self._model, self._config.hidden_markers, self._config.uri_type)

        evidence = collector.collect()
        collected = DefinitionSet(builder.build(e, perms) for e, perms in evidence.by_element()).sorted()

        class_overrides = inputs.overrides.class_overrides
        override_defs = resolver.resolve(class_overrides, builder.build)
        diff = diff_definitions(
            collected,
            inputs.baseline,
            inputs.excluded,
            overrides=override_defs,
            covered_classes=covered_class_names(class_overrides),
        )
        manual = DefinitionSet(resolver.resolve(inputs.overrides.manual_overrides, builder.build))
        parametric = tuple(
            dict.fromkeys(resolver.resolve_parametric(inputs.overrides.parametric, builder.build_parametric))
        )

        result = MiningResult(
            collected=collected,
            after_subtraction=diff.delta,
            new=diff.final.sorted(),
            manual=manual,
            parametric=parametric,
        )
        if write:
            result.written = self._write(result)
        result.duration_sec = time.perf_counter() - start
        log.info("mining_finished", **result.counts, duration_sec=round(result.duration_sec, 3))
        return result

    def _load_inputs(self) -> _Inputs:
        if not self._config.baseline_path:
            raise ConfigError.missing_required("mining.baseline_path")
        baseline_path = Path(self._config.baseline_path).expanduser()
        if not baseline_path.exists():
            raise ConfigError.file_not_found(str(baseline_path))

        vocabulary = load_vocabulary(resolve_data_path(self._config.vocabulary_path, VOCABULARY_FILE))
        overrides = load_overrides(resolve_data_path(self._config.overrides_path, OVERRIDES_FILE))
        excluded = load_definitions(resolve_data_path(self._config.excluded_defs_path, EXCLUDED_DEFS_FILE))
        baseline = load_definitions(baseline_path)
        log.debug("mining_inputs_loaded", baseline=len(baseline), excluded=len(excluded))
        return _Inputs(vocabulary=vocabulary, overrides=overrides, baseline=baseline, excluded=excluded)

    def _write(self, result: MiningResult) -> list[Path]:
        out = Path(self._config.output_dir).expanduser()
        targets = [
            (out / NEW_DEFS_FILE, result.new, ()),
            (out / MANUAL_DEFS_FILE, result.manual, ()),
            (out / PARAMETRIC_DEFS_FILE, DefinitionSet(), result.parametric),
        ]
        written = []
        for path, definitions, parametric in targets:
            write_document(path, definitions, parametric)
            log.info("definitions_written", path=str(path), definitions=len(definitions), parametric=len(parametric))
            written.append(path)
        return written
