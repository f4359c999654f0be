"""Guard pipeline - run or load the analysis report and locate unguarded statements."""

from __future__ import annotations

from pathlib import Path

from permminer.codemodel.models import CodeModel
from permminer.config.models import AnalysisConfig
from permminer.core.logging import get_logger, set_run_id
from permminer.guard.matcher import GuardGapMatcher
from permminer.guard.models import GuardDiagnostic
from permminer.guard.report import load_report
from permminer.guard.runner import AnalysisRunner

log = get_logger(__name__)


class GuardOps:
    """Checks a code model against a guard report.

    With no report supplied the external analysis is run first; matching
    only starts once a report has been produced successfully.
    """

    def __init__(self, config: AnalysisConfig, model: CodeModel) -> None:
        self._config = config
        self._model = model

    def check(
        self,
        *,
        report_path: Path | None = None,
        module_dir: Path | None = None,
    ) -> list[GuardDiagnostic]:
        if (report_path is None) == (module_dir is None):
            raise ValueError("Pass exactly one of report_path or module_dir")
        set_run_id()

        if report_path is not None:
            return self._check_report(report_path)

        assert module_dir is not None
        temp_report = AnalysisRunner(self._config).run(module_dir)
        try:
            return self._check_report(temp_report)
        finally:
            temp_report.unlink(missing_ok=True)

    def _check_report(self, report_path: Path) -> list[GuardDiagnostic]:
        entries = load_report(report_path)
        log.info("guard_report_loaded", path=str(report_path), callbacks=len(entries))

        diagnostics = GuardGapMatcher(self._model).check_all(entries)
        log.info("guard_check_finished", diagnostics=len(diagnostics))
        return diagnostics
