"""External permission analysis (DroidPerm) invocation.

The tool runs as a blocking subprocess with the analysis home as its
working directory and writes an XML guard report. A bounded wait is
enforced; on timeout or interruption the process is killed and the run
fails with an AnalysisError.
"""

from __future__ import annotations

import os
import subprocess
import tempfile
import time
from pathlib import Path

from permminer.config.models import AnalysisConfig
from permminer.core.errors import AnalysisError
from permminer.core.logging import get_logger

log = get_logger(__name__)

HOME_ENV_VAR = "DROID_PERM_HOME"


def resolve_home(config: AnalysisConfig) -> Path:
    """Analysis home from config, else the DROID_PERM_HOME env var."""
    home = config.home or os.environ.get(HOME_ENV_VAR)
    if not home:
        raise AnalysisError.home_not_set()
    return Path(home).expanduser()


def find_artifact(module_dir: Path, suffix: str) -> Path:
    """The single file under ``module_dir`` whose name ends with ``suffix``."""
    matches = sorted(p for p in module_dir.rglob(f"*{suffix}") if p.is_file())
    if not matches:
        raise AnalysisError.artifact_not_found(str(module_dir), suffix)
    if len(matches) > 1:
        raise AnalysisError.ambiguous_artifact([m.name for m in matches])
    return matches[0]


class AnalysisRunner:
    """Runs the external analysis for one module and returns its report path."""

    def __init__(self, config: AnalysisConfig) -> None:
        self._config = config

    def build_command(self, home: Path, artifact: Path, report_path: Path) -> list[str]:
        return [
            "java",
            "-jar",
            str(home / self._config.jar_name),
            str(artifact),
            str(home / self._config.classpath_name),
            "--xml-out",
            str(report_path),
            *self._config.extra_args,
        ]

    def run(self, module_dir: Path, report_path: Path | None = None) -> Path:
        """Analyze the module's compiled artifact.

        Without ``report_path`` the report goes to a new temp file owned by
        the caller; the file is removed again when the run fails.

        Raises:
            AnalysisError: Home unset, artifact missing or ambiguous, non-zero
                exit, timeout or interruption.
        """
        home = resolve_home(self._config)
        artifact = find_artifact(module_dir, self._config.apk_suffix)
        if report_path is not None:
            self._execute(home, artifact, report_path)
            return report_path

        fd, name = tempfile.mkstemp(prefix="droid-perm", suffix=".xml")
        os.close(fd)
        temp_report = Path(name)
        try:
            self._execute(home, artifact, temp_report)
        except AnalysisError:
            temp_report.unlink(missing_ok=True)
            raise
        return temp_report

    def _execute(self, home: Path, artifact: Path, report_path: Path) -> None:
        cmd = self.build_command(home, artifact, report_path)
        timeout = self._config.timeout_sec
        log.info("analysis_started", artifact=str(artifact), home=str(home), timeout_sec=timeout)
        start = time.monotonic()
        try:
            result = subprocess.run(cmd, cwd=home, timeout=timeout, check=False)
        except subprocess.TimeoutExpired as e:
            log.error("analysis_timeout", timeout_sec=timeout)
            raise AnalysisError.timeout(timeout) from e
        except FileNotFoundError as e:
            # java not on PATH
            log.error("analysis_launch_failed", command=cmd[0], error=str(e))
            raise AnalysisError.failed(127) from e
        except KeyboardInterrupt as e:
            log.error("analysis_interrupted")
            raise AnalysisError.interrupted() from e

        duration_sec = round(time.monotonic() - start, 3)
        if result.returncode != 0:
            log.error("analysis_failed", exit_code=result.returncode, duration_sec=duration_sec)
            raise AnalysisError.failed(result.returncode)
        log.info("analysis_finished", report=str(report_path), duration_sec=duration_sec)
