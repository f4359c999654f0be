"""CLI test fixtures."""

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from permminer.mining.document import write_document
from tests.conftest import ACTIVITY_PATH, ACTIVITY_SOURCE, CAMERA_PATH, CAMERA_SOURCE

VOCABULARY = """\
words:
  android.permission.CAMERA: CAMERA
  android.permission.RECORD_AUDIO: RECORD_AUDIO
regex:
  android.permission.CAMERA: "[^_]CAMERA[^_]"
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run each command from an empty project dir with no global config."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    with patch("permminer.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global.yaml"):
        yield project
    logging.getLogger().handlers.clear()


@pytest.fixture
def sources(tmp_path: Path) -> Path:
    """Source tree holding the camera and activity classes."""
    root = tmp_path / "src"
    for path, text in ((CAMERA_PATH, CAMERA_SOURCE), (ACTIVITY_PATH, ACTIVITY_SOURCE)):
        target = root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def mining_project(isolated_config: Path, tmp_path: Path) -> Path:
    """Project config pointing mining at small vocabulary and empty tables."""
    inputs = tmp_path / "inputs"
    inputs.mkdir()
    (inputs / "vocabulary.yaml").write_text(VOCABULARY)
    (inputs / "overrides.yaml").write_text("class_overrides: []\n")
    write_document(inputs / "excluded.xml")
    write_document(inputs / "baseline.xml")

    config_dir = isolated_config / ".permminer"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(
        "mining:\n"
        f"  vocabulary_path: {inputs / 'vocabulary.yaml'}\n"
        f"  overrides_path: {inputs / 'overrides.yaml'}\n"
        f"  excluded_defs_path: {inputs / 'excluded.xml'}\n"
        f"  baseline_path: {inputs / 'baseline.xml'}\n"
    )
    return isolated_config
