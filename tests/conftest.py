from __future__ import annotations

from pathlib import Path

import pytest

from repochief_demo.scenarios.loader import load_catalog

REPO_PRESETS = Path(__file__).resolve().parent.parent / "presets"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Each test runs in its own cwd with artifacts under tmp_path."""
    for var in ("DEMO_SCENARIO", "MOCK_MODE", "DEMO_BUDGET", "REPOCHIEF_API_KEY", "REPOCHIEF_ORCHESTRATOR"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("REPOCHIEF_PRESETS_DIR", str(REPO_PRESETS))
    monkeypatch.setenv("REPOCHIEF_ARTIFACTS_DIR", str(tmp_path / "artifacts"))
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def presets_dir() -> Path:
    return REPO_PRESETS


@pytest.fixture
def catalog(presets_dir):
    return load_catalog(presets_dir)
