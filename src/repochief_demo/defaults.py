"""Shared constants — env var names, default values, path resolvers.

Single source of truth for every setting the runner, the end-to-end check
and the recorder read from the environment.
"""

from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Env var names
# ---------------------------------------------------------------------------

ENV_SCENARIO = "DEMO_SCENARIO"
ENV_MOCK_MODE = "MOCK_MODE"
ENV_BUDGET = "DEMO_BUDGET"
ENV_API_KEY = "REPOCHIEF_API_KEY"
ENV_ORCHESTRATOR = "REPOCHIEF_ORCHESTRATOR"
ENV_PRESETS_DIR = "REPOCHIEF_PRESETS_DIR"
ENV_ARTIFACTS_DIR = "REPOCHIEF_ARTIFACTS_DIR"

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_SCENARIO = "basic"
DEFAULT_BUDGET = 10
DEFAULT_MAX_CONCURRENT_TASKS = 2

# Project-local directory the orchestrator writes task artifacts into
ARTIFACTS_DIR_NAME = os.path.join(".repochief", "artifacts")

# Directory the recorder writes .cast files and the demo script into
RECORDINGS_DIR_NAME = "recordings"

E2E_SESSION = "e2e-test-todo"
E2E_TIMEOUT_SEC = 30.0


def session_name(scenario: str) -> str:
    """Orchestrator session name for a demo run: todo-demo-<scenario>."""
    return f"todo-demo-{scenario}"


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean env var. Only the literal 'true' (any case) is true."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() == "true"


def env_int(name: str, default: int) -> int:
    """Read a positive integer env var, falling back on junk or zero."""
    raw = os.getenv(name, "")
    try:
        value = int(raw)
    except ValueError:
        return default
    return value or default


def resolve_artifacts_dir(project_dir: str | Path | None = None) -> Path:
    """Resolve artifacts root: ENV_ARTIFACTS_DIR > <project>/.repochief/artifacts."""
    explicit = os.getenv(ENV_ARTIFACTS_DIR)
    if explicit:
        return Path(explicit).expanduser()
    base = Path(project_dir) if project_dir else Path.cwd()
    return base / ARTIFACTS_DIR_NAME


def resolve_recordings_dir(project_dir: str | Path | None = None) -> Path:
    base = Path(project_dir) if project_dir else Path.cwd()
    return base / RECORDINGS_DIR_NAME
