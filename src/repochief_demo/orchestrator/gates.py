"""Quality gate resolution for the mock backend.

The mock never runs the real tools. Each gate checks for the files the tool
would need and reports `skipped` when they are absent:
  1. eslint     — an eslint config in the project dir
  2. test       — a package.json with a "test" script in the project dir
  3. complexity — the task's result artifact exists and is not empty
"""

from __future__ import annotations

import glob as globmod
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

# Statuses that do not sink an overall verdict
ACCEPTABLE_STATUSES = {"pass", "skipped"}

ESLINT_CONFIGS = (
    ".eslintrc",
    ".eslintrc.*",
    "eslint.config.*",
)


@dataclass(frozen=True)
class GateOutcome:
    gate: str
    status: str
    message: str

    @property
    def acceptable(self) -> bool:
        return self.status in ACCEPTABLE_STATUSES


def check_gate(
    gate: str,
    *,
    project_dir: Path,
    artifact: Optional[Path] = None,
) -> GateOutcome:
    """Resolve a single gate. Unknown gate names report `error`."""
    if gate == "eslint":
        return _check_eslint(project_dir)
    if gate == "test":
        return _check_test_script(project_dir)
    if gate == "complexity":
        return _check_artifact(gate, artifact)
    return GateOutcome(gate=gate, status="error", message=f"unknown quality gate '{gate}'")


def check_gates(
    gates: Iterable[str],
    *,
    project_dir: Path,
    artifact: Optional[Path] = None,
) -> list[GateOutcome]:
    return [check_gate(g, project_dir=project_dir, artifact=artifact) for g in gates]


def gates_acceptable(statuses: Iterable[str]) -> bool:
    """`skipped` counts as not applicable; `fail` and `error` sink the verdict."""
    return all(s in ACCEPTABLE_STATUSES for s in statuses)


def count_statuses(statuses: Iterable[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for s in statuses:
        counts[s] = counts.get(s, 0) + 1
    return counts


# ---------------------------------------------------------------------------
# Gate implementations
# ---------------------------------------------------------------------------

def _check_eslint(project_dir: Path) -> GateOutcome:
    for pattern in ESLINT_CONFIGS:
        if globmod.glob(str(project_dir / pattern)):
            return GateOutcome(gate="eslint", status="pass", message=f"eslint config found ({pattern})")
    return GateOutcome(gate="eslint", status="skipped", message=f"no eslint config in {project_dir}")


def _check_test_script(project_dir: Path) -> GateOutcome:
    pkg = project_dir / "package.json"
    if not pkg.is_file():
        return GateOutcome(gate="test", status="skipped", message=f"no package.json in {project_dir}")
    try:
        scripts = json.loads(pkg.read_text()).get("scripts") or {}
    except (OSError, json.JSONDecodeError, AttributeError) as exc:
        return GateOutcome(gate="test", status="error", message=f"unreadable package.json: {exc}")
    if not scripts.get("test"):
        return GateOutcome(gate="test", status="skipped", message="package.json has no test script")
    return GateOutcome(gate="test", status="pass", message="test script present")


def _check_artifact(gate: str, artifact: Optional[Path]) -> GateOutcome:
    """File must exist and not be empty."""
    if artifact is None:
        return GateOutcome(gate=gate, status="error", message="no artifact to inspect")
    if not artifact.is_file():
        return GateOutcome(gate=gate, status="fail", message=f"'{artifact}' not found")
    if artifact.stat().st_size == 0:
        return GateOutcome(gate=gate, status="fail", message=f"'{artifact}' exists but is empty")
    return GateOutcome(gate=gate, status="pass", message=f"'{artifact.name}' satisfied")
