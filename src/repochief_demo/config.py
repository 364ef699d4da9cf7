from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from repochief_demo.defaults import (
    DEFAULT_BUDGET,
    DEFAULT_SCENARIO,
    ENV_API_KEY,
    ENV_BUDGET,
    ENV_MOCK_MODE,
    ENV_ORCHESTRATOR,
    ENV_PRESETS_DIR,
    ENV_SCENARIO,
    env_flag,
    env_int,
    resolve_artifacts_dir,
)
from repochief_demo.errors import ConfigurationError


@dataclass(frozen=True)
class DemoSettings:
    scenario: str = DEFAULT_SCENARIO
    mock_mode: bool = True
    budget: int = DEFAULT_BUDGET
    verbose: bool = False
    api_key: Optional[str] = None
    orchestrator_ref: Optional[str] = None
    presets_dir: Optional[Path] = None
    artifacts_dir: Optional[Path] = None
    # Pause between mock progress events so a live demo is watchable
    mock_step_delay: float = 0.2

    @property
    def mode_label(self) -> str:
        return "Mock" if self.mock_mode else "Real AI"

    def with_overrides(self, **overrides: object) -> "DemoSettings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def require_real_backend(self) -> None:
        """Real mode needs an API key and a backend import path. Hard fail otherwise."""
        if self.mock_mode:
            return
        if not self.api_key:
            raise ConfigurationError(
                f"{ENV_API_KEY} must be set when mock mode is off"
            )
        if not self.orchestrator_ref:
            raise ConfigurationError(
                f"{ENV_ORCHESTRATOR} must name a backend factory (module:callable) "
                "when mock mode is off"
            )


def load_settings(**overrides: object) -> DemoSettings:
    """Build settings from the environment, then apply explicit overrides.

    Explicit values (CLI options, interactive answers) win over env vars.
    """
    presets = os.getenv(ENV_PRESETS_DIR)
    base = DemoSettings(
        scenario=os.getenv(ENV_SCENARIO) or DEFAULT_SCENARIO,
        mock_mode=env_flag(ENV_MOCK_MODE, default=True),
        budget=env_int(ENV_BUDGET, DEFAULT_BUDGET),
        api_key=os.getenv(ENV_API_KEY) or None,
        orchestrator_ref=os.getenv(ENV_ORCHESTRATOR) or None,
        presets_dir=Path(presets).expanduser() if presets else None,
        artifacts_dir=resolve_artifacts_dir(),
    )
    settings = base.with_overrides(**overrides)
    if settings.budget <= 0:
        raise ConfigurationError(f"Budget must be positive, got {settings.budget}")
    return settings
