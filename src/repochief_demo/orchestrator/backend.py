"""Backend selection — the in-process mock, or a real backend by import path."""

from __future__ import annotations

import importlib
import logging
from typing import Any, Callable

from repochief_demo.config import DemoSettings
from repochief_demo.defaults import ENV_ORCHESTRATOR
from repochief_demo.errors import ConfigurationError

from .mock import MockOrchestrator
from .protocol import Orchestrator

log = logging.getLogger(__name__)


def resolve_factory(ref: str) -> Callable[..., Any]:
    """Import `package.module:callable`. Hard fail on anything unresolvable."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"{ENV_ORCHESTRATOR} must look like 'package.module:factory', got {ref!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import orchestrator backend '{module_name}': {exc}") from exc
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigurationError(f"'{ref}' is not a callable orchestrator factory")
    return factory


def create_orchestrator(settings: DemoSettings, session_name: str) -> Orchestrator:
    """Build the orchestrator for a run. Mock mode never touches the network."""
    if settings.mock_mode:
        return MockOrchestrator(
            session_name,
            total_budget=settings.budget,
            artifacts_dir=settings.artifacts_dir,
            step_delay=settings.mock_step_delay,
        )

    settings.require_real_backend()
    assert settings.orchestrator_ref is not None
    factory = resolve_factory(settings.orchestrator_ref)
    log.info("using orchestrator backend %s", settings.orchestrator_ref)
    return factory(
        session_name=session_name,
        total_budget=settings.budget,
        api_key=settings.api_key,
        artifacts_dir=settings.artifacts_dir,
    )
