"""Load the agent template registry from YAML — named role presets for scenarios."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from repochief_demo.errors import ConfigurationError

from ._schema import REQUIRED_TEMPLATE_KEYS, VALID_TEMPLATE_KEYS
from .model import AgentTemplate

REGISTRY_FILE = "_agent-templates.yaml"


def _freeze_constraints(raw: Any, where: str) -> tuple[tuple[str, Any], ...]:
    if raw is None:
        return ()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{where}: 'constraints' must be a mapping")
    frozen = []
    for key, value in raw.items():
        if isinstance(value, list):
            value = tuple(value)
        frozen.append((str(key), value))
    return tuple(frozen)


def build_template(
    name: str,
    cfg: Any,
    valid_capabilities: set[str],
    where: str = "",
) -> AgentTemplate:
    """Validate one template mapping and turn it into an AgentTemplate."""
    where = where or f"template '{name}'"
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"{where}: must be a mapping")
    missing = REQUIRED_TEMPLATE_KEYS - set(cfg)
    if missing:
        raise ConfigurationError(f"{where}: missing required keys {sorted(missing)}")
    unknown = set(cfg) - VALID_TEMPLATE_KEYS
    if unknown:
        raise ConfigurationError(f"{where}: unknown keys {sorted(unknown)}")

    raw_caps = cfg.get("capabilities") or []
    if not isinstance(raw_caps, list) or not all(isinstance(c, str) for c in raw_caps):
        raise ConfigurationError(f"{where}: 'capabilities' must be a list of strings")
    caps = tuple(raw_caps)
    bad_caps = set(caps) - valid_capabilities
    if bad_caps:
        raise ConfigurationError(
            f"{where}: unknown capabilities {sorted(bad_caps)}. "
            f"Valid: {sorted(valid_capabilities)}"
        )
    return AgentTemplate(
        name=name,
        role=str(cfg["role"]),
        model=str(cfg["model"]),
        capabilities=caps,
        constraints=_freeze_constraints(cfg.get("constraints"), where),
    )


def load_registry(presets_dir: Path) -> tuple[dict[str, AgentTemplate], set[str]]:
    """Load and validate the template registry. Hard fail on any error.

    Returns (templates by name, valid capability names).
    """
    path = presets_dir / REGISTRY_FILE
    if not path.exists():
        raise ConfigurationError(f"Agent template registry not found at {path}")

    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Corrupt template registry {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{REGISTRY_FILE}: must be a YAML mapping")

    caps = raw.get("capabilities") or []
    if not isinstance(caps, list) or not all(isinstance(c, str) for c in caps):
        raise ConfigurationError(f"{REGISTRY_FILE}: 'capabilities' must be a list of strings")
    valid_caps = set(caps)
    if not valid_caps:
        raise ConfigurationError(f"{REGISTRY_FILE}: 'capabilities' list is empty")

    entries = raw.get("templates") or {}
    if not isinstance(entries, dict):
        raise ConfigurationError(f"{REGISTRY_FILE}: 'templates' must be a mapping")
    if not entries:
        raise ConfigurationError(f"{REGISTRY_FILE}: 'templates' dict is empty")

    templates = {
        name: build_template(name, cfg, valid_caps, where=f"{REGISTRY_FILE}: template '{name}'")
        for name, cfg in entries.items()
    }
    return templates, valid_caps


def load_templates(presets_dir: Path) -> dict[str, AgentTemplate]:
    templates, _ = load_registry(presets_dir)
    return templates
