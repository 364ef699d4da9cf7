"""YAML loading, inheritance resolution, and validation for scenario presets."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from repochief_demo.defaults import DEFAULT_MAX_CONCURRENT_TASKS, ENV_PRESETS_DIR
from repochief_demo.errors import ConfigurationError

from ._schema import (
    LIST_AMEND_KEYS,
    LIST_TASK_KEYS,
    REQUIRED_AGENT_KEYS,
    REQUIRED_TASK_KEYS,
    REQUIRED_TOP_KEYS,
    VALID_AGENT_KEYS,
    VALID_AMEND_KEYS,
    VALID_TASK_KEYS,
    VALID_TOP_KEYS,
)
from .model import AgentRequest, AgentTemplate, Scenario, ScenarioCatalog, TaskDefinition
from .planner import validate_task_graph
from .templates import build_template, load_registry

log = logging.getLogger(__name__)


# Search order: env var, ~/.repochief/presets/, bundled with package
def find_presets_dir() -> Path:
    env = os.getenv(ENV_PRESETS_DIR)
    if env:
        return Path(env).expanduser()
    user_dir = Path.home() / ".repochief" / "presets"
    if user_dir.exists():
        return user_dir
    # Bundled inside the installed package (force-included by pyproject.toml)
    bundled = Path(__file__).resolve().parent.parent / "presets"
    if bundled.exists():
        return bundled
    # Dev fallback: presets/ at repo root
    return Path(__file__).resolve().parent.parent.parent.parent / "presets"


def _load_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Corrupt preset {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Preset {path} must be a YAML mapping")
    return raw


def _preset_path(name: str, presets_dir: Path) -> Path:
    """`<name>.yaml`, falling back to the `_<name>.yaml` base pattern."""
    path = presets_dir / f"{name}.yaml"
    if path.exists():
        return path
    base = presets_dir / f"_{name}.yaml"
    if base.exists():
        return base
    raise ConfigurationError(f"Scenario preset '{name}' not found at {path}")


def _require_str_list(value: object, where: str, key: str) -> None:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"{where}: '{key}' must be a list of strings")


def _merge_agents(base_agents: list, child_agents: list | None) -> list:
    """Child agents replace base agents with the same role, others are appended."""
    merged = [dict(a) for a in base_agents]
    index = {a.get("role"): i for i, a in enumerate(merged)}
    for agent in child_agents or []:
        role = agent.get("role")
        if role in index:
            merged[index[role]] = dict(agent)
        else:
            index[role] = len(merged)
            merged.append(dict(agent))
    return merged


def _apply_amendments(tasks: list[dict], amend: dict | None, name: str) -> list[dict]:
    """Append amend text to inherited tasks. Never adds or removes task nodes."""
    if not amend:
        return tasks
    if not isinstance(amend, dict):
        raise ConfigurationError(f"Scenario '{name}': 'amend' must be a mapping")
    by_id = {t.get("id"): t for t in tasks}
    for task_id, extra in amend.items():
        _pfx = f"Scenario '{name}', amend '{task_id}'"
        if task_id not in by_id:
            raise ConfigurationError(f"{_pfx}: no inherited task with that id")
        if not isinstance(extra, dict):
            raise ConfigurationError(f"{_pfx}: must be a mapping")
        unknown = set(extra) - VALID_AMEND_KEYS
        if unknown:
            raise ConfigurationError(f"{_pfx}: unknown keys {sorted(unknown)}")
        if "description" in extra and not isinstance(extra["description"], str):
            raise ConfigurationError(f"{_pfx}: 'description' must be a string")
        for key in sorted(LIST_AMEND_KEYS & set(extra)):
            _require_str_list(extra[key], _pfx, key)
        task = by_id[task_id]
        if extra.get("description"):
            current = task.get("description") or ""
            task["description"] = f"{current}\n{extra['description']}" if current else extra["description"]
        for key in ("success_criteria", "specific_checks"):
            if extra.get(key):
                task[key] = list(task.get(key) or []) + list(extra[key])
    return tasks


def _resolve_inheritance(raw: dict, presets_dir: Path, seen: tuple[str, ...] = ()) -> dict:
    """If the preset has `inherits`, load the parent chain and merge.

    Returns a flat mapping: parent tasks first, own tasks appended, then the
    preset's own `amend` block applied.
    """
    name = raw.get("name", "?")
    parent_name = raw.get("inherits")
    tasks = [dict(t) for t in raw.get("tasks") or []]
    agents = [dict(a) for a in raw.get("agents") or []]
    if parent_name:
        if parent_name in seen:
            chain = " -> ".join(seen + (parent_name,))
            raise ConfigurationError(f"Scenario '{name}': inheritance cycle {chain}")
        parent_raw = _load_yaml(_preset_path(parent_name, presets_dir))
        _validate(parent_raw, parent_name)
        parent = _resolve_inheritance(parent_raw, presets_dir, seen + (parent_name,))
        tasks = [dict(t) for t in parent["tasks"]] + tasks
        agents = _merge_agents(parent["agents"], agents)
        result = {**parent, **raw}
    else:
        result = dict(raw)
    result["tasks"] = _apply_amendments(tasks, raw.get("amend"), name)
    result["agents"] = agents
    result.pop("inherits", None)
    result.pop("amend", None)
    return result


def _validate(raw: dict, name: str) -> None:
    """Validate preset YAML — hard fail on any structural error."""
    missing = REQUIRED_TOP_KEYS - set(raw.keys())
    if missing:
        raise ConfigurationError(f"Scenario '{name}' missing required keys: {sorted(missing)}")
    unknown_top = set(raw.keys()) - VALID_TOP_KEYS
    if unknown_top:
        raise ConfigurationError(f"Scenario '{name}' has unknown top-level keys: {sorted(unknown_top)}")

    for key in ("agents", "tasks"):
        if not isinstance(raw.get(key) or [], list):
            raise ConfigurationError(f"Scenario '{name}': '{key}' must be a list")

    for agent in raw.get("agents") or []:
        if not isinstance(agent, dict):
            raise ConfigurationError(f"Scenario '{name}': agent entries must be mappings, got {agent!r}")
        _pfx = f"Scenario '{name}', agent '{agent.get('name', '?')}'"
        missing = REQUIRED_AGENT_KEYS - set(agent)
        if missing:
            raise ConfigurationError(f"{_pfx}: missing {sorted(missing)}")
        unknown = set(agent) - VALID_AGENT_KEYS
        if unknown:
            raise ConfigurationError(f"{_pfx}: unknown keys {sorted(unknown)}")

    for task in raw.get("tasks") or []:
        if not isinstance(task, dict):
            raise ConfigurationError(f"Scenario '{name}': task entries must be mappings, got {task!r}")
        _pfx = f"Scenario '{name}', task '{task.get('id', '?')}'"
        missing = REQUIRED_TASK_KEYS - set(task)
        if missing:
            raise ConfigurationError(f"{_pfx}: missing {sorted(missing)}")
        unknown = set(task) - VALID_TASK_KEYS
        if unknown:
            raise ConfigurationError(f"{_pfx}: unknown keys {sorted(unknown)}")
        for key in sorted(LIST_TASK_KEYS & set(task)):
            if task[key] is not None:
                _require_str_list(task[key], _pfx, key)
        if task.get("description") is not None and not isinstance(task["description"], str):
            raise ConfigurationError(f"{_pfx}: 'description' must be a string")


def _build_agent(
    cfg: dict,
    templates: dict[str, AgentTemplate],
    valid_caps: set[str],
    scenario: str,
) -> AgentRequest:
    ref = cfg["template"]
    where = f"Scenario '{scenario}', agent '{cfg['name']}'"
    if isinstance(ref, dict):
        template = build_template(f"{cfg['role']}-inline", ref, valid_caps, where=where)
    elif ref in templates:
        template = templates[ref]
    else:
        raise ConfigurationError(
            f"{where}: unknown template '{ref}'. Valid: {sorted(templates)}"
        )
    max_concurrent = cfg.get("max_concurrent_tasks", DEFAULT_MAX_CONCURRENT_TASKS)
    if not isinstance(max_concurrent, int) or max_concurrent <= 0:
        raise ConfigurationError(f"{where}: 'max_concurrent_tasks' must be a positive integer")
    return AgentRequest(
        role=str(cfg["role"]),
        name=str(cfg["name"]),
        template=template,
        max_concurrent_tasks=max_concurrent,
    )


def _build_task(cfg: dict) -> TaskDefinition:
    return TaskDefinition(
        id=str(cfg["id"]),
        type=str(cfg["type"]),
        objective=str(cfg["objective"]),
        role=str(cfg["role"]),
        max_tokens=cfg["max_tokens"],
        description=str(cfg.get("description") or ""),
        dependencies=tuple(cfg.get("dependencies") or ()),
        context=tuple(cfg.get("context") or ()),
        success_criteria=tuple(cfg.get("success_criteria") or ()),
        specific_checks=tuple(cfg.get("specific_checks") or ()),
        quality_gates=tuple(cfg.get("quality_gates") or ()),
    )


def load_scenario(
    scenario_id: str,
    presets_dir: str | Path | None = None,
    *,
    templates: dict[str, AgentTemplate] | None = None,
    valid_capabilities: set[str] | None = None,
) -> Scenario:
    """Load a single scenario preset from YAML, resolving inheritance."""
    presets_path = Path(presets_dir) if presets_dir else find_presets_dir()
    if templates is None or valid_capabilities is None:
        templates, valid_capabilities = load_registry(presets_path)

    raw = _load_yaml(_preset_path(scenario_id, presets_path))
    _validate(raw, scenario_id)
    resolved = _resolve_inheritance(raw, presets_path, (scenario_id,))
    _validate(resolved, scenario_id)

    agents = tuple(
        _build_agent(cfg, templates, valid_capabilities, scenario_id)
        for cfg in resolved["agents"]
    )
    tasks = tuple(_build_task(cfg) for cfg in resolved["tasks"])
    roles = [a.role for a in agents]
    if len(set(roles)) != len(roles):
        raise ConfigurationError(f"Scenario '{scenario_id}': duplicate agent roles {roles}")
    validate_task_graph(tasks, roles, scenario=scenario_id)

    return Scenario(
        id=scenario_id,
        name=str(resolved["name"]),
        description=str(resolved.get("description") or ""),
        agents=agents,
        tasks=tasks,
        session=resolved.get("session"),
    )


def list_scenario_ids(presets_dir: str | Path | None = None) -> list[str]:
    """Selectable scenario ids. Files starting with `_` are bases and registries."""
    presets_path = Path(presets_dir) if presets_dir else find_presets_dir()
    if not presets_path.exists():
        return []
    return sorted(p.stem for p in presets_path.glob("*.yaml") if not p.stem.startswith("_"))


def load_catalog(presets_dir: str | Path | None = None) -> ScenarioCatalog:
    """Load every selectable scenario into a fresh catalog. Hard fail on any bad preset."""
    presets_path = Path(presets_dir) if presets_dir else find_presets_dir()
    if not presets_path.exists():
        raise ConfigurationError(f"Scenario presets directory not found: {presets_path}")
    templates, valid_caps = load_registry(presets_path)
    scenarios: dict[str, Scenario] = {}
    for scenario_id in list_scenario_ids(presets_path):
        scenarios[scenario_id] = load_scenario(
            scenario_id, presets_path, templates=templates, valid_capabilities=valid_caps,
        )
    log.debug("loaded %d scenarios from %s", len(scenarios), presets_path)
    return ScenarioCatalog(scenarios=scenarios, templates=templates)
