"""Orchestrator boundary — protocol, events, quality gates, and the mock backend."""

from repochief_demo.orchestrator.backend import create_orchestrator, resolve_factory
from repochief_demo.orchestrator.events import (
    EVENT_NAMES,
    CostUpdate,
    EventStream,
    QualityGateResult,
    TaskCompleted,
    TaskFailed,
    TaskProgress,
    TaskStarted,
    iter_events,
)
from repochief_demo.orchestrator.gates import GateOutcome, check_gate, gates_acceptable
from repochief_demo.orchestrator.mock import MockOrchestrator
from repochief_demo.orchestrator.protocol import Agent, FinalReport, Orchestrator, QueuedTask

__all__ = [
    "EVENT_NAMES",
    "Agent",
    "CostUpdate",
    "EventStream",
    "FinalReport",
    "GateOutcome",
    "MockOrchestrator",
    "Orchestrator",
    "QualityGateResult",
    "QueuedTask",
    "TaskCompleted",
    "TaskFailed",
    "TaskProgress",
    "TaskStarted",
    "check_gate",
    "create_orchestrator",
    "gates_acceptable",
    "iter_events",
    "resolve_factory",
]
