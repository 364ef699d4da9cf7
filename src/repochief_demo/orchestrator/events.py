"""Orchestration events — tagged variants and an ordered, subscribable channel.

Two ways to consume:
  1. `on(name, handler)` — handler runs on the emitting thread, in order
  2. `subscribe()` + `iter_events()` — queue-backed receive loop
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Iterator, Optional, Union

from .protocol import Agent, QueuedTask

log = logging.getLogger(__name__)

GATE_STATUSES = ("pass", "fail", "skipped", "error")


@dataclass(frozen=True)
class TaskStarted:
    name: ClassVar[str] = "taskStarted"
    task: QueuedTask
    agent: Agent


@dataclass(frozen=True)
class TaskProgress:
    name: ClassVar[str] = "taskProgress"
    task: QueuedTask
    progress: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.progress <= 1.0:
            raise ValueError(f"progress must be within [0, 1], got {self.progress}")


@dataclass(frozen=True)
class TaskCompleted:
    name: ClassVar[str] = "taskCompleted"
    task: QueuedTask
    result: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TaskFailed:
    name: ClassVar[str] = "taskFailed"
    task: QueuedTask
    error: str


@dataclass(frozen=True)
class QualityGateResult:
    name: ClassVar[str] = "qualityGateResult"
    task: QueuedTask
    gate: str
    status: str
    message: str = ""

    def __post_init__(self) -> None:
        if self.status not in GATE_STATUSES:
            raise ValueError(f"unknown gate status {self.status!r}. Valid: {list(GATE_STATUSES)}")


@dataclass(frozen=True)
class CostUpdate:
    name: ClassVar[str] = "costUpdate"
    cost: float
    total: float


Event = Union[TaskStarted, TaskProgress, TaskCompleted, TaskFailed, QualityGateResult, CostUpdate]

EVENT_NAMES = frozenset(
    cls.name for cls in (TaskStarted, TaskProgress, TaskCompleted, TaskFailed, QualityGateResult, CostUpdate)
)

# Marks the end of a stream for queue subscribers
_CLOSED = object()


class EventStream:
    """Fan out events to handlers and subscriber queues in emission order."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        self._subscribers: list[queue.Queue] = []
        self._lock = threading.Lock()
        self._closed = False

    def on(self, event_name: str, handler: Callable[[Any], None]) -> None:
        if event_name not in EVENT_NAMES:
            raise ValueError(f"Unknown event {event_name!r}. Valid: {sorted(EVENT_NAMES)}")
        with self._lock:
            self._handlers[event_name].append(handler)

    def subscribe(self) -> "queue.Queue[Any]":
        q: "queue.Queue[Any]" = queue.Queue()
        with self._lock:
            if self._closed:
                q.put(_CLOSED)
            self._subscribers.append(q)
        return q

    def emit(self, event: Event) -> None:
        with self._lock:
            handlers = list(self._handlers.get(event.name, ()))
            subscribers = list(self._subscribers)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # A broken listener must not stop the run it is watching
                log.exception("handler for %s raised", event.name)
        for q in subscribers:
            q.put(event)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscribers = list(self._subscribers)
        for q in subscribers:
            q.put(_CLOSED)


def iter_events(q: "queue.Queue[Any]", timeout: Optional[float] = None) -> Iterator[Event]:
    """Receive loop over a subscriber queue. Stops when the stream closes.

    Raises queue.Empty if no event arrives within `timeout` seconds.
    """
    while True:
        item = q.get(timeout=timeout)
        if item is _CLOSED:
            return
        yield item
