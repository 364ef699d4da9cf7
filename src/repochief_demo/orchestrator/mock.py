"""In-process mock orchestrator — no API calls, no costs.

Executes queued tasks on one worker thread, in queue order. queue_task()
only accepts dependencies that are already queued, so queue order is a
valid topological order. A task whose dependency failed fails too; its
siblings keep running.

Per task the worker emits:
  taskStarted → taskProgress (0.25 … 1.0) → qualityGateResult* → taskCompleted
or taskFailed at the point the task broke. Result artifacts land in
<artifacts_dir>/<session>/artifacts/<task-id>-result.json.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from repochief_demo.defaults import DEFAULT_MAX_CONCURRENT_TASKS, resolve_artifacts_dir
from repochief_demo.errors import ConfigurationError, ExecutionTimeout, TaskFailure
from repochief_demo.fs import slugify, write_json

from .events import EventStream, QualityGateResult, TaskCompleted, TaskFailed, TaskProgress, TaskStarted
from .gates import GateOutcome, check_gates
from .protocol import Agent, FinalReport, QueuedTask

log = logging.getLogger(__name__)

PROGRESS_STEPS = (0.25, 0.5, 0.75, 1.0)


class MockOrchestrator:
    """Orchestrator protocol implementation that fakes agent work."""

    def __init__(
        self,
        session_name: str,
        *,
        total_budget: float = 10,
        artifacts_dir: str | Path | None = None,
        project_dir: str | Path | None = None,
        step_delay: float = 0.0,
        fail_tasks: Iterable[str] = (),
        gate_overrides: Optional[dict[str, str]] = None,
    ) -> None:
        self.session_name = session_name
        self.total_budget = total_budget
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        root = Path(artifacts_dir) if artifacts_dir else resolve_artifacts_dir(self.project_dir)
        self.session_dir = root / session_name
        self.step_delay = step_delay
        self.fail_tasks = set(fail_tasks)
        self.gate_overrides = dict(gate_overrides or {})

        self.events = EventStream()
        self._agents: dict[str, Agent] = {}
        self._tasks: dict[str, QueuedTask] = {}
        self._status: dict[str, str] = {}
        self._failures: dict[str, str] = {}
        self._initialized = False
        self._worker: Optional[threading.Thread] = None
        self._done = threading.Event()
        self._stop = threading.Event()
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None

    @property
    def artifacts_path(self) -> Path:
        return self.session_dir / "artifacts"

    def artifact_for(self, task_id: str) -> Path:
        return self.artifacts_path / f"{task_id}-result.json"

    def status(self, task_id: str) -> str:
        return self._status[task_id]

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        self.artifacts_path.mkdir(parents=True, exist_ok=True)
        self._initialized = True
        log.debug("mock session %s initialized at %s", self.session_name, self.session_dir)

    def create_agent(self, config: dict[str, Any]) -> Agent:
        self._require_initialized()
        name = config.get("name")
        role = config.get("role")
        if not name or not role:
            raise ConfigurationError(f"Agent config needs 'name' and 'role', got {sorted(config)}")
        agent = Agent(
            id=f"agent-{len(self._agents) + 1}-{slugify(str(name), 20)}",
            name=str(name),
            role=str(role),
            model=str(config.get("model", "")),
            max_concurrent_tasks=int(config.get("max_concurrent_tasks", DEFAULT_MAX_CONCURRENT_TASKS)),
        )
        self._agents[agent.id] = agent
        return agent

    def queue_task(self, spec: dict[str, Any]) -> QueuedTask:
        self._require_initialized()
        if self._worker is not None:
            raise ConfigurationError("Cannot queue tasks after execution has started")
        task_id = spec.get("id")
        if not task_id:
            raise ConfigurationError("Task spec needs an 'id'")
        if task_id in self._tasks:
            raise ConfigurationError(f"Task '{task_id}' is already queued")
        agent_id = spec.get("agent_id", "")
        if agent_id not in self._agents:
            raise ConfigurationError(f"Task '{task_id}': unknown agent id '{agent_id}'")
        deps = tuple(spec.get("dependencies") or ())
        unknown = [d for d in deps if d not in self._tasks]
        if unknown:
            raise ConfigurationError(f"Task '{task_id}': unknown dependencies {unknown}")

        task = QueuedTask(
            id=task_id,
            objective=str(spec.get("objective", "")),
            agent_id=agent_id,
            dependencies=deps,
            quality_gates=tuple(spec.get("quality_gates") or ()),
        )
        self._tasks[task_id] = task
        self._status[task_id] = "queued"
        return task

    def on(self, event_name: str, handler: Callable[[Any], None]) -> None:
        self.events.on(event_name, handler)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def start_execution(self) -> None:
        self._require_initialized()
        if self._worker is not None:
            raise RuntimeError("Execution already started")
        self._started_at = time.monotonic()
        self._worker = threading.Thread(
            target=self._run_all, name=f"mock-{self.session_name}", daemon=True,
        )
        self._worker.start()

    def wait_for_completion(self, timeout: Optional[float] = None) -> None:
        if self._worker is None:
            raise RuntimeError("Execution has not been started")
        if not self._done.wait(timeout):
            raise ExecutionTimeout(timeout or 0.0)

    def _run_all(self) -> None:
        try:
            for task in list(self._tasks.values()):
                if self._stop.is_set():
                    break
                self._run_one(task)
        finally:
            self._finished_at = time.monotonic()
            self._done.set()
            self.events.close()

    def _run_one(self, task: QueuedTask) -> None:
        agent = self._agents[task.agent_id]
        try:
            failed_deps = [d for d in task.dependencies if self._status.get(d) != "completed"]
            if failed_deps:
                raise TaskFailure(task.id, f"dependency '{failed_deps[0]}' did not complete")

            self._status[task.id] = "running"
            self.events.emit(TaskStarted(task=task, agent=agent))
            for step in PROGRESS_STEPS:
                if self.step_delay:
                    time.sleep(self.step_delay)
                self.events.emit(TaskProgress(task=task, progress=step))
                if task.id in self.fail_tasks and step >= 0.5:
                    raise TaskFailure(task.id, "mock failure injected")

            artifact = self._write_result(task, agent)
            for outcome in self._gates_for(task, artifact):
                self.events.emit(QualityGateResult(
                    task=task, gate=outcome.gate, status=outcome.status, message=outcome.message,
                ))
        except TaskFailure as exc:
            log.info("task %s failed: %s", task.id, exc.message)
            self._fail(task, exc.message)
            return
        except Exception as exc:
            # Anything else still ends the task, never the worker
            log.exception("task %s crashed", task.id)
            self._fail(task, f"{type(exc).__name__}: {exc}")
            return

        self._status[task.id] = "completed"
        self.events.emit(TaskCompleted(
            task=task,
            result={"artifacts": {"path": str(artifact)}, "tokens": 0},
        ))

    def _fail(self, task: QueuedTask, message: str) -> None:
        self._status[task.id] = "failed"
        self._failures[task.id] = message
        self.events.emit(TaskFailed(task=task, error=message))

    def _write_result(self, task: QueuedTask, agent: Agent) -> Path:
        path = self.artifact_for(task.id)
        try:
            write_json(str(path), {
                "task_id": task.id,
                "objective": task.objective,
                "agent": agent.name,
                "role": agent.role,
                "dependencies": list(task.dependencies),
                "status": "completed",
                "mock": True,
            })
        except OSError as exc:
            raise TaskFailure(task.id, f"could not write result artifact: {exc}") from exc
        return path

    def _gates_for(self, task: QueuedTask, artifact: Path) -> list[GateOutcome]:
        outcomes = check_gates(task.quality_gates, project_dir=self.project_dir, artifact=artifact)
        return [
            GateOutcome(gate=o.gate, status=self.gate_overrides[o.gate], message="overridden")
            if o.gate in self.gate_overrides else o
            for o in outcomes
        ]

    # ------------------------------------------------------------------
    # Reporting / teardown
    # ------------------------------------------------------------------

    def get_final_report(self) -> FinalReport:
        statuses = list(self._status.values())
        duration = 0
        if self._started_at is not None:
            end = self._finished_at if self._finished_at is not None else time.monotonic()
            duration = int((end - self._started_at) * 1000)
        return FinalReport(
            tasks_completed=statuses.count("completed"),
            total_tasks=len(statuses),
            tasks_failed=statuses.count("failed"),
            total_cost=0.0,
            total_tokens=0,
            duration_ms=duration,
            failures=dict(self._failures),
        )

    def shutdown(self) -> None:
        self._stop.set()
        if self._worker is not None and self._worker.is_alive():
            self._worker.join(timeout=5)
        self.events.close()

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Orchestrator not initialized — call initialize() first")
