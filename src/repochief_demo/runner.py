"""Demo runner — plan a scenario, drive the orchestrator, print the report.

Sequence: initialize → create agents → queue tasks → execute → report →
cleanup. One orchestrator call at a time; task failures arrive as events
and end up in the report, only configuration errors and timeouts raise.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import click

from repochief_demo.config import DemoSettings
from repochief_demo.defaults import ARTIFACTS_DIR_NAME, session_name
from repochief_demo.errors import TaskFailure
from repochief_demo.orchestrator.backend import create_orchestrator
from repochief_demo.orchestrator.events import (
    CostUpdate,
    QualityGateResult,
    TaskCompleted,
    TaskFailed,
    TaskProgress,
    TaskStarted,
)
from repochief_demo.orchestrator.protocol import Agent, FinalReport, Orchestrator, QueuedTask
from repochief_demo.scenarios.loader import load_catalog
from repochief_demo.scenarios.model import AgentRequest, ScenarioCatalog
from repochief_demo.scenarios.planner import ScenarioPlan, plan_scenario

log = logging.getLogger(__name__)

OrchestratorFactory = Callable[[DemoSettings, str], Orchestrator]


def gate_icon(status: str) -> str:
    if status == "pass":
        return "✅"
    if status == "skipped":
        return "⏭️"
    return "❌"


class DemoRunner:
    def __init__(
        self,
        settings: DemoSettings,
        catalog: Optional[ScenarioCatalog] = None,
        orchestrator_factory: OrchestratorFactory = create_orchestrator,
        timeout: Optional[float] = None,
    ) -> None:
        self.settings = settings
        self.catalog = catalog
        self.orchestrator_factory = orchestrator_factory
        self.timeout = timeout
        self.orchestrator: Optional[Orchestrator] = None
        self.plan: Optional[ScenarioPlan] = None
        self.agents: dict[str, Agent] = {}
        self.queued: list[QueuedTask] = []
        self.failures: list[TaskFailure] = []
        self.gate_results: list[QualityGateResult] = []

    @property
    def session(self) -> str:
        return session_name(self.settings.scenario)

    def run(self) -> FinalReport:
        """Run the whole demo. Returns the final report; fatal errors raise."""
        click.secho("\n🚀 RepoChief TODO App Demo\n", fg="cyan", bold=True)
        if self.catalog is None:
            self.catalog = load_catalog(self.settings.presets_dir)
        self.plan = plan_scenario(self.catalog, self.settings.scenario)
        self.display_config()
        try:
            self.initialize()
            self.create_agents()
            self.queue_tasks()
            self.execute()
            return self.display_results()
        finally:
            self.cleanup()

    def display_config(self) -> None:
        assert self.plan is not None
        click.secho("Configuration:", fg="yellow")
        click.echo(f"  Scenario: {click.style(self.plan.scenario.name, bold=True)}")
        click.echo(f"  Agents: {click.style(str(len(self.plan.agents)), bold=True)}")
        click.echo(f"  Mode: {click.style(self.settings.mode_label, bold=True)}")
        click.echo(f"  Budget: {click.style(f'${self.settings.budget}', bold=True)}")
        click.echo()

    def initialize(self) -> None:
        click.echo("Initializing orchestrator...")
        self.orchestrator = self.orchestrator_factory(self.settings, self.session)
        self.orchestrator.initialize()
        click.secho("✓ Orchestrator initialized", fg="green")
        click.echo()

    def create_agents(self) -> None:
        assert self.plan is not None
        click.secho("Creating AI agent swarm...", fg="yellow")
        for request in self.plan.agents:
            self.agents[request.role] = self.create_agent(request)
        click.echo()

    def create_agent(self, request: AgentRequest) -> Agent:
        assert self.orchestrator is not None
        agent = self.orchestrator.create_agent(request.to_config())
        click.secho(f"  ✓ Created {agent.name} ({agent.role})", fg="green")
        return agent

    def queue_tasks(self) -> None:
        """Submit tasks one at a time, in plan order, bound to their role's agent."""
        assert self.plan is not None and self.orchestrator is not None
        click.secho("Queueing development tasks...", fg="yellow")
        for definition in self.plan.tasks:
            agent = self.agents[definition.role]
            task = self.orchestrator.queue_task(definition.to_spec(agent.id))
            self.queued.append(task)
            click.secho(f"  ✓ Queued: {task.objective}", fg="green")
        click.echo()

    def execute(self) -> None:
        assert self.orchestrator is not None
        click.secho("Starting execution...\n", fg="yellow")
        self.setup_event_handlers()
        self.orchestrator.start_execution()

        if not self.settings.mock_mode:
            click.secho(f'💡 Tip: Run "tmux attach -t {self.session}" to see agents in action\n', dim=True)

        click.secho("Waiting for completion...", fg="yellow")
        self.orchestrator.wait_for_completion(self.timeout)
        if self.failures:
            click.secho(f"Execution finished with {len(self.failures)} failed task(s)", fg="red")
        else:
            click.secho("All tasks completed!", fg="green")

    def setup_event_handlers(self) -> None:
        assert self.orchestrator is not None
        self.orchestrator.on("taskStarted", self._on_started)
        self.orchestrator.on("taskProgress", self._on_progress)
        self.orchestrator.on("taskCompleted", self._on_completed)
        self.orchestrator.on("taskFailed", self._on_failed)
        self.orchestrator.on("qualityGateResult", self._on_gate)
        if not self.settings.mock_mode:
            self.orchestrator.on("costUpdate", self._on_cost)

    def _on_started(self, event: TaskStarted) -> None:
        click.secho(f"🔄 Started: {event.task.objective} ({event.agent.name})", fg="blue")

    def _on_progress(self, event: TaskProgress) -> None:
        if self.settings.verbose:
            click.secho(f"   Progress: {round(event.progress * 100)}%", dim=True)

    def _on_completed(self, event: TaskCompleted) -> None:
        click.secho(f"✅ Completed: {event.task.objective}", fg="green")
        artifacts = event.result.get("artifacts")
        if artifacts:
            click.secho(f"   📁 Artifacts: {artifacts.get('path')}", dim=True)

    def _on_failed(self, event: TaskFailed) -> None:
        self.failures.append(TaskFailure(event.task.id, event.error))
        click.secho(f"❌ Failed: {event.task.objective}", fg="red", err=True)
        click.secho(f"   Error: {event.error}", fg="red", err=True)

    def _on_gate(self, event: QualityGateResult) -> None:
        self.gate_results.append(event)
        color = "green" if event.status == "pass" else ("yellow" if event.status == "skipped" else "red")
        click.secho(f"   {gate_icon(event.status)} Quality Gate: {event.gate} - {event.status}", fg=color)

    def _on_cost(self, event: CostUpdate) -> None:
        click.secho(f"💰 Cost: +${event.cost:.3f} (Total: ${event.total:.3f})", fg="yellow")

    def display_results(self) -> FinalReport:
        assert self.orchestrator is not None and self.plan is not None
        report = self.orchestrator.get_final_report()

        click.secho("\n📊 Final Report\n", fg="cyan", bold=True)
        success = report.success
        click.secho(
            f"{'✅' if success else '❌'} Status: {'SUCCESS' if success else 'FAILED'}",
            fg="green" if success else "red",
        )
        click.echo(f"📋 Tasks: {report.tasks_completed}/{report.total_tasks} completed")
        if report.tasks_failed:
            click.echo(f"   {report.tasks_failed} failed:")
            for failure in self.failures:
                click.echo(f"   - {failure.task_id}: {failure.message}")

        if not self.settings.mock_mode:
            click.echo(f"💰 Total Cost: ${report.total_cost:.2f}")
            click.echo(f"🔤 Tokens Used: {report.total_tokens:,}")

        click.echo(f"⏱  Duration: {round(report.duration_ms / 1000)}s")

        if success:
            click.secho("\n🎉 Success! TODO app has been generated.\n", fg="green", bold=True)
            click.echo("📁 Generated artifacts:")
            width = max(len(t) for t in self.plan.task_ids) + 2
            for task in self.plan.tasks:
                path = f"{ARTIFACTS_DIR_NAME}/{task.id}/"
                click.echo(f"   {path:<{len(ARTIFACTS_DIR_NAME) + width}} - {task.objective}")
            click.echo("\n💡 Next steps:")
            code_task = next((t.id for t in self.plan.tasks if t.type == "generation"), self.plan.task_ids[-1])
            click.echo(f"   1. cd {ARTIFACTS_DIR_NAME}/{code_task}")
            click.echo("   2. npm install")
            click.echo("   3. npm start")
        return report

    def cleanup(self) -> None:
        if self.orchestrator is None:
            return
        try:
            self.orchestrator.shutdown()
        except Exception as exc:
            # Shutdown problems must not mask the run's own outcome
            log.warning("orchestrator shutdown failed: %s", exc)
