"""Click CLI entrypoint — `repochief-demo <subcommand>`.

Inspection commands print JSON by default, --human for text. `run` and
`check` exit 0 on full success and 1 otherwise.
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from repochief_demo.errors import ConfigurationError, DemoError
from repochief_demo.output import output


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("repochief_demo").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


@click.group()
@click.version_option(package_name="repochief-demo")
@click.option("--human", is_flag=True, help="Human-readable output instead of JSON")
@click.option("--presets-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Scenario presets directory (default: REPOCHIEF_PRESETS_DIR or bundled)")
@click.pass_context
def cli(ctx: click.Context, human: bool, presets_dir: Optional[Path]) -> None:
    """repochief-demo — scenario runner for the RepoChief TODO app demo."""
    load_dotenv()
    ctx.ensure_object(dict)
    ctx.obj["human"] = human
    ctx.obj["presets_dir"] = presets_dir


def interactive_setup(scenarios: dict) -> dict[str, object]:
    """Ask for scenario, mode and budget the way the demo's first screen does."""
    click.echo("Available scenarios:")
    for sid, scenario in scenarios.items():
        click.echo(f"  {sid:<12} {scenario.name} - {scenario.description}")
    scenario = click.prompt(
        "Select demo scenario", type=click.Choice(list(scenarios)), default="basic",
    )
    mock_mode = click.confirm("Use mock mode? (no API calls, no costs)", default=True)
    budget = None
    if not mock_mode:
        budget = click.prompt("Set budget limit (USD)", type=click.IntRange(min=1), default=10)
    return {"scenario": scenario, "mock_mode": mock_mode, "budget": budget}


# =========================================================================
# Demo
# =========================================================================

@cli.command()
@click.option("--scenario", default=None, help="Scenario id (env: DEMO_SCENARIO)")
@click.option("--mock/--real", "mock_mode", default=None, help="Mock backend or real AI (env: MOCK_MODE)")
@click.option("--budget", type=click.IntRange(min=1), default=None, help="Budget limit in USD (env: DEMO_BUDGET)")
@click.option("--timeout", type=float, default=None, help="Give up waiting for completion after N seconds")
@click.option("--verbose", is_flag=True, help="Show progress events and tracebacks")
@click.option("--non-interactive", is_flag=True, help="Never prompt, even on a terminal")
@click.pass_context
def run(
    ctx: click.Context,
    scenario: Optional[str],
    mock_mode: Optional[bool],
    budget: Optional[int],
    timeout: Optional[float],
    verbose: bool,
    non_interactive: bool,
) -> None:
    """Run a demo scenario end to end and print the final report."""
    from repochief_demo.config import load_settings
    from repochief_demo.runner import DemoRunner
    from repochief_demo.scenarios.loader import load_catalog

    _configure_logging(verbose)
    try:
        catalog = load_catalog(ctx.obj["presets_dir"])
        overrides: dict[str, object] = {"scenario": scenario, "mock_mode": mock_mode, "budget": budget}
        no_options = all(v is None for v in overrides.values())
        if no_options and not non_interactive and _is_interactive():
            overrides = interactive_setup(catalog.scenarios)
        settings = load_settings(verbose=verbose, presets_dir=ctx.obj["presets_dir"], **overrides)
        report = DemoRunner(settings, catalog=catalog, timeout=timeout).run()
    except KeyboardInterrupt:
        click.secho("\n\n👋 Shutting down RepoChief demo...", fg="yellow")
        ctx.exit(0)
    except DemoError as exc:
        click.secho(f"\n❌ Demo failed: {exc}", fg="red", err=True)
        if verbose:
            click.echo(traceback.format_exc(), err=True)
        ctx.exit(1)
    ctx.exit(0 if report.success else 1)


@cli.command()
@click.option("--timeout", type=float, default=None, help="Seconds to wait for completion (default 30)")
@click.pass_context
def check(ctx: click.Context, timeout: Optional[float]) -> None:
    """End-to-end check: mock swarm, quality gates, artifacts."""
    from repochief_demo.defaults import E2E_TIMEOUT_SEC
    from repochief_demo.e2e import run_e2e_check

    _configure_logging(False)
    try:
        result = run_e2e_check(
            presets_dir=ctx.obj["presets_dir"],
            timeout=timeout if timeout is not None else E2E_TIMEOUT_SEC,
        )
    except DemoError as exc:
        click.secho(f"\n❌ Test failed with error: {exc}", fg="red", err=True)
        ctx.exit(1)
    ctx.exit(0 if result.passed else 1)


@cli.command()
@click.option("--scenario", default="basic", show_default=True, help="Scenario to record")
@click.option("--mock/--real", "mock_mode", default=True, show_default=True)
@click.option("--with-audio", is_flag=True, help="Print audio narration hints")
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Where .cast files go (default: ./recordings)")
@click.pass_context
def record(ctx: click.Context, scenario: str, mock_mode: bool, with_audio: bool, output_dir: Optional[Path]) -> None:
    """Record a demo run with asciinema."""
    from repochief_demo.recorder import DemoRecorder, RecordingSettings
    from repochief_demo.scenarios.loader import list_scenario_ids

    _configure_logging(False)
    valid = list_scenario_ids(ctx.obj["presets_dir"])
    if scenario not in valid:
        output({"error": f"Unknown scenario '{scenario}'. Valid: {valid}"})
    try:
        DemoRecorder(output_dir).run(
            RecordingSettings(scenario, mock_mode, with_audio, presets_dir=ctx.obj["presets_dir"])
        )
    except DemoError as exc:
        click.secho(f"\n❌ Recording failed: {exc}", fg="red", err=True)
        ctx.exit(1)


# =========================================================================
# Scenarios
# =========================================================================

@cli.command()
@click.pass_context
def scenarios(ctx: click.Context) -> None:
    """List the available scenarios."""
    from repochief_demo.scenarios.loader import load_catalog

    try:
        catalog = load_catalog(ctx.obj["presets_dir"])
    except ConfigurationError as exc:
        output({"error": str(exc)})
        return
    output(
        {"scenarios": [s.summary() for s in catalog.scenarios.values()]},
        ctx.obj["human"],
    )


@cli.command()
@click.argument("scenario")
@click.pass_context
def plan(ctx: click.Context, scenario: str) -> None:
    """Show the agents and ordered tasks a scenario queues."""
    from repochief_demo.scenarios.loader import load_catalog
    from repochief_demo.scenarios.planner import plan_scenario

    try:
        result = plan_scenario(load_catalog(ctx.obj["presets_dir"]), scenario)
    except ConfigurationError as exc:
        output({"error": str(exc)})
        return
    data = result.to_dict()
    data["execution_order"] = result.dependency_order()
    output(data, ctx.obj["human"])


def main() -> None:
    cli()