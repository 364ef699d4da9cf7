"""Demo recorder — runs the demo under asciinema and prints conversion hints.

asciinema is required; ffmpeg only matters for the optional video step,
so a missing ffmpeg is a warning.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import stat
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click

from repochief_demo.defaults import ENV_MOCK_MODE, ENV_PRESETS_DIR, ENV_SCENARIO, resolve_recordings_dir
from repochief_demo.errors import ConfigurationError, DemoError
from repochief_demo.fs import atomic_write_file, file_timestamp

log = logging.getLogger(__name__)

SCRIPT_NAME = "demo-script.sh"

_SCRIPT_TEMPLATE = """#!/bin/bash
set -e

# Clear screen and show banner
clear
echo -e "\\033[1;36m"
figlet -f slant "RepoChief" 2>/dev/null || echo "RepoChief"
echo -e "\\033[0m"
echo "AI Agent Orchestration Platform - Demo Recording"
echo "================================================"
echo ""
sleep 3

# Run the demo with enhanced output
{env_prefix}{python} -m repochief_demo run --verbose --non-interactive

echo ""
echo "Demo completed! Press any key to exit..."
read -n 1
"""


@dataclass(frozen=True)
class RecordingSettings:
    scenario: str = "basic"
    mock_mode: bool = True
    with_audio: bool = False
    presets_dir: Optional[Path] = None

    def env(self) -> dict[str, str]:
        """Variables the recorded run needs to select the same scenario."""
        env = {
            ENV_SCENARIO: self.scenario,
            ENV_MOCK_MODE: "true" if self.mock_mode else "false",
        }
        if self.presets_dir is not None:
            env[ENV_PRESETS_DIR] = str(Path(self.presets_dir).resolve())
        return env


class DemoRecorder:
    def __init__(self, output_dir: Optional[Path] = None) -> None:
        self.output_dir = Path(output_dir) if output_dir else resolve_recordings_dir()
        self.timestamp = file_timestamp()

    @property
    def script_path(self) -> Path:
        return self.output_dir / SCRIPT_NAME

    def output_file(self, settings: RecordingSettings) -> Path:
        return self.output_dir / f"repochief-demo-{settings.scenario}-{self.timestamp}.cast"

    def check_prerequisites(self) -> None:
        click.secho("Checking prerequisites...", fg="yellow")
        if shutil.which("asciinema") is None:
            raise ConfigurationError("asciinema not found. Install with: brew install asciinema")
        if shutil.which("ffmpeg") is None:
            click.secho("⚠️  ffmpeg not found. Install for video conversion.", fg="yellow")
        click.secho("✓ Prerequisites satisfied\n", fg="green")

    def prepare(self, settings: RecordingSettings) -> Path:
        """Write the demo script the recording runs. Returns its path."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        env_prefix = "".join(f"{k}={shlex.quote(v)} \\\n" for k, v in settings.env().items())
        script = _SCRIPT_TEMPLATE.format(env_prefix=env_prefix, python=shlex.quote(sys.executable))
        atomic_write_file(str(self.script_path), script)
        mode = self.script_path.stat().st_mode
        self.script_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH | stat.S_IRGRP | stat.S_IROTH)
        return self.script_path

    def record(self, settings: RecordingSettings) -> Path:
        output = self.output_file(settings)
        cmd = [
            "asciinema", "rec", str(output),
            "--title", f"RepoChief {settings.scenario} Demo",
            "--idle-time-limit", "2",
            "--command", str(self.script_path),
        ]
        env = {**os.environ, **settings.env()}

        click.secho(f"Recording to: {output}\n", dim=True)
        log.debug("exec: %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, env=env)
        except OSError as exc:
            raise DemoError(f"Could not start asciinema: {exc}") from exc
        if proc.returncode != 0:
            raise DemoError(f"Recording failed with code {proc.returncode}")
        click.secho(f"\n✅ Recording saved to: {output}", fg="green")
        return output

    def run(self, settings: RecordingSettings) -> Path:
        click.secho("\n🎬 RepoChief Demo Recorder\n", fg="cyan", bold=True)
        self.check_prerequisites()
        self.prepare(settings)
        click.secho("\n📹 Starting recording...\n", fg="yellow")
        output = self.record(settings)
        show_next_steps(output, settings)
        return output


def show_next_steps(recording: Path, settings: RecordingSettings) -> None:
    click.secho("\n📋 Next Steps:\n", fg="yellow")

    click.echo("1. Upload to asciinema.org:")
    click.secho(f"   asciinema upload {recording}\n", dim=True)

    click.echo("2. Convert to GIF (requires agg):")
    click.secho(f"   agg {recording} demo.gif\n", dim=True)

    click.echo("3. Convert to video (requires ffmpeg):")
    click.secho("   # First convert to gif, then:", dim=True)
    click.secho("   ffmpeg -i demo.gif -movflags faststart -pix_fmt yuv420p demo.mp4\n", dim=True)

    if settings.with_audio:
        click.echo("4. Add audio narration:")
        click.secho("   # Record audio separately and merge with ffmpeg", dim=True)
