"""CLI output formatting — JSON by default, human-readable with --human."""
from __future__ import annotations

import json
import sys

import click


def output(data: dict[str, object], human: bool = False) -> None:
    """Print result as JSON (default) or key: value lines. Errors go to stderr, exit 1."""
    if "error" in data:
        click.echo(json.dumps(data, indent=2, default=str), err=True)
        sys.exit(1)
    if human:
        click.echo(format_human(data))
    else:
        click.echo(json.dumps(data, indent=2, default=str))


def format_human(data: dict[str, object]) -> str:
    lines: list[str] = []
    for k, v in data.items():
        if isinstance(v, list) and v and all(isinstance(i, dict) for i in v):
            lines.append(f"{k}:")
            for item in v:
                head = item.get("id") or item.get("role") or ""
                rest = {ik: iv for ik, iv in item.items() if iv not in (None, "", [], {})}
                lines.append(f"  - {head}")
                for ik, iv in rest.items():
                    if ik in ("id",) or iv == head:
                        continue
                    lines.append(f"      {ik}: {_scalar(iv)}")
        elif isinstance(v, (list, dict)):
            lines.append(f"{k}: {json.dumps(v, indent=2, default=str)}")
        else:
            lines.append(f"{k}: {v}")
    return "\n".join(lines)


def _scalar(value: object) -> str:
    if isinstance(value, list):
        return ", ".join(str(i) for i in value)
    if isinstance(value, str) and "\n" in value:
        return value.replace("\n", "\n        ")
    return str(value)
