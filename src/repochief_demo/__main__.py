"""Entry point for `python -m repochief_demo ...`."""

from repochief_demo.cli import cli

if __name__ == "__main__":
    cli()
