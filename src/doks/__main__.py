"""Run the CLI with ``python -m doks``."""

from doks.cli.main import app

app()
