"""Allow ``python -m aicli``."""

from aicli.cli.main import app

app()
