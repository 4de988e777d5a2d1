"""Allow ``python -m src.triage``."""

from src.triage.cli import main

main()
