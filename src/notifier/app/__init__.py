"""Command-line application for the notifier package."""

from notifier.app.cli import cli, main
from notifier.app.runner import NotificationRunner, RunSummary

__all__ = ["NotificationRunner", "RunSummary", "cli", "main"]
