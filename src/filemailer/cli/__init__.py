"""Command line interface for FileMailer."""

from .main import cli, main

__all__ = ["cli", "main"]
