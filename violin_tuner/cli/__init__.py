"""Command-line interface for the violin tuner."""

from .main import cli, main

__all__ = ["cli", "main"]
