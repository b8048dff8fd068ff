"""DocPlane CLI."""

from docplane.cli.main import cli

__all__ = ["cli"]
