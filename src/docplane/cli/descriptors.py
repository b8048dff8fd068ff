"""Descriptor files - YAML or JSON, one symbol mapping or a list of them."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import yaml

from docplane.annotation.models import SymbolDescriptor


def load_descriptors(path: Path) -> list[SymbolDescriptor]:
    """Read symbol descriptors; relative ``file_path`` values are resolved
    against the descriptor file's directory."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot parse descriptor file {path}: {e}") from e

    if data is None:
        return []
    entries: list[Any] = data if isinstance(data, list) else [data]

    descriptors = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise click.ClickException(
                f"Descriptor #{index} in {path} must be a mapping, got {type(entry).__name__}"
            )
        file_path = entry.get("file_path")
        if file_path and not Path(file_path).is_absolute():
            entry = {**entry, "file_path": str(path.parent / file_path)}
        descriptors.append(SymbolDescriptor.from_dict(entry))
    return descriptors
