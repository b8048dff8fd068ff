"""DocPlane CLI - docplane command."""

from pathlib import Path

import click

from docplane.cli.extract import (
    data_command,
    expected_exception_command,
    extract_command,
    inline_command,
    requirements_command,
)
from docplane.config.loader import load_config
from docplane.core.errors import ConfigError
from docplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="docplane")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .docplane/config.yaml (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_root: Path | None) -> None:
    """DocPlane - doc-block metadata for test runners."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


cli.add_command(requirements_command, name="requirements")
cli.add_command(expected_exception_command, name="expected-exception")
cli.add_command(data_command, name="data")
cli.add_command(inline_command, name="inline")
cli.add_command(extract_command, name="extract")


if __name__ == "__main__":
    cli()
