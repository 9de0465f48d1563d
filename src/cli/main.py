"""CLI entry point for peoplegraph."""

from pathlib import Path

import click

from cli.commands import contacts, graph, note
from cli.config import load_config_model
from cli.logging_config import setup_logging
from cli.utils import console
from observability import log_run_summary


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ./config.yaml or ~/.peoplegraph/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None):
    """peoplegraph - capture notes about people, match, store, graph."""
    try:
        config = load_config_model(config_path)
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        ctx.exit(1)

    level = "DEBUG" if verbose else config.logging.level
    setup_logging(json_mode=config.logging.json_output, level=level, log_file=config.paths.log_file)

    ctx.obj = {"config_path": config_path, "verbose": verbose}
    if verbose:
        ctx.call_on_close(log_run_summary)


cli.add_command(note)
cli.add_command(contacts)
cli.add_command(graph)


if __name__ == "__main__":
    cli()
