"""Command-line interface for QuarryReader."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import structlog

from quarryreader import __version__
from quarryreader.config import load_config
from quarryreader.exceptions import QuarryReaderError
from quarryreader.extractor import Document
from quarryreader.observability import configure_logging, export_prometheus, set_metrics_enabled


@click.command()
@click.version_option(version=__version__)
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--min-text-length",
    "-l",
    type=int,
    default=None,
    help="Minimum text length to consider a node [default: from config, 25]",
)
@click.option("--retry-length", type=int, default=None, help="Minimum output length before relaxing the heuristics")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, path_type=Path), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option("--text", "plain_text", is_flag=True, help="Print plain text instead of the cleaned HTML fragment")
@click.option("--show-metrics", is_flag=True, help="Print Prometheus metrics to stderr after extraction")
def cli(
    file: Path,
    min_text_length: Optional[int],
    retry_length: Optional[int],
    config_path: Optional[Path],
    log_level: Optional[str],
    plain_text: bool,
    show_metrics: bool,
) -> None:
    """Extract the main content from an HTML FILE."""
    try:
        config = load_config(config_path, min_text_length=min_text_length, retry_length=retry_length)
    except QuarryReaderError as e:
        raise click.ClickException(str(e)) from e

    if log_level:
        config.monitoring.log_level = log_level
    configure_logging(config.monitoring)
    set_metrics_enabled(config.monitoring.metrics_enabled)
    logger = structlog.get_logger("quarryreader.cli")

    try:
        content = file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise click.ClickException(f"unable to read file: {e}") from e

    try:
        document = Document(content, config.readability, logger=logger)
    except QuarryReaderError as e:
        raise click.ClickException(f"unable to create document: {e}") from e

    click.echo(document.text() if plain_text else document.content())

    if show_metrics:
        click.echo(export_prometheus(), file=sys.stderr)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
