"""CLI utilities."""

from pathlib import Path

import click

from permminer.codemodel import CodeModel, JavaModelBuilder
from permminer.config import PermMinerConfig, load_config
from permminer.core.errors import PermMinerError
from permminer.core.logging import configure_logging
from permminer.core.progress import pluralize, task


def load_cli_config(ctx: click.Context, project_root: Path | None = None) -> PermMinerConfig:
    """Load config for a command and apply its logging section.

    Raises:
        click.ClickException: If the config cannot be loaded
    """
    try:
        config = load_config(project_root)
    except PermMinerError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if ctx.obj and ctx.obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    return config


def build_model(source_root: Path) -> CodeModel:
    """Parse the Java sources under ``source_root`` with progress output."""
    with task(f"Parsing {source_root}"):
        model = JavaModelBuilder().build(source_root)
    classes = sum(1 for _ in model.classes())
    click.echo(f"Loaded {pluralize(len(model.files), 'file')}, {pluralize(classes, 'class', 'classes')}", err=True)
    return model
