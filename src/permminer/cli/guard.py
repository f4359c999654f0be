"""pmine guard command - report statements missing permission guards."""

import json
from pathlib import Path

import click

from permminer.cli.utils import build_model, load_cli_config
from permminer.core.errors import PermMinerError
from permminer.core.progress import pluralize, status
from permminer.guard import GuardOps


@click.command()
@click.argument("source_root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--report",
    "report_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Existing guard report (skips the analysis run)",
)
@click.option(
    "--module",
    "module_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Module directory holding the compiled application to analyze",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def guard_command(
    ctx: click.Context,
    source_root: Path,
    report_path: Path | None,
    module_dir: Path | None,
    as_json: bool,
) -> None:
    """Locate unguarded permission uses in SOURCE_ROOT.

    Pass --report to check an existing report, or --module to run the
    external analysis on the module's compiled application first.
    """
    if (report_path is None) == (module_dir is None):
        raise click.UsageError("Pass exactly one of --report or --module")

    config = load_cli_config(ctx)
    try:
        model = build_model(source_root.resolve())
        diagnostics = GuardOps(config.analysis, model).check(report_path=report_path, module_dir=module_dir)
    except PermMinerError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
        return

    for d in diagnostics:
        click.echo(f"{d.path}:{d.line}: {d.severity}: {d.message}")
        click.echo(f"    fix: {d.quick_fix_title}")
    style = "warning" if diagnostics else "success"
    status(f"{pluralize(len(diagnostics), 'unguarded statement')}", style=style)
