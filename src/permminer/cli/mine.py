"""pmine mine command - mine permission definitions from javadoc."""

from pathlib import Path

import click

from permminer.cli.utils import build_model, load_cli_config
from permminer.core.errors import PermMinerError
from permminer.core.progress import status
from permminer.mining import MiningOps


@click.command()
@click.argument("source_root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--baseline",
    type=click.Path(path_type=Path),
    help="Baseline definition document (overrides mining.baseline_path)",
)
@click.option(
    "--out",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (overrides mining.output_dir)",
)
@click.option("--dry-run", is_flag=True, help="Compute definitions without writing documents")
@click.pass_context
def mine_command(
    ctx: click.Context,
    source_root: Path,
    baseline: Path | None,
    output_dir: Path | None,
    dry_run: bool,
) -> None:
    """Mine new permission definitions from SOURCE_ROOT.

    SOURCE_ROOT holds the Java sources (e.g. an Android SDK sources tree).
    Definitions already in the baseline or the exclusion list are left out.
    """
    config = load_cli_config(ctx)
    updates: dict[str, str] = {}
    if baseline is not None:
        updates["baseline_path"] = str(baseline)
    if output_dir is not None:
        updates["output_dir"] = str(output_dir)
    mining_config = config.mining.model_copy(update=updates)

    try:
        model = build_model(source_root.resolve())
        result = MiningOps(mining_config, model).run(write=not dry_run)
    except PermMinerError as e:
        raise click.ClickException(str(e)) from e

    counts = result.counts
    status(f"Collected {counts['collected']} definitions, {counts['after_subtraction']} not in baseline")
    status(f"{counts['final']} new definitions after overrides")
    status(f"{counts['manual']} manual, {counts['parametric']} parametric definitions")
    for path in result.written:
        status(f"Wrote {path}", style="success")
