import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from .cleanup import register_signal_handlers
from .config.settings import Config
from .config_loader import build_policy
from .domain.enums import Mode
from .domain.models import RunOptions
from .pipeline.scanner import split_dump
from .types import ConfigurationError, DumpSplitError
from .utils import format_bytes, setup_logging

app = typer.Typer(help="Split or process MySQL dumps: one file per table, or a single filtered stream.")


def build_run_options(
    dump: Path,
    outfile: Optional[str],
    outdir: Optional[Path],
    include: Optional[list[str]],
    exclude: Optional[list[str]],
    exclude_data: Optional[list[str]],
    mode: Optional[Mode],
    compress: bool,
    config: Optional[Path],
) -> RunOptions:
    """
    Validate command-line values into RunOptions.

    Raises:
        ConfigurationError: If the destination selection or policy is invalid
    """
    if (outfile is None) == (outdir is None):
        raise ConfigurationError("Provide either --outfile or --outdir (exactly one).")

    policy = build_policy(
        include=include,
        exclude=exclude,
        exclude_data=exclude_data,
        mode=mode,
        policy_file=config,
    )

    return RunOptions(
        dump_path=dump,
        outfile=outfile,
        outdir=outdir,
        compress=compress,
        policy=policy,
    )


@app.command("split")
def split_command(
    dump: Annotated[Path, typer.Argument(help="Path to the dump; a .gz suffix is decompressed on the fly")],
    outfile: Annotated[Optional[str], typer.Option("--outfile", "-f", help="Single file to output to. Pass - for stdout.")] = None,
    outdir: Annotated[Optional[Path], typer.Option("--outdir", "-d", help="Directory to output one file per table/view to.")] = None,
    include: Annotated[Optional[list[str]], typer.Option("--include", "-i", help="Tables to include (repeatable, comma-separated).")] = None,
    exclude: Annotated[Optional[list[str]], typer.Option("--exclude", "-e", help="Tables to exclude (repeatable, comma-separated).")] = None,
    exclude_data: Annotated[Optional[list[str]], typer.Option("--exclude-data", help="Exclude data for these tables, keep their schema.")] = None,
    mode: Annotated[Optional[Mode], typer.Option("--mode", "-m", help="Output mode: data | schema | both (default: both)")] = None,
    compress: Annotated[bool, typer.Option("--compress", "-c", help="Gzip output files.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every segment started or ignored.")] = False,
    config: Annotated[Optional[Path], typer.Option("--config", help="YAML file with include/exclude/exclude_data/mode")] = None,
    max_line_size: Annotated[Optional[int], typer.Option("--max-line-size", help="Largest accepted line in bytes (default 1 GiB)")] = None,
    log_to_file: Annotated[bool, typer.Option("--log-to-file", help="Create timestamped log files")] = False,
):
    """
    Split a MySQL dump into per-table files or filter it into one stream.

    Examples:
        dumpsplit split prod.sql.gz -d out/                       # one file per table
        dumpsplit split prod.sql -f - -i users,orders             # two tables to stdout
        dumpsplit split prod.sql -d out/ -m schema -c             # gzipped schema only
        dumpsplit split prod.sql -f slim.sql --exclude-data audit_log
    """
    setup_logging(verbose, "split", log_to_file)
    register_signal_handlers()

    try:
        settings = Config().with_max_line_bytes(max_line_size)
        options = build_run_options(
            dump, outfile, outdir, include, exclude, exclude_data, mode, compress, config
        )
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        raise typer.Exit(1)

    logging.debug(f"Settings: {settings.get_settings_summary()}")
    logging.debug(f"Maximum line size: {format_bytes(settings.reader.max_line_bytes)}")
    logging.debug(
        f"Policy: mode={options.policy.mode.value} include={sorted(options.policy.include)} "
        f"exclude={sorted(options.policy.exclude)} exclude_data={sorted(options.policy.exclude_data)}"
    )

    try:
        stats = split_dump(options, settings)
    except DumpSplitError as e:
        logging.error(str(e))
        raise typer.Exit(1)

    if stats.preamble_lines:
        logging.warning(f"{stats.preamble_lines} lines before the first table were not written")
    logging.debug(f"Split complete: {stats.summary()}")


@app.command("version")
def version():
    """Display version information."""
    from . import __version__
    typer.echo(f"dumpsplit version: {__version__}")


if __name__ == "__main__":
    app()
