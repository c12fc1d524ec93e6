"""CLI entry point for version-tracker."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from version_tracker import __version__
from version_tracker.config import TrackerSettings, validate_tracker_config
from version_tracker.models import TrackerConfig
from version_tracker.probe import ProbeRunner
from version_tracker.storage import ProjectDocument, locate_project
from version_tracker.tracker import VersionEntryBuilder, update_build_log
from version_tracker.utils.atomic import AtomicWriteError
from version_tracker.utils.logging import (
    configure_logging,
    get_logger,
    set_command,
    set_project_version,
)
from version_tracker.utils.result import ExitCode


class Context:
    """CLI context for sharing state between commands."""

    def __init__(
        self,
        log_level: Optional[str],
        log_format: Optional[str],
        cwd: Path,
    ) -> None:
        self.log_level = log_level
        self.log_format = log_format
        self.cwd = cwd
        self.logger = get_logger("cli")

    def apply_settings(self, settings: TrackerSettings) -> None:
        """Reconfigure logging from document settings unless flags were given."""
        configure_logging(
            level=self.log_level or settings.logging.level,
            format_type=self.log_format or settings.logging.format,
        )

    def fail(self, code: int, message: str, **details: object) -> NoReturn:
        """Report an error as JSON and exit with code."""
        self.logger.error("command_failed", code=code, message=message)
        output_json({"status": "error", "code": code, "message": message, **details})
        sys.exit(code)


pass_context = click.make_pass_decorator(Context)


def output_json(data: dict) -> None:
    """Output JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=str))


def open_project(
    ctx: Context,
    project: Optional[Path],
    log_file: Optional[Path] = None,
    create: bool = False,
) -> tuple[ProjectDocument, TrackerSettings]:
    """Locate and load the project document and apply its settings."""
    located = locate_project(project, ctx.cwd, create=create)
    if located.is_err():
        ctx.fail(ExitCode.PROJECT_NOT_FOUND, str(located.unwrap_err()))

    loaded = ProjectDocument.load(located.unwrap(), log_override=log_file)
    if loaded.is_err():
        ctx.fail(ExitCode.STORAGE_READ_FAILED, str(loaded.unwrap_err()))
    document = loaded.unwrap()

    settings = TrackerSettings.from_dict(document.raw_settings)
    if settings.is_err():
        ctx.fail(ExitCode.CONFIG_MALFORMED, str(settings.unwrap_err()))
    ctx.apply_settings(settings.unwrap())
    return document, settings.unwrap()


def load_project(
    ctx: Context,
    project: Optional[Path],
    log_file: Optional[Path] = None,
    create: bool = False,
) -> tuple[ProjectDocument, TrackerSettings, TrackerConfig]:
    """Open the project document and validate its track list."""
    document, settings = open_project(ctx, project, log_file, create=create)

    config = validate_tracker_config(document.raw_track)
    if config.is_err():
        ctx.fail(ExitCode.CONFIG_MALFORMED, str(config.unwrap_err()))

    return document, settings, config.unwrap()


def make_runner(ctx: Context, settings: TrackerSettings, timeout: Optional[float]) -> ProbeRunner:
    return ProbeRunner(
        timeout=timeout if timeout is not None else settings.probe_timeout,
        cwd_provider=lambda: ctx.cwd,
    )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level (default: from settings, else info)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format (default: from settings, else text)",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    Version Tracker - record the toolchain behind each successful build.

    Probes the configured executables (runtime, package manager, VCS client)
    and files their versions under the project version, newest first, so a
    working environment can be reproduced later.
    """
    configure_logging(level=log_level or "info", format_type=log_format or "text")

    ctx.obj = Context(
        log_level=log_level,
        log_format=log_format,
        cwd=Path.cwd(),
    )
    set_command(ctx.invoked_subcommand or "")


@cli.command()
@click.option(
    "--project",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Project document (default: nearest one above the working directory)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Store the build log in this file instead of the project document",
)
@click.option(
    "--project-version",
    default=None,
    help="Version to record under (default: the document's 'version')",
)
@click.option("--indent", type=click.IntRange(0, 8), default=None, help="Output indent")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Seconds allowed per probe command")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show the updated log without writing it",
)
@pass_context
def generate(
    ctx: Context,
    project: Optional[Path],
    log_file: Optional[Path],
    project_version: Optional[str],
    indent: Optional[int],
    timeout: Optional[float],
    dry_run: bool,
) -> None:
    """Probe the toolchain and record it for the current project version."""
    document, settings, config = load_project(ctx, project, log_file, create=not dry_run)

    version = project_version or document.project_version
    set_project_version(version)

    stored = document.load_build_log()
    if stored.is_err():
        ctx.fail(ExitCode.STORAGE_READ_FAILED, str(stored.unwrap_err()))

    ctx.logger.info(
        "generate_started",
        project=str(document.path),
        trackables=config.names(),
    )

    builder = VersionEntryBuilder(runner=make_runner(ctx, settings, timeout))
    result = update_build_log(config, version, stored.unwrap(), builder)

    summary = {
        "version": version,
        "added": result.added,
        "record": result.record.to_dict(),
        "versions": result.log.versions(),
    }

    if dry_run:
        output_json({"status": "dry_run", **summary, "log": result.log.to_dict()})
        return

    try:
        written = document.save_build_log(
            result.log,
            indent=indent if indent is not None else settings.indent,
        )
    except AtomicWriteError as e:
        ctx.fail(ExitCode.STORAGE_WRITE_FAILED, str(e))

    output_json({"status": "success", **summary, "path": str(written)})


@cli.command()
@click.option(
    "--project",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Project document (default: nearest one above the working directory)",
)
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Seconds allowed per probe command")
@click.option("--verbose", is_flag=True, default=False, help="Include every attempted command")
@pass_context
def probe(
    ctx: Context,
    project: Optional[Path],
    timeout: Optional[float],
    verbose: bool,
) -> None:
    """Show the record the current machine would produce, without saving it."""
    _, settings, config = load_project(ctx, project)

    builder = VersionEntryBuilder(runner=make_runner(ctx, settings, timeout))
    record, results = builder.inspect(config.trackables)

    data = {"status": "success", "record": record.to_dict()}
    if verbose:
        data["probes"] = [r.to_dict() for r in results]
    output_json(data)


@cli.command()
@click.option(
    "--project",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Project document (default: nearest one above the working directory)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Read the build log from this file",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format",
)
@pass_context
def history(
    ctx: Context,
    project: Optional[Path],
    log_file: Optional[Path],
    output_format: str,
) -> None:
    """Show recorded builds, most recently built version first."""
    document, _ = open_project(ctx, project, log_file)

    stored = document.load_build_log()
    if stored.is_err():
        ctx.fail(ExitCode.STORAGE_READ_FAILED, str(stored.unwrap_err()))
    log = stored.unwrap()

    if output_format == "json":
        output_json(log.to_dict())
        return

    click.echo(f"Build history for {document.path}")
    click.echo("=" * 40)
    if not len(log):
        click.echo("No builds recorded")
        return

    for version, records in log.items():
        click.echo(f"{version} ({len(records)} build{'s' if len(records) != 1 else ''})")
        for record in records:
            click.echo(f"  [{record.platform}]")
            for name, found in record.executables.items():
                click.echo(f"    {name}: {found if found is not None else 'not found'}")


@cli.command()
@click.option(
    "--path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to create the document (default: ./version_tracker.json)",
)
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing document")
@pass_context
def init(ctx: Context, path: Optional[Path], force: bool) -> None:
    """Create a skeleton project document."""
    from version_tracker.storage import DEFAULT_PROJECT_FILE, bootstrap_project

    target = path or ctx.cwd / DEFAULT_PROJECT_FILE
    if target.exists() and not force:
        ctx.fail(
            ExitCode.GENERAL_ERROR,
            f"{target} already exists (use --force to overwrite)",
        )

    try:
        bootstrap_project(target)
    except AtomicWriteError as e:
        ctx.fail(ExitCode.STORAGE_WRITE_FAILED, str(e))

    output_json({"status": "success", "path": str(target)})


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
