"""CLI entry point — command definitions using Click.

Commands:
    init    Generate a template config file
    run     Build the code browser from a directory of XML reports (default)
"""

import functools
import logging
import sys
import time

import click

from codebrowser import __version__

LOGGER_NAME = "codebrowser"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool, log_file: str | None = None) -> logging.Logger:
    """Send package log records to stderr and, optionally, to *log_file*.

    Raises:
        ConfigError: if *log_file* cannot be opened.
    """
    from codebrowser.config import ConfigError

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot open log file '{log_file}': {exc}") from exc
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(threadName)s %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def _handle_errors(func):
    """Decorator that catches fatal run errors and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from codebrowser.adapters import UnknownAdapterError
        from codebrowser.config import ConfigError
        from codebrowser.document import ReportLoadError

        try:
            return func(*args, **kwargs)
        except UnknownAdapterError as exc:
            click.echo(f"Adapter error: {exc}", err=True)
            sys.exit(1)
        except ConfigError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)
        except ReportLoadError as exc:
            click.echo(f"Report error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

class DefaultCommandGroup(click.Group):
    """Group that hands the command line to ``run`` when no command is named.

    ``codebrowser --log reports --output out`` is the same as
    ``codebrowser run --log reports --output out``. Group options such as
    ``--config`` and ``--verbose`` go before the run options.
    """

    default_command = "run"

    def resolve_command(self, ctx, args):
        if args and args[0] not in self.commands:
            args = [self.default_command, *args]
        return super().resolve_command(ctx, args)


@click.group(
    cls=DefaultCommandGroup,
    invoke_without_command=True,
    context_settings={"ignore_unknown_options": True},
)
@click.option("--config", "config_path", default=None,
              help="Path to an optional YAML configuration file.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable debug logging.")
@click.version_option(__version__, prog_name="codebrowser")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Code browser — annotate source files with findings from XML reports."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    if ctx.invoked_subcommand is None:
        ctx.invoke(run_command)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="codebrowser.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template codebrowser.yaml file."""
    from codebrowser.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it with your report, output and source directories.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

@cli.command("run")
@click.option("--log", "log_dir", default=None,
              help="Directory holding the XML report files.")
@click.option("--output", "output_dir", default=None,
              help="Directory for the generated pages (cleared first).")
@click.option("--source", "source_dir", default=None,
              help="Project source tree. Every file is rendered, not only files with issues.")
@click.option("--logfile", "log_file", default=None,
              help="Also write log output to this file.")
@click.option("--adapter", "adapters", multiple=True,
              help="Adapter to use (repeatable). Defaults to all registered adapters.")
@click.option("--workers", type=int, default=None,
              help="Number of files processed in parallel.")
@click.pass_context
@_handle_errors
def run_command(
    ctx: click.Context,
    log_dir: str | None,
    output_dir: str | None,
    source_dir: str | None,
    log_file: str | None,
    adapters: tuple[str, ...],
    workers: int | None,
) -> None:
    """Build the code browser from the reports in --log into --output."""
    from codebrowser.browser import run
    from codebrowser.config import apply_overrides, load, validate

    config = apply_overrides(
        load(ctx.obj["config_path"]),
        log_dir=log_dir,
        output_dir=output_dir,
        source_dir=source_dir,
        log_file=log_file,
        adapters=list(adapters) or None,
        workers=workers,
    )
    validate(config)
    logger = configure_logging(ctx.obj["verbose"], config.log_file)

    logger.info("Generating code browser files")
    started = time.perf_counter()
    result = run(config, logger)
    logger.info(
        "%d page(s), %d issue(s) in %.2fs",
        len(result.rendered), result.issues, time.perf_counter() - started,
    )

    click.echo(f"Code browser written to '{config.output_dir}'", err=True)
    if result.failed:
        click.echo(f"{len(result.failed)} file(s) could not be rendered (see log).", err=True)
