"""CLI entry point for slimrunner."""

import asyncio
import logging
import sys
from pathlib import Path

import typer

import slimrunner.suite
from slimrunner.errors import ConfigurationError
from slimrunner.loader import DEFAULT_CONFIG_FILE, load_config
from slimrunner.models.options import FileConfig
from slimrunner.reporters.json_summary import JsonReporter
from slimrunner.reporters.junit import junit_reporter
from slimrunner.reporters.list import ListReporter
from slimrunner.runner import ReporterFn
from slimrunner.suite import Suite

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

app = typer.Typer()

REPORTERS = ("list", "junit", "json")


def _select_reporter(name: str, junit_path: Path) -> ReporterFn:
    """Return the reporter function registered under ``name``."""
    name = name.lower()
    if name == "list":
        return ListReporter
    elif name == "junit":
        return junit_reporter(junit_path)
    elif name == "json":
        return JsonReporter
    raise ValueError(
        f"Unknown reporter: {name}. Must be one of: {', '.join(REPORTERS)}"
    )


def _read_config(config: Path | None) -> FileConfig:
    """Load the config file, the default one is optional."""
    if config is not None:
        return load_config(config)
    default = Path.cwd() / DEFAULT_CONFIG_FILE
    if default.exists():
        return load_config(default)
    return FileConfig()


def get_suite() -> Suite:
    """Suite the CLI configures and runs, test files declare into it."""
    return slimrunner.suite.default_suite


@app.command()
def main(
    files: list[str] | None = typer.Argument(  # noqa: B008
        None, help="Glob patterns of test files to run"
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None, help=f"YAML config file (default: ./{DEFAULT_CONFIG_FILE})"
    ),
    bail: bool | None = typer.Option(
        None, "--bail/--no-bail", help="Stop the run after the first failing test"
    ),
    timeout: int | None = typer.Option(
        None, help="Default test timeout in milliseconds (0 disables)"
    ),
    grep: str | None = typer.Option(
        None, help="Only run tests whose title matches this regular expression"
    ),
    reporter: str = typer.Option("list", help="Reporter (list, junit, json)"),
    junit_path: Path = typer.Option(  # noqa: B008
        Path("result.xml"), help="Output file of the junit reporter"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run test files and exit non-zero if anything failed."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        file_config = _read_config(config)
        reporter_fn = _select_reporter(reporter, junit_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    patterns = files or file_config.files
    if not patterns:
        typer.echo("Error: no test files given", err=True)
        raise typer.Exit(code=1)

    suite = get_suite()
    try:
        suite.configure(
            bail=bail if bail is not None else file_config.bail,
            timeout=timeout if timeout is not None else file_config.timeout,
            grep=grep if grep is not None else file_config.grep,
            files=patterns,
            reporter_fn=reporter_fn,
        )
    except (ConfigurationError, ValueError) as e:
        logger.error(f"Failed to configure runner: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        exit_code = asyncio.run(suite.run())
    except ConfigurationError as e:
        logger.error(f"Invalid test setup: {e}")
        typer.echo(typer.style(f"Error: {e}", fg=typer.colors.RED), err=True)
        raise typer.Exit(code=1)

    if exit_code:
        logger.error("Test run failed")
    raise typer.Exit(code=exit_code)


if __name__ == "__main__":  # pragma: no cover
    app()
