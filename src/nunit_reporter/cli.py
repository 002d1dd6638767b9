"""
Command-line interface for the NUnit reporter.
"""

import logging
import sys
from typing import Optional

import click

from .config import ConfigurationError, load_config, validate_config
from .exceptions import ReportWriteError, ResultsFileError
from .loader import load_sessions
from .reporting import NUnitReporter
from .writer import write_report

logger = logging.getLogger(__name__)


@click.command()
@click.argument("results_file", type=click.Path(dir_okay=False))
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to configuration file (YAML)",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    help="Report output path (overrides config)",
)
@click.option(
    "--root-dir",
    type=click.Path(file_okay=False),
    help="Root directory test file paths are reported relative to (overrides config)",
)
@click.option(
    "--name",
    "report_name",
    type=str,
    help="Name attribute of the report (overrides config)",
)
@click.option(
    "--stdout",
    is_flag=True,
    default=False,
    help="Print the report instead of writing it to a file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="WARNING",
    help="Logging level",
)
def main(
    results_file: str,
    config: Optional[str],
    output: Optional[str],
    root_dir: Optional[str],
    report_name: Optional[str],
    stdout: bool,
    log_level: str,
) -> None:
    """
    NUnit Reporter - Convert test session results into an NUnit 2 XML report.

    RESULTS_FILE is a JSON or YAML file holding the finished test sessions.

    Examples:

      # Write ./test-report.xml
      nunit-report results.json

      # Custom output location and report name
      nunit-report results.json --output reports/nunit.xml --name "Browser tests"

      # Print the report
      nunit-report results.yaml --stdout
    """
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    try:
        reporter_config = load_config(config)

        if output:
            reporter_config.output_path = output
        if root_dir:
            reporter_config.root_dir = root_dir
        if report_name is not None:
            reporter_config.report_name = report_name

        errors = validate_config(reporter_config)
        if errors:
            click.echo("Configuration errors:", err=True)
            for error in errors:
                click.echo(f"  - {error}", err=True)
            sys.exit(1)

        sessions = load_sessions(results_file)

        reporter = NUnitReporter(
            name=reporter_config.report_name,
            root_dir=str(reporter_config.resolved_root_dir()),
        )
        doc, total = reporter.assemble(sessions)
        report = reporter.serialize(doc)

        if stdout:
            click.echo(report)
        else:
            path = write_report(report, reporter_config.resolved_output_path())
            click.echo(f"Report written to: {path}")

        request_errors = sum(len(s.request_errors) for s in sessions)
        click.echo(
            f"{total.total} tests, {total.failures} failures, {total.skipped} skipped, "
            f"{request_errors} request errors",
            err=stdout,
        )

        sys.exit(0 if total.success and request_errors == 0 else 1)

    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except (FileNotFoundError, ResultsFileError) as e:
        logger.error("Unable to load input: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ReportWriteError as e:
        logger.error("Report write failed: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
