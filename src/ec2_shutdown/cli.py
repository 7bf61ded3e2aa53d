"""Command-line interface for EC2 Shutdown Manager.

Stops or checks the status of EC2 instances listed in a configuration file or
given on the command line. This module is the only place that decides the
process exit code.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv

from .arguments import ParseResult, resolve_arguments
from .client import InstanceDirectoryClient
from .config import load_config
from .exceptions import ArgumentError, ConfigurationError, ShutdownError, StopInstancesError
from .reporting import ConsoleReporter
from .workflow import ShutdownWorkflow

app = typer.Typer(
    name="ec2-shutdown",
    help="EC2 Shutdown Manager - stop or check EC2 instances",
    rich_markup_mode="rich",
    add_completion=False,
)

logger = logging.getLogger(__name__)


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def shutdown(
    args: list[str] | None = typer.Argument(
        None, help="--status ID..., --all, --instances ID... or bare instance ids", show_default=False
    ),
    config_path: Path | None = typer.Option(None, "--config", help="Configuration file (JSON or YAML)"),
    region: str | None = typer.Option(None, help="AWS region, overrides configuration"),
    strict: bool = typer.Option(False, "--strict", help="Reject unusable arguments instead of ignoring them"),
) -> None:
    """Stop EC2 instances, or check their status.

    [bold]ec2-shutdown[/bold]: stop instances from the config file

    [bold]ec2-shutdown --status ID...[/bold]: check the given instances, or the config file ones

    [bold]ec2-shutdown --all[/bold]: stop all instances from the config file

    [bold]ec2-shutdown --instances ID...[/bold]: stop exactly the given instances

    [bold]ec2-shutdown ID...[/bold]: stop the given instances
    """
    reporter = ConsoleReporter()
    reporter.banner("EC2 Shutdown Manager")
    reporter.blank()

    try:
        config = load_config(config_path)
        if region:
            config = config.model_copy(update={"aws_region": region})
        logging.getLogger(__package__).setLevel(config.log_level)

        parsed = resolve_arguments(args or [], config.instances)
        _report_issues(parsed, strict or config.strict_arguments, reporter)

        intent = parsed.intent
        logger.debug("Resolved intent: %s", intent)
        if intent.source_mode.uses_config and config.source_path is None:
            raise ConfigurationError(
                "No configuration file found; pass --config or instance ids", config_key="instances"
            )

        workflow = ShutdownWorkflow(InstanceDirectoryClient(config), reporter)
        workflow.run(intent)

    except ArgumentError as e:
        reporter.error(str(e))
        sys.exit(2)
    except StopInstancesError as e:
        reporter.blank()
        reporter.error(f"Failed to stop instances: {e}")
        sys.exit(1)
    except ShutdownError as e:
        reporter.error(str(e))
        sys.exit(1)

    reporter.blank()
    reporter.banner("Operation Complete")


def _report_issues(parsed: ParseResult, strict: bool, reporter: ConsoleReporter) -> None:
    """Warn about unusable arguments, or reject them in strict mode."""
    if parsed.ok:
        return

    if strict:
        for issue in parsed.issues:
            reporter.error(str(issue))
        raise ArgumentError("Invalid arguments (strict mode)", issues=parsed.issues)

    for issue in parsed.issues:
        reporter.warning(f"{issue} (ignored)")


def main() -> None:
    """Main CLI entry point."""
    # .env from the working directory only, never a parent directory
    load_dotenv(Path.cwd() / ".env", override=False)
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app()


if __name__ == "__main__":
    main()
