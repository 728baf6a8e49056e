"""CLI for eventgate.

Usage:
    eventgate show-config
    eventgate levels
    eventgate send "disk full" --level fatal
"""

from pathlib import Path

import click
import yaml

from eventgate.config import Config, configure_from_config
from eventgate.emitter import (
    EventRecord,
    InvalidDSNError,
    Severity,
    ThresholdParseError,
    TransportError,
)
from eventgate.logging import configure_logging, get_logger

log = get_logger(__name__)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=Path.home() / ".eventgate" / "config.yaml",
    help="Config file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-format",
    type=click.Choice(["auto", "json", "console"]),
    default="auto",
    help="Log output format (auto picks console on a terminal)",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool, log_format: str) -> None:
    """Severity-filtered event forwarding."""
    configure_logging(
        "eventgate",
        "DEBUG" if verbose else "INFO",
        json=None if log_format == "auto" else log_format == "json",
    )
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = Config.from_file(config_path)
    except (ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    ctx.obj["verbose"] = verbose


@main.command("show-config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    config: Config = ctx.obj["config"]

    click.echo(f"DSN:        {config.redacted_dsn or '(not set, submission disabled)'}")
    click.echo(f"Threshold:  {config.threshold}")
    click.echo(f"Strict:     {config.strict}")
    tags = config.static_tags()
    if tags:
        click.echo("Tags:")
        for key, value in sorted(tags.items()):
            click.echo(f"  {key} = {value}")
    else:
        click.echo("Tags:       (none)")


@main.command("levels")
def levels() -> None:
    """List severities, most severe first."""
    for severity in Severity:
        click.echo(f"{severity.value}  {severity.level}")


@main.command("send")
@click.argument("message")
@click.option(
    "--level",
    "-l",
    type=click.Choice([s.level for s in Severity], case_sensitive=False),
    default="error",
    help="Event severity",
)
@click.pass_context
def send(ctx: click.Context, message: str, level: str) -> None:
    """Send a single event through the configured threshold.

    Runs in strict mode so an unknown threshold or a delivery failure exits
    with an error instead of being dropped.
    """
    config: Config = ctx.obj["config"]
    config.strict = True
    if not config.dsn:
        click.echo("Error: no DSN configured (set EVENTGATE_DSN or dsn in the config file)")
        raise SystemExit(1)

    try:
        router = configure_from_config(config)
    except (InvalidDSNError, ThresholdParseError) as e:
        click.echo(f"Error: {e}")
        raise SystemExit(1) from e

    sent: list[EventRecord] = []
    router.subscribe(sent.append)

    severity = Severity.from_name(level)
    try:
        router.emit(message, severity)
    except TransportError as e:
        click.echo(f"Failed to send event: {e}")
        raise SystemExit(1) from e

    if sent:
        if ctx.obj["verbose"]:
            log.info("Event sent", event_id=sent[0].event_id, level=severity.level)
        click.echo(f"Event sent: {sent[0].event_id}")
    else:
        click.echo(f"Event dropped: {severity.level} is below threshold {config.threshold}")


if __name__ == "__main__":
    main()
