"""Click command line interface for shipping logs to Datadog.

Purpose
-------
Offer a quick way to check credentials and transports from a shell, and to
watch the dispatcher batch records locally without an account.

Contents
--------
* :func:`cli` - root group handling traceback and ``.env`` toggles.
* ``info`` / ``send`` / ``demo`` sub-commands.
* :func:`main` - entry point delegating to :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import asyncio
import itertools
import os
from typing import Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as config_module
from .adapters.console import RichConsoleClient
from .domain.config import DataDogConfig
from .domain.levels import DataDogLogLevel
from .lib_log_datadog import TRANSPORTS, build_client, summary_info
from .runtime.logger import DataDogLogger

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
API_KEY_ENV_VAR = "DATADOG_API_KEY"

_LEVEL_NAMES = [level.name.lower() for level in DataDogLogLevel]


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from the nearest .env before running commands.",
)
@click.version_option(__init__conf__.version, "--version", "-V", prog_name=__init__conf__.shell_command)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Ship log messages to Datadog without blocking the caller."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--level", "-l", type=click.Choice(_LEVEL_NAMES, case_sensitive=False), default="info", show_default=True)
@click.option("--transport", "-t", type=click.Choice(TRANSPORTS, case_sensitive=False), default="http", show_default=True)
@click.option("--api-key", envvar=API_KEY_ENV_VAR, default=None, help=f"Datadog API key (defaults to ${API_KEY_ENV_VAR}).")
@click.option("--trace-id", default="", help="Value of dd.trace_id.")
@click.option("--span-id", default="", help="Value of dd.span_id.")
@click.option("--timeout", type=float, default=None, help="Seconds to wait for delivery before giving up.")
def cli_send(
    message: str,
    level: str,
    transport: str,
    api_key: str | None,
    trace_id: str,
    span_id: str,
    timeout: float | None,
) -> None:
    """Send MESSAGE through a blocking logger and report self-log diagnostics."""

    if transport != "console" and not api_key:
        raise click.UsageError(f"--api-key or ${API_KEY_ENV_VAR} is required for the {transport} transport")
    cfg = config_module.load_config(enable_self_log=True)
    client = build_client(transport, cfg, api_key or "")
    logger = DataDogLogger.blocking(client, cfg)
    try:
        logger.log(message, DataDogLogLevel.from_name(level), trace_id=trace_id, span_id=span_id)
    finally:
        logger.close(timeout)
        close_client = getattr(client, "close", None)
        if callable(close_client):
            close_client()
    _report_selflog(logger)


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--count", "-n", type=click.IntRange(min=1), default=120, show_default=True, help="Records to emit.")
@click.option("--capacity", type=click.IntRange(min=1), default=None, help="Bound the producer channel.")
@click.option("--service", default="demo", show_default=True)
def cli_demo(count: int, capacity: int | None, service: str) -> None:
    """Run a non-blocking logger on asyncio and print each batch locally."""

    cfg = DataDogConfig(service=service, hostname="localhost", enable_self_log=True, messages_channel_capacity=capacity)
    client = RichConsoleClient()
    logger = asyncio.run(_run_demo(client, cfg, count))
    click.echo(f"emitted {count} logs in {client.batches_sent} batches")
    _report_selflog(logger, client)


async def _run_demo(client: RichConsoleClient, cfg: DataDogConfig, count: int) -> DataDogLogger:
    logger = DataDogLogger.non_blocking_with_asyncio(client, cfg)
    levels = itertools.cycle(DataDogLogLevel)
    for index in range(count):
        logger.log(f"demo message {index}", next(levels))
    logger.close()
    task = logger.dispatcher_task
    if isinstance(task, asyncio.Task):
        await task
    return logger


def _report_selflog(logger: DataDogLogger, console: RichConsoleClient | None = None) -> None:
    selflog = logger.selflog()
    messages = selflog.drain() if selflog is not None else []
    if not messages:
        return
    (console or RichConsoleClient()).print_selflog(messages)
    raise click.ClickException(f"{len(messages)} diagnostic(s) reported by the logger")


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli` and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards so
    embedding code and tests keep their own settings.
    """

    previous = (lib_cli_exit_tools.config.traceback, lib_cli_exit_tools.config.traceback_force_color)
    try:
        return int(
            lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=__init__conf__.shell_command,
            )
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback, lib_cli_exit_tools.config.traceback_force_color = previous


__all__ = ["cli", "main"]
