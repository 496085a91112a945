"""CLI handling for iosync.

This module provides the command-line interface for iosync, handling
argument parsing via click, logging configuration, and dispatching to the
relay, server or client mode selected by the user.

Usage:
    iosync --relay [--interval SECONDS] [--verbose]
    iosync --server [--socket PATH] [--no-bridge] [--verbose]
    iosync --client [--socket PATH] [-o] [--verbose]
    iosync-xclip [-selection clipboard] [-i | -o]
"""

from __future__ import annotations

import sys

import click

from iosync.constants import DEFAULT_SOCKET_PATH, POLL_INTERVAL, SOCKET_PATH_ENVVAR
from iosync.main_logging import configure_logging
from iosync.main_options import ModeFlag, resolve_mode
from iosync.modes import FrameOutput, Mode, Settings

socket_option = click.option(
    "--socket",
    type=click.Path(dir_okay=False),
    default=DEFAULT_SOCKET_PATH,
    show_default=True,
    envvar=SOCKET_PATH_ENVVAR,
    help="Unix domain socket path",
)
verbose_option = click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
log_file_option = click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also append log records to this file",
)


@click.command()
@click.option(
    "--relay",
    cls=ModeFlag,
    exclusive_with=["server", "client"],
    help="Relay mode: watch the native clipboard and bridge stdin",
)
@click.option(
    "--server",
    cls=ModeFlag,
    exclusive_with=["relay", "client"],
    help="Server mode: serve GET/SET on the socket for a headless endpoint",
)
@click.option(
    "--client",
    cls=ModeFlag,
    exclusive_with=["relay", "server"],
    help="Client mode: send one GET or SET request to the server",
)
@socket_option
@click.option(
    "--interval",
    type=click.FloatRange(min=0.01),
    default=POLL_INTERVAL,
    show_default=True,
    help="Clipboard poll interval in seconds (relay mode)",
)
@click.option(
    "--frame-output",
    type=click.Choice([f.value for f in FrameOutput]),
    default=FrameOutput.STDERR.value,
    show_default=True,
    help="Stream carrying outbound sync frames",
)
@click.option(
    "--bridge/--no-bridge",
    default=True,
    show_default=True,
    help="Server mode: apply sync frames read from stdin",
)
@click.option(
    "-o",
    "--output",
    is_flag=True,
    help="Client mode: print the clipboard instead of setting it from stdin",
)
@verbose_option
@log_file_option
def main(
    relay: bool,
    server: bool,
    client: bool,
    socket: str,
    interval: float,
    frame_output: str,
    bridge: bool,
    output: bool,
    verbose: bool,
    log_file: str | None,
) -> None:
    """Keep one clipboard value in sync across a duplex text stream."""
    mode = resolve_mode(relay, server, client)
    settings = Settings(
        mode=mode,
        socket_path=socket,
        interval=interval,
        frame_output=FrameOutput(frame_output),
        bridge=bridge,
        output=output,
    )
    _check_frame_output(settings)

    configure_logging(verbose, log_file)

    _run_mode(settings)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-o", "out", is_flag=True, help="Print the clipboard")
@click.option("-i", "in_", is_flag=True, help="Set the clipboard from stdin (default)")
@click.option(
    "-selection",
    "-sel",
    "selection",
    default="clipboard",
    help="Accepted for xclip compatibility; only one clipboard is synchronized",
)
@socket_option
@verbose_option
def xclip_main(out: bool, in_: bool, selection: str, socket: str, verbose: bool) -> None:
    """xclip-compatible front end for the iosync socket server."""
    if out and in_:
        raise click.UsageError("Options -i and -o are mutually exclusive")

    configure_logging(verbose)

    _run_mode(Settings(mode=Mode.CLIENT, socket_path=socket, output=out))


def _check_frame_output(settings: Settings) -> None:
    """Reject sending frames on stdout while stdout carries pass-through.

    Args:
        settings: Resolved startup configuration.

    Raises:
        click.UsageError: If frames and pass-through would share stdout.
    """
    if settings.frame_output is not FrameOutput.STDOUT:
        return
    bridged = settings.mode is Mode.RELAY or (
        settings.mode is Mode.SERVER and settings.bridge
    )
    if bridged:
        raise click.UsageError(
            "--frame-output stdout conflicts with pass-through output on stdout"
        )


def _run_mode(settings: Settings) -> None:
    """Run the configured mode, turning transport failures into exit code 1.

    Args:
        settings: Resolved startup configuration.
    """
    from iosync.modes import run_mode

    try:
        run_mode(settings)
    except ConnectionError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
