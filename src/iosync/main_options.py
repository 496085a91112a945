"""Click option helpers for mode flags."""
from __future__ import annotations

import click

from iosync.modes import Mode


def _check_mutual_exclusion(name: str, exclusive_with: list[str], opts: dict) -> None:
    """Raise UsageError if another mode flag was also given.

    Args:
        name: Name of the current option.
        exclusive_with: Option names that may not be combined with it.
        opts: Dictionary of parsed options.

    Raises:
        click.UsageError: If a conflicting option is present.
    """
    conflicts = [other for other in exclusive_with if opts.get(other)]
    if conflicts:
        others = ", ".join(f"--{other}" for other in conflicts)
        raise click.UsageError(f"Options --{name} and {others} are mutually exclusive")


class ModeFlag(click.Option):
    """Boolean flag selecting one Mode, exclusive with the other mode flags."""

    def __init__(self, *args, **kwargs):
        """Initialize with the exclusive_with list of conflicting flags."""
        self.exclusive_with = kwargs.pop("exclusive_with", [])
        kwargs.setdefault("is_flag", True)
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Check mutual exclusion before the flag value is processed."""
        if opts.get(self.name):
            _check_mutual_exclusion(self.name, self.exclusive_with, opts)
        return super().handle_parse_result(ctx, opts, args)


def resolve_mode(relay: bool, server: bool, client: bool) -> Mode:
    """Map the mode flags to a Mode.

    Raises:
        click.UsageError: If no mode flag was given.
    """
    if relay:
        return Mode.RELAY
    if server:
        return Mode.SERVER
    if client:
        return Mode.CLIENT
    raise click.UsageError("One of --relay, --server or --client must be specified")
