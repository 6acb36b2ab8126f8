from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from packlook.cmd_base import Base
from packlook.command import Command

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}


def run_cmd(cmd_name: str, *args: str) -> None:
    argv: list[str] = ["packlook", cmd_name, *args]

    cmd: Base = Command.execute(
        Path.cwd(),
        os.environ.copy(),
        argv,
        sys.stdin,
        sys.stdout,
        sys.stderr,
    )

    sys.exit(cmd.status)


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="cat-file")
@click.option("-t", "mode", flag_value="-t", help="Show the object type.")
@click.option("-s", "mode", flag_value="-s", help="Show the object size.")
@click.option("-p", "mode", flag_value="-p", help="Pretty-print the object's content.")
@click.argument("name")
def cat_file(mode: str | None, name: str) -> None:
    """Provide content or type and size information for packed objects."""
    if mode is None:
        raise click.UsageError("one of -t, -s or -p is required")

    run_cmd("cat-file", mode, name)


@cli.command(name="verify-pack")
@click.option("-v", "--verbose", is_flag=True, help="List objects and delta chains.")
@click.argument(
    "packs",
    nargs=-1,
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
)
def verify_pack(verbose: bool, packs: tuple[Path, ...]) -> None:
    """Validate packed git archive files."""
    args = ["-v"] if verbose else []
    run_cmd("verify-pack", *args, *(str(p) for p in packs))


if __name__ == "__main__":
    cli()
