"""lintgraft env - turn .env files into Flutter build arguments.

Usage:
    lintgraft env convert .dev.env .dart_defines/dev.json
    lintgraft env defines .dev.env          # --dart-define flags, one per line
    lintgraft env sync                      # .dev/.uat/.prod.env -> .dart_defines/
"""
from __future__ import annotations

import json
from pathlib import Path

import click

from ..patchers.env_args import dart_define_args, sync_environment_defines, to_build_args, write_defines_file


@click.group("env")
def env_group() -> None:
    """Convert environment files for flutter run/build."""


@env_group.command("convert")
@click.argument("env_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("out_json", type=click.Path(dir_okay=False))
def convert_command(env_file: str, out_json: str) -> None:
    """Write ENV_FILE as a JSON file for --dart-define-from-file."""
    args = to_build_args(env_file)
    out = write_defines_file(args, out_json)
    click.echo(f"Wrote {len(args)} variable(s) to {out}")


@env_group.command("defines")
@click.argument("env_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "json_output", is_flag=True, help="Output the parsed mapping as JSON")
def defines_command(env_file: str, json_output: bool) -> None:
    """Print --dart-define flags for ENV_FILE."""
    args = to_build_args(env_file)
    if json_output:
        click.echo(json.dumps(args, indent=2))
        return
    for flag in dart_define_args(args):
        click.echo(flag)


@env_group.command("sync")
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
def sync_command(path: str) -> None:
    """Convert .dev.env, .uat.env and .prod.env under PATH into .dart_defines/."""
    root = Path(path).resolve()
    written = sync_environment_defines(root)
    for env_name, out in written.items():
        if out is None:
            click.echo(f"  {env_name:<6} missing, skipped")
        else:
            click.echo(f"  {env_name:<6} -> {out.relative_to(root)}")
    if not any(written.values()):
        click.echo("No environment files found.", err=True)
        raise SystemExit(1)
