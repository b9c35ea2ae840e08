"""lintgraft CLI - code quality bootstrap for Flutter and React Native projects.

Commands:
    install - Fetch the template bundle and merge it into a project
    env     - Convert .env files into Flutter build arguments
    doctor  - Check that a project is set up correctly
"""
from __future__ import annotations

import click

from ..contracts import LINTGRAFT_VERSION
from .doctor_cmd import doctor_command
from .env_cmd import env_group
from .install_cmd import install_command


@click.group()
@click.version_option(version=LINTGRAFT_VERSION, prog_name="lintgraft")
def cli() -> None:
    """lintgraft - idempotent lint, hook and CI bootstrap."""


cli.add_command(install_command, name="install")
cli.add_command(env_group, name="env")
cli.add_command(doctor_command, name="doctor")


def main() -> None:
    """CLI entry point."""
    cli(prog_name="lintgraft")


if __name__ == "__main__":
    main()
