#!/bin/env python3

import logging
import sys

import click

from glimage.commands import config, manifest, repositories
from glimage.helper.utils import get_config


@click.group()
@click.option(
    "--log-level",
    "log_level",
    required=False,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level, overrides log_level of the settings file",
)
@click.pass_context
def cli(ctx, log_level):
    """Docker image metadata tool"""
    settings = get_config()["DEFAULT"]
    ctx.obj = settings
    logging.basicConfig(
        stream=sys.stderr,
        level=(log_level or settings.get("log_level")).upper(),
        force=True,
    )


cli.add_command(config.config)
cli.add_command(manifest.manifest)
cli.add_command(repositories.repositories)


if __name__ == "__main__":
    cli()
