import functools
import json

import click
import yaml

from glimage.errors import GlimageError

format_option = click.option(
    "--format",
    "output_format",
    required=False,
    type=click.Choice(["json", "yaml"]),
    help="Output format, overrides format of the settings file",
)


def echo_tree(tree, output_format=None):
    settings = click.get_current_context().find_root().obj or {}
    output_format = output_format or settings.get("format", "json")
    if output_format == "yaml":
        click.echo(yaml.safe_dump(tree, sort_keys=True, default_flow_style=False), nl=False)
    else:
        click.echo(json.dumps(tree, indent=int(settings.get("indent", 4)), sort_keys=True))


def exit_on_error(command):
    """Report glimage errors as a one line message and exit code 1."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except GlimageError as e:
            click.echo(f"error: {e}", err=True)
            raise SystemExit(1)

    return wrapper
