import logging

import click

from glimage.commands._output import echo_tree, exit_on_error, format_option
from glimage.errors import BaseSchemaInvalid, ExtensionSchemaInvalid, GlimageError
from glimage.helper import digest as digest_helper
from glimage.helper import jsontree
from glimage.image.config import ImageConfiguration

logger = logging.getLogger(__name__)


def load_configuration(path: str, lenient: bool = False) -> ImageConfiguration:
    try:
        return ImageConfiguration.from_file(path)
    except ExtensionSchemaInvalid as e:
        if not lenient:
            raise
        logger.warning(f"{e}, retrying without docker extension")
        return ImageConfiguration.from_file(path, with_extension=False)


@click.group()
def config():
    """Inspect image configurations"""
    pass


@config.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--lenient",
    is_flag=True,
    default=False,
    help="Drop the docker extension if it is invalid instead of failing",
)
@format_option
@exit_on_error
def inspect(path, lenient, output_format):
    """Decode a configuration and print the merged document"""
    echo_tree(load_configuration(path, lenient).to_tree(), output_format)


@config.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def validate(path):
    """Check both layers of a configuration"""
    try:
        configuration = ImageConfiguration.from_file(path)
    except BaseSchemaInvalid as e:
        click.echo(f"base: invalid: {e.details} at {e.path}")
        if e.extension_error is not None:
            click.echo(f"extension: invalid: {e.extension_error.details} at {e.extension_error.path}")
        else:
            click.echo(f"extension: {'ok' if e.extension is not None else 'absent'}")
        raise SystemExit(1)
    except ExtensionSchemaInvalid as e:
        click.echo("base: ok")
        click.echo(f"extension: invalid: {e.details} at {e.path}")
        raise SystemExit(1)
    except GlimageError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    click.echo("base: ok")
    click.echo(f"extension: {'ok' if configuration.docker_oci_extension else 'absent'}")


@config.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--raw",
    is_flag=True,
    default=False,
    help="Digest the file as stored instead of the re-encoded configuration",
)
@click.option("--verify", "expected", required=False, help="Fail unless the file has this digest")
@exit_on_error
def digest(path, raw, expected):
    """Print the digest of a configuration"""
    if expected is not None:
        with open(path, "rb") as f:
            digest_helper.verify_sha256(expected, f.read())
        click.echo(f"{expected}: ok")
        return
    if raw:
        click.echo(digest_helper.calculate_file_sha256(path))
        return
    click.echo(ImageConfiguration.from_file(path).digest())


@config.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path())
@click.option("--indent", type=int, default=None, help="Indent the written JSON")
@exit_on_error
def normalize(path, output, indent):
    """Re-encode a configuration with sorted keys"""
    configuration = ImageConfiguration.from_file(path)
    try:
        jsontree.write_json_file(configuration.to_tree(), output, indent=indent)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Wrote {output}")
