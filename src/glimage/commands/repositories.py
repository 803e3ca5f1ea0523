import click

from glimage.commands._output import echo_tree, exit_on_error, format_option
from glimage.distribution.repositories import Repositories


@click.group()
def repositories():
    """Inspect repositories files of saved images"""
    pass


@repositories.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@format_option
@exit_on_error
def inspect(path, output_format):
    """Print the image name to tag to layer mapping"""
    echo_tree(Repositories.from_file(path).to_tree(), output_format)


@repositories.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("name")
@click.argument("tag")
@exit_on_error
def layer(path, name, tag):
    """Print the top layer id of NAME:TAG"""
    layer_id = Repositories.from_file(path).layer_for(name, tag)
    if layer_id is None:
        raise click.ClickException(f"{name}:{tag} not found")
    click.echo(layer_id)
