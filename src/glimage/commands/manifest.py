import click

from glimage.commands._output import echo_tree, exit_on_error, format_option
from glimage.image.manifest import ImageManifest


@click.group()
def manifest():
    """Inspect manifest.json of saved images"""
    pass


@manifest.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--tag", required=False, help="Only print the entry with this repo tag")
@format_option
@exit_on_error
def inspect(path, tag, output_format):
    """Print the entries of a manifest.json"""
    image_manifest = ImageManifest.from_file(path)
    if tag is None:
        echo_tree(image_manifest.to_tree(), output_format)
        return
    item = image_manifest.find_by_tag(tag)
    if item is None:
        raise click.ClickException(f"No manifest entry tagged {tag}")
    echo_tree(item.to_tree(), output_format)
