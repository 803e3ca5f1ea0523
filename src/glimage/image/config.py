"""
Docker image configuration: the OCI image configuration plus the Docker
extension, both stored in the same JSON object.

The two layers are independent schemas that share the ``config`` object, so
they cannot be decoded or encoded as one type. Decoding parses the payload
once and projects the tree onto each schema; encoding serializes each layer
separately and merges the Docker tree onto the OCI tree.

For reference see
https://github.com/moby/moby/blob/master/image/spec/specs-go/v1/image.go
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import IO, Optional, Union

from glimage.errors import (
    BaseSchemaInvalid,
    ExtensionSchemaInvalid,
    UninitializedField,
)
from glimage.helper import digest as digest_helper
from glimage.helper import jsontree
from glimage.image.docker import ImageConfigurationExtension
from glimage.image.oci import Config, OciImageConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageConfiguration:
    """
    A Docker image configuration.

    ``docker_oci_extension`` is None when the payload carries no Docker
    specific field; an extension without any field is normalised to None so
    that it encodes to nothing.
    """

    oci_spec: OciImageConfiguration
    docker_oci_extension: Optional[ImageConfigurationExtension] = None

    def __post_init__(self):
        extension = self.docker_oci_extension
        if extension is not None and extension.is_empty():
            object.__setattr__(self, "docker_oci_extension", None)
        elif extension is not None and self.oci_spec.config is None:
            # the extension lives inside "config", which decodes as a base Config
            object.__setattr__(
                self, "oci_spec", dataclasses.replace(self.oci_spec, config=Config())
            )

    @classmethod
    def from_str(cls, s: str, with_extension: bool = True) -> "ImageConfiguration":
        return decode(s, with_extension=with_extension)

    @classmethod
    def from_bytes(cls, v: bytes, with_extension: bool = True) -> "ImageConfiguration":
        return decode(v, with_extension=with_extension)

    @classmethod
    def from_file(
        cls, path: Union[str, IO], with_extension: bool = True
    ) -> "ImageConfiguration":
        """
        Load an image configuration from a path or an open file.

        :raises ImageIOError: if the file cannot be read
        :raises MalformedPayload: if the content is not JSON
        :raises BaseSchemaInvalid: if the OCI layer is invalid
        :raises ExtensionSchemaInvalid: if the Docker layer is invalid
        """
        return decode_tree(jsontree.from_file(path), with_extension=with_extension)

    def to_tree(self) -> dict:
        return encode_tree(self)

    def to_json(self, indent=None) -> str:
        return jsontree.dumps(self.to_tree(), indent=indent)

    def to_bytes(self) -> bytes:
        return encode(self)

    def digest(self) -> str:
        """Content address of the encoded configuration, ``sha256:<hex>``."""
        return digest_helper.calculate_sha256(self.to_bytes())


def decode(
    data: Union[str, bytes, bytearray], with_extension: bool = True
) -> ImageConfiguration:
    """
    Decode a JSON payload into an :class:`ImageConfiguration`.

    ``with_extension=False`` skips the Docker layer entirely, which is the
    relaxed retry for payloads failing with :class:`ExtensionSchemaInvalid`.
    """
    return decode_tree(jsontree.loads(data), with_extension=with_extension)


def decode_tree(tree: jsontree.JsonTree, with_extension: bool = True) -> ImageConfiguration:
    # Both layers are always projected so that a base failure can still report
    # how the extension layer fared.
    base_error = None
    oci_spec = None
    try:
        oci_spec = OciImageConfiguration.from_tree(tree)
    except BaseSchemaInvalid as e:
        base_error = e

    extension = None
    extension_error = None
    if with_extension:
        try:
            extension = ImageConfigurationExtension.from_tree(tree)
        except ExtensionSchemaInvalid as e:
            extension_error = e
        else:
            if extension.is_empty():
                logger.debug("no docker extension fields in payload")
                extension = None
    else:
        logger.debug("docker extension skipped")

    if base_error is not None:
        base_error.extension = extension
        base_error.extension_error = extension_error
        base_error.extension_checked = with_extension
        raise base_error
    if extension_error is not None:
        raise extension_error
    return ImageConfiguration(oci_spec=oci_spec, docker_oci_extension=extension)


def encode_tree(configuration: ImageConfiguration) -> dict:
    """
    Merge both layers into one JSON tree, Docker fields overlaying OCI fields.

    :raises UnencodableField: if a value has no JSON representation
    """
    merged = configuration.oci_spec.to_tree()
    overlay = {}
    if configuration.docker_oci_extension is not None:
        overlay = configuration.docker_oci_extension.to_tree()
    return jsontree.merge(merged, overlay)


def encode(configuration: ImageConfiguration) -> bytes:
    return jsontree.dumps(encode_tree(configuration)).encode("utf-8")


def NewImageConfiguration(
    oci_spec: Optional[OciImageConfiguration] = None,
    docker_oci_extension: Optional[ImageConfigurationExtension] = None,
) -> ImageConfiguration:
    if oci_spec is None:
        raise UninitializedField("oci_spec")
    return ImageConfiguration(oci_spec=oci_spec, docker_oci_extension=docker_oci_extension)
