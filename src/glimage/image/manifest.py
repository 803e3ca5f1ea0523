"""
``manifest.json`` of a saved image (``docker save``).

The file is a JSON array with one entry per image, telling where the
configuration and the layers live inside the archive.
"""

import logging
from dataclasses import dataclass
from typing import Dict, IO, List, Optional, Union

from glimage.errors import SchemaInvalid, UninitializedField
from glimage.helper import jsontree
from glimage.image.schemas import image_manifest as imageManifestSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Platform:
    architecture: str
    os: str
    os_version: Optional[str] = None
    os_features: Optional[List[str]] = None
    variant: Optional[str] = None

    @classmethod
    def from_tree(cls, tree: dict) -> "Platform":
        features = tree.get("os.features")
        return cls(
            architecture=tree["architecture"],
            os=tree["os"],
            os_version=tree.get("os.version"),
            os_features=None if features is None else list(features),
            variant=tree.get("variant"),
        )

    def to_tree(self) -> dict:
        tree = {"architecture": self.architecture, "os": self.os}
        if self.os_version is not None:
            tree["os.version"] = self.os_version
        if self.os_features is not None:
            tree["os.features"] = list(self.os_features)
        if self.variant is not None:
            tree["variant"] = self.variant
        return tree


@dataclass(frozen=True)
class Descriptor:
    """OCI content descriptor."""

    media_type: str
    digest: str
    size: int
    urls: Optional[List[str]] = None
    annotations: Optional[Dict[str, str]] = None
    platform: Optional[Platform] = None
    artifact_type: Optional[str] = None

    @classmethod
    def from_tree(cls, tree: dict) -> "Descriptor":
        urls = tree.get("urls")
        annotations = tree.get("annotations")
        platform = tree.get("platform")
        return cls(
            media_type=tree["mediaType"],
            digest=tree["digest"],
            size=tree["size"],
            urls=None if urls is None else list(urls),
            annotations=None if annotations is None else dict(annotations),
            platform=None if platform is None else Platform.from_tree(platform),
            artifact_type=tree.get("artifactType"),
        )

    def to_tree(self) -> dict:
        tree = {"mediaType": self.media_type, "digest": self.digest, "size": self.size}
        if self.urls is not None:
            tree["urls"] = list(self.urls)
        if self.annotations is not None:
            tree["annotations"] = dict(self.annotations)
        if self.platform is not None:
            tree["platform"] = self.platform.to_tree()
        if self.artifact_type is not None:
            tree["artifactType"] = self.artifact_type
        return tree


@dataclass(frozen=True)
class ManifestItem:
    # path of the configuration blob, e.g. "<sha256 hex>.json"
    config: str
    # None for untagged images, docker writes null
    repo_tags: Optional[List[str]]
    layers: List[str]
    parent: Optional[str] = None
    layer_sources: Optional[Dict[str, Descriptor]] = None

    @classmethod
    def from_tree(cls, tree: dict) -> "ManifestItem":
        repo_tags = tree["RepoTags"]
        layer_sources = tree.get("LayerSources")
        return cls(
            config=tree["Config"],
            repo_tags=None if repo_tags is None else list(repo_tags),
            layers=list(tree["Layers"]),
            parent=tree.get("Parent"),
            layer_sources=(
                None
                if layer_sources is None
                else {k: Descriptor.from_tree(v) for k, v in layer_sources.items()}
            ),
        )

    def to_tree(self) -> dict:
        tree = {
            "Config": self.config,
            "RepoTags": None if self.repo_tags is None else list(self.repo_tags),
            "Layers": list(self.layers),
        }
        if self.parent is not None:
            tree["Parent"] = self.parent
        if self.layer_sources is not None:
            tree["LayerSources"] = {k: v.to_tree() for k, v in self.layer_sources.items()}
        return tree


@dataclass(frozen=True)
class ImageManifest:
    items: List[ManifestItem]

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, index) -> ManifestItem:
        return self.items[index]

    @classmethod
    def from_tree(cls, tree: jsontree.JsonTree) -> "ImageManifest":
        jsontree.validate(tree, imageManifestSchema, SchemaInvalid)
        return cls([ManifestItem.from_tree(item) for item in tree])

    @classmethod
    def from_str(cls, s: str) -> "ImageManifest":
        return cls.from_tree(jsontree.from_str(s))

    @classmethod
    def from_bytes(cls, v: bytes) -> "ImageManifest":
        return cls.from_tree(jsontree.from_bytes(v))

    @classmethod
    def from_file(cls, path: Union[str, IO]) -> "ImageManifest":
        return cls.from_tree(jsontree.from_file(path))

    def to_tree(self) -> list:
        return [item.to_tree() for item in self.items]

    def to_json(self, indent=None) -> str:
        return jsontree.dumps(self.to_tree(), indent=indent)

    def find_by_tag(self, tag: str) -> Optional[ManifestItem]:
        for item in self.items:
            if item.repo_tags and tag in item.repo_tags:
                return item
        logger.debug(f"no manifest item tagged {tag}")
        return None


def NewManifestItem(
    config: Optional[str] = None,
    repo_tags: Optional[List[str]] = None,
    layers: Optional[List[str]] = None,
    parent: Optional[str] = None,
    layer_sources: Optional[Dict[str, Descriptor]] = None,
) -> ManifestItem:
    """
    Assemble a manifest item. ``repo_tags`` and ``layers`` default to empty.

    :raises UninitializedField: if ``config`` is missing
    """
    if config is None:
        raise UninitializedField("config")
    return ManifestItem(
        config=config,
        repo_tags=[] if repo_tags is None else list(repo_tags),
        layers=[] if layers is None else list(layers),
        parent=parent,
        layer_sources=layer_sources,
    )
