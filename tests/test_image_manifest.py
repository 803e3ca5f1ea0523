import json

import pytest

from glimage.distribution.repositories import Repositories, Repository
from glimage.errors import MalformedPayload, SchemaInvalid, UninitializedField
from glimage.image.manifest import Descriptor, ImageManifest, NewManifestItem, Platform

from helper import data_file


def expected_manifest() -> ImageManifest:
    return ImageManifest(
        [
            NewManifestItem(
                config="ee56d70bcdf1aeca472a9899de653eb4d72f4a3ac31d9b0b95e677488ce766f3.json",
                repo_tags=["postgres:15.4"],
                layers=[
                    "3b05311756d94678c1ea8e45bf7665a4e29f850c31c6f58d6c28403c6fdc0cdc/layer.tar",
                    "454d82adf13f02e53baeae05d06b595b34bbab2836977c6b679488ec038449c3/layer.tar",
                    "c039956656e1c9cd1e2d72dba02179b8d9008e0c0771af344944e218c7dc3351/layer.tar",
                ],
            )
        ]
    )


def test_deserialize_manifest():
    assert ImageManifest.from_file(data_file("manifest.json")) == expected_manifest()


def test_serde_manifest():
    deserialized = ImageManifest.from_file(data_file("manifest.json"))
    assert ImageManifest.from_str(deserialized.to_json()) == deserialized
    with open(data_file("manifest.json"), "rb") as f:
        assert deserialized.to_tree() == json.loads(f.read())


def test_manifest_lookup():
    image_manifest = expected_manifest()
    assert len(image_manifest) == 1
    assert image_manifest.find_by_tag("postgres:15.4") is image_manifest[0]
    assert image_manifest.find_by_tag("postgres:16") is None


def test_manifest_layer_sources_and_untagged():
    payload = [
        {
            "Config": "abc.json",
            "RepoTags": None,
            "Layers": ["l1/layer.tar"],
            "Parent": "sha256:parent",
            "LayerSources": {
                "sha256:l1": {
                    "mediaType": "application/vnd.docker.image.rootfs.foreign.diff.tar.gzip",
                    "digest": "sha256:l1",
                    "size": 1024,
                    "urls": ["https://example.com/l1"],
                    "platform": {"architecture": "amd64", "os": "windows", "os.version": "10.0.17763.1"},
                }
            },
        }
    ]

    image_manifest = ImageManifest.from_bytes(json.dumps(payload).encode("utf-8"))

    item = image_manifest[0]
    assert item.repo_tags is None
    assert item.layer_sources["sha256:l1"] == Descriptor(
        media_type="application/vnd.docker.image.rootfs.foreign.diff.tar.gzip",
        digest="sha256:l1",
        size=1024,
        urls=["https://example.com/l1"],
        platform=Platform(architecture="amd64", os="windows", os_version="10.0.17763.1"),
    )
    assert image_manifest.to_tree() == payload


@pytest.mark.parametrize(
    "payload, path",
    [
        ({"Config": "a.json"}, "$"),
        ([{"Config": "a.json", "RepoTags": []}], "$[0]"),
        ([{"Config": 1, "RepoTags": [], "Layers": []}], "$[0].Config"),
        ([{"Config": "a", "RepoTags": [], "Layers": [], "LayerSources": {"x": {"digest": "d"}}}], "$[0].LayerSources.x"),
    ],
)
def test_manifest_schema_invalid(payload, path):
    with pytest.raises(SchemaInvalid) as excinfo:
        ImageManifest.from_str(json.dumps(payload))
    assert excinfo.value.path == path


def test_manifest_malformed():
    with pytest.raises(MalformedPayload):
        ImageManifest.from_str("[")


def test_new_manifest_item_requires_config():
    with pytest.raises(UninitializedField, match="config"):
        NewManifestItem(layers=["a"])
    assert NewManifestItem(config="a.json").repo_tags == []


def test_deserialize_repositories():
    repositories = Repositories.from_file(data_file("repositories.json"))
    assert "postgres" in repositories
    assert repositories["postgres"] == Repository(
        {"15.4": "c039956656e1c9cd1e2d72dba02179b8d9008e0c0771af344944e218c7dc3351"}
    )
    assert repositories.layer_for("postgres", "15.4").startswith("c0399566")
    assert repositories.layer_for("postgres", "16") is None
    assert repositories.layer_for("mysql", "8") is None


def test_serde_repositories():
    deserialized = Repositories.from_file(data_file("repositories.json"))
    assert Repositories.from_str(deserialized.to_json()) == deserialized


@pytest.mark.parametrize("payload", ['{"postgres": "15.4"}', '{"postgres": {"15.4": 1}}', "[]"])
def test_repositories_schema_invalid(payload):
    with pytest.raises(SchemaInvalid):
        Repositories.from_str(payload)
