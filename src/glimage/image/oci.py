"""
OCI image configuration, the base layer of a Docker image configuration.

For reference see https://github.com/opencontainers/image-spec/blob/main/config.md
Only the fields of the OCI specification are modelled here; everything else in
the payload is left to the Docker extension (:mod:`glimage.image.docker`).
"""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from glimage.errors import BaseSchemaInvalid, UninitializedField
from glimage.helper.jsontree import JsonTree, validate
from glimage.image.schemas import EmptyRootFs
from glimage.image.schemas import image_configuration as imageConfigurationSchema


def _set(tree: dict, key: str, value):
    if value is not None:
        tree[key] = value


def _copy_list(value: Optional[Sequence]) -> Optional[list]:
    return None if value is None else list(value)


def _as_tuple(value: Optional[Sequence]) -> Optional[tuple]:
    return None if value is None else tuple(value)


def _key_set(value: Optional[dict]) -> Optional[List[str]]:
    # ExposedPorts and Volumes are sets encoded as {"key": {}}
    return None if value is None else list(value.keys())


def _to_key_set(value: Optional[List[str]]) -> Optional[dict]:
    return None if value is None else {key: {} for key in value}


@dataclass(frozen=True)
class Config:
    """Execution parameters used as a base when running a container."""

    user: Optional[str] = None
    exposed_ports: Optional[Tuple[str, ...]] = None
    env: Optional[Tuple[str, ...]] = None
    entrypoint: Optional[Tuple[str, ...]] = None
    cmd: Optional[Tuple[str, ...]] = None
    volumes: Optional[Tuple[str, ...]] = None
    working_dir: Optional[str] = None
    # compared, not hashed
    labels: Optional[Dict[str, str]] = field(default=None, hash=False)
    stop_signal: Optional[str] = None

    def __post_init__(self):
        # sets, sorted like their encoded keys
        for name in ("exposed_ports", "volumes"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, tuple(sorted(set(value))))
        for name in ("env", "entrypoint", "cmd"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))
        if self.labels is not None:
            object.__setattr__(self, "labels", dict(self.labels))

    @classmethod
    def from_tree(cls, tree: dict) -> "Config":
        return cls(
            user=tree.get("User"),
            exposed_ports=_key_set(tree.get("ExposedPorts")),
            env=tree.get("Env"),
            entrypoint=tree.get("Entrypoint"),
            cmd=tree.get("Cmd"),
            volumes=_key_set(tree.get("Volumes")),
            working_dir=tree.get("WorkingDir"),
            labels=tree.get("Labels"),
            stop_signal=tree.get("StopSignal"),
        )

    def to_tree(self) -> dict:
        tree = {}
        _set(tree, "User", self.user)
        _set(tree, "ExposedPorts", _to_key_set(self.exposed_ports))
        _set(tree, "Env", _copy_list(self.env))
        _set(tree, "Entrypoint", _copy_list(self.entrypoint))
        _set(tree, "Cmd", _copy_list(self.cmd))
        _set(tree, "Volumes", _to_key_set(self.volumes))
        _set(tree, "WorkingDir", self.working_dir)
        _set(tree, "Labels", None if self.labels is None else dict(self.labels))
        _set(tree, "StopSignal", self.stop_signal)
        return tree


@dataclass(frozen=True)
class RootFs:
    typ: str = EmptyRootFs["type"]
    diff_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "diff_ids", tuple(self.diff_ids))

    @classmethod
    def from_tree(cls, tree: dict) -> "RootFs":
        return cls(typ=tree["type"], diff_ids=tree["diff_ids"])

    def to_tree(self) -> dict:
        return {"type": self.typ, "diff_ids": list(self.diff_ids)}


@dataclass(frozen=True)
class History:
    created: Optional[str] = None
    author: Optional[str] = None
    created_by: Optional[str] = None
    comment: Optional[str] = None
    empty_layer: Optional[bool] = None

    @classmethod
    def from_tree(cls, tree: dict) -> "History":
        return cls(
            created=tree.get("created"),
            author=tree.get("author"),
            created_by=tree.get("created_by"),
            comment=tree.get("comment"),
            empty_layer=tree.get("empty_layer"),
        )

    def to_tree(self) -> dict:
        tree = {}
        _set(tree, "created", self.created)
        _set(tree, "author", self.author)
        _set(tree, "created_by", self.created_by)
        _set(tree, "comment", self.comment)
        _set(tree, "empty_layer", self.empty_layer)
        return tree


@dataclass(frozen=True)
class OciImageConfiguration:
    architecture: str
    os: str
    created: Optional[str] = None
    author: Optional[str] = None
    os_version: Optional[str] = None
    os_features: Optional[Tuple[str, ...]] = None
    variant: Optional[str] = None
    config: Optional[Config] = None
    rootfs: Optional[RootFs] = None
    history: Optional[Tuple[History, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "os_features", _as_tuple(self.os_features))
        object.__setattr__(self, "history", _as_tuple(self.history))

    @classmethod
    def from_tree(cls, tree: JsonTree) -> "OciImageConfiguration":
        """
        Project a parsed payload onto the OCI fields.

        Fields outside the OCI specification are ignored.

        :raises BaseSchemaInvalid: if a required field is missing or a known
            field has the wrong type
        """
        validate(tree, imageConfigurationSchema, BaseSchemaInvalid)
        config = tree.get("config")
        rootfs = tree.get("rootfs")
        history = tree.get("history")
        return cls(
            architecture=tree["architecture"],
            os=tree["os"],
            created=tree.get("created"),
            author=tree.get("author"),
            os_version=tree.get("os.version"),
            os_features=tree.get("os.features"),
            variant=tree.get("variant"),
            config=None if config is None else Config.from_tree(config),
            rootfs=None if rootfs is None else RootFs.from_tree(rootfs),
            history=None if history is None else [History.from_tree(h) for h in history],
        )

    def to_tree(self) -> dict:
        tree = {}
        _set(tree, "created", self.created)
        _set(tree, "author", self.author)
        tree["architecture"] = self.architecture
        tree["os"] = self.os
        _set(tree, "os.version", self.os_version)
        _set(tree, "os.features", _copy_list(self.os_features))
        _set(tree, "variant", self.variant)
        if self.config is not None:
            tree["config"] = self.config.to_tree()
        if self.rootfs is not None:
            tree["rootfs"] = self.rootfs.to_tree()
        if self.history is not None:
            tree["history"] = [h.to_tree() for h in self.history]
        return tree


def NewRootFs(diff_ids: Optional[List[str]] = None) -> RootFs:
    rootfs = copy.deepcopy(EmptyRootFs)
    if diff_ids is not None:
        rootfs["diff_ids"] = list(diff_ids)
    return RootFs.from_tree(rootfs)


def NewOciImageConfiguration(
    architecture: Optional[str] = None, os: Optional[str] = None, **fields
) -> OciImageConfiguration:
    """
    Assemble an OCI configuration, defaulting every optional field to absent.

    :raises UninitializedField: if ``architecture`` or ``os`` is missing
    """
    if architecture is None:
        raise UninitializedField("architecture")
    if os is None:
        raise UninitializedField("os")
    return OciImageConfiguration(architecture=architecture, os=os, **fields)
