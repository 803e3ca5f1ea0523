"""
Docker extension of the OCI image configuration.

Docker adds fields on top of the OCI specification, all of them inside the
``config`` object. See
https://github.com/moby/moby/blob/master/image/spec/specs-go/v1/image.go
"""

import logging
from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Optional, Sequence, Tuple

from glimage.errors import ExtensionSchemaInvalid
from glimage.helper.duration import Duration, deserialize_duration, serialize_duration
from glimage.helper.jsontree import JsonTree, validate
from glimage.image.schemas import (
    image_configuration_extension as imageConfigurationExtensionSchema,
)

logger = logging.getLogger(__name__)


def _is_empty(value) -> bool:
    return all(getattr(value, f.name) is None for f in fields(value))


def _copy_list(value: Optional[Sequence]) -> Optional[list]:
    return None if value is None else list(value)


def _as_tuple(value: Optional[Sequence]) -> Optional[tuple]:
    return None if value is None else tuple(value)


def _as_duration(value, field: str) -> Optional[Duration]:
    if value is None or isinstance(value, Duration):
        return value
    if isinstance(value, timedelta):
        return Duration.from_timedelta(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Duration.from_seconds(value)
    raise TypeError(f"{field}: expected a Duration, timedelta or seconds, got {value!r}")


@dataclass(frozen=True)
class HealthcheckConfig:
    """Settings of the HEALTHCHECK instruction."""

    test: Optional[Tuple[str, ...]] = None
    interval: Optional[Duration] = None
    timeout: Optional[Duration] = None
    start_interval: Optional[Duration] = None
    retries: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "test", _as_tuple(self.test))
        for name in ("interval", "timeout", "start_interval"):
            object.__setattr__(self, name, _as_duration(getattr(self, name), name))

    @classmethod
    def from_tree(cls, tree: dict) -> "HealthcheckConfig":
        return cls(
            test=tree.get("Test"),
            interval=deserialize_duration(tree.get("Interval")),
            timeout=deserialize_duration(tree.get("Timeout")),
            start_interval=deserialize_duration(tree.get("StartInterval")),
            retries=tree.get("Retries"),
        )

    def to_tree(self) -> dict:
        tree = {}
        if self.test is not None:
            tree["Test"] = _copy_list(self.test)
        for key, value in (
            ("Interval", self.interval),
            ("Timeout", self.timeout),
            ("StartInterval", self.start_interval),
        ):
            if value is not None:
                tree[key] = serialize_duration(value, f"Healthcheck.{key}")
        if self.retries is not None:
            tree["Retries"] = self.retries
        return tree


@dataclass(frozen=True)
class ConfigExtension:
    """Fields Docker adds to the ``config`` object of the OCI configuration."""

    # memory limit, in bytes
    memory: Optional[int] = None
    # memory + swap
    memory_swap: Optional[int] = None
    # relative weight vs. other containers
    cpu_shares: Optional[int] = None
    # Windows only: Entrypoint/Cmd hold a single pre-escaped command line
    args_escaped: Optional[bool] = None
    health_check: Optional[HealthcheckConfig] = None
    # ONBUILD triggers executed when the image is used as a base
    on_build: Optional[Tuple[str, ...]] = None
    # SHELL instruction, e.g. ["/bin/sh", "-c"]
    shell: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "on_build", _as_tuple(self.on_build))
        object.__setattr__(self, "shell", _as_tuple(self.shell))

    @classmethod
    def from_tree(cls, tree: dict) -> "ConfigExtension":
        health_check = tree.get("Healthcheck")
        if health_check is None and tree.get("HealthCheck") is not None:
            logger.debug("using HealthCheck spelling for Healthcheck")
            health_check = tree["HealthCheck"]
        return cls(
            memory=tree.get("Memory"),
            memory_swap=tree.get("MemorySwap"),
            cpu_shares=tree.get("CpuShares"),
            args_escaped=tree.get("ArgsEscaped"),
            health_check=(
                None if health_check is None else HealthcheckConfig.from_tree(health_check)
            ),
            on_build=tree.get("OnBuild"),
            shell=tree.get("Shell"),
        )

    def to_tree(self) -> dict:
        tree = {}
        for key, value in (
            ("Memory", self.memory),
            ("MemorySwap", self.memory_swap),
            ("CpuShares", self.cpu_shares),
            ("ArgsEscaped", self.args_escaped),
            ("OnBuild", _copy_list(self.on_build)),
            ("Shell", _copy_list(self.shell)),
        ):
            if value is not None:
                tree[key] = value
        if self.health_check is not None:
            tree["Healthcheck"] = self.health_check.to_tree()
        return tree

    def is_empty(self) -> bool:
        return _is_empty(self)


@dataclass(frozen=True)
class ImageConfigurationExtension:
    config: Optional[ConfigExtension] = None

    @classmethod
    def from_tree(cls, tree: JsonTree) -> "ImageConfigurationExtension":
        """
        Project a parsed payload onto the Docker extension fields.

        Succeeds on payloads without any extension field, unknown and missing
        fields are not errors.

        :raises ExtensionSchemaInvalid: if an extension field has the wrong type
        """
        validate(tree, imageConfigurationExtensionSchema, ExtensionSchemaInvalid)
        config = tree.get("config")
        return cls(config=None if config is None else ConfigExtension.from_tree(config))

    def to_tree(self) -> dict:
        if self.config is None:
            return {}
        return {"config": self.config.to_tree()}

    def is_empty(self) -> bool:
        return self.config is None or self.config.is_empty()


def NewHealthcheck(
    test: Optional[Sequence[str]] = None,
    interval=None,
    timeout=None,
    start_interval=None,
    retries: Optional[int] = None,
) -> HealthcheckConfig:
    """
    Assemble a healthcheck; durations may be given as :class:`Duration`,
    ``timedelta`` or seconds.
    """
    return HealthcheckConfig(
        test=test,
        interval=interval,
        timeout=timeout,
        start_interval=start_interval,
        retries=retries,
    )


def NewConfigExtension(**values) -> ImageConfigurationExtension:
    return ImageConfigurationExtension(config=ConfigExtension(**values))
