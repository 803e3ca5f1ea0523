"""
Helpers for plain JSON trees (dict, list, str, int, float, bool, None).

Parsing goes through the standard ``json`` module and every failure is
translated into the glimage error taxonomy.
"""

import copy
import json
import logging
import os
from typing import IO, Any, Union

import jsonschema

from glimage.errors import ImageIOError, MalformedPayload, SchemaInvalid

logger = logging.getLogger(__name__)

JsonTree = Any


def merge(base: JsonTree, overlay: JsonTree) -> JsonTree:
    """
    Merge ``overlay`` onto ``base`` and return the result.

    When both are dicts the merge happens in place on ``base``: overlay keys
    holding None are skipped (None never deletes), every other key is merged
    recursively. Any other combination returns a copy of ``overlay``, so lists
    are replaced, not concatenated.

    An overlay dict without any non-None value leaves ``base`` untouched, even
    when ``base`` is not a dict.

    The walk uses an explicit stack instead of recursion.
    """
    if isinstance(overlay, dict) and all(value is None for value in overlay.values()):
        return base
    if not (isinstance(base, dict) and isinstance(overlay, dict)):
        return copy.deepcopy(overlay)

    pending = [(base, overlay)]
    while pending:
        target, incoming = pending.pop()
        for key, value in incoming.items():
            if value is None:
                continue
            current = target.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                pending.append((current, value))
            else:
                target[key] = copy.deepcopy(value)
    return base


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def loads(s: Union[str, bytes, bytearray]) -> JsonTree:
    try:
        return json.loads(s, parse_constant=_reject_constant)
    except UnicodeDecodeError as e:
        raise MalformedPayload(f"payload is not valid UTF-8: {e}") from e
    except ValueError as e:
        raise MalformedPayload(str(e)) from e
    except RecursionError as e:
        raise MalformedPayload("nesting too deep") from e


def from_str(s: str) -> JsonTree:
    return loads(s)


def from_bytes(v: Union[bytes, bytearray]) -> JsonTree:
    return loads(bytes(v))


def from_file(path: Union[str, os.PathLike, IO]) -> JsonTree:
    """Load a JSON tree from a path or an already opened (binary or text) file."""
    if hasattr(path, "read"):
        return loads(path.read())
    try:
        with open(path, "rb") as fp:
            data = fp.read()
    except OSError as e:
        raise ImageIOError(path, e) from e
    logger.debug(f"read {len(data)} bytes from {path}")
    return loads(data)


def dumps(tree: JsonTree, indent=None) -> str:
    """Serialize ``tree`` with sorted keys so equal trees give equal text."""
    if indent is None:
        return json.dumps(tree, sort_keys=True, separators=(",", ":"))
    return json.dumps(tree, sort_keys=True, indent=indent)


def write_json_file(tree: JsonTree, output_path, indent=None):
    if os.path.exists(output_path):
        raise ValueError(f"{output_path} already exists")
    try:
        with open(output_path, "w") as fp:
            fp.write(dumps(tree, indent=indent))
    except OSError as e:
        raise ImageIOError(output_path, e) from e


def json_path(path) -> str:
    rendered = "$"
    for part in path:
        rendered += f"[{part}]" if isinstance(part, int) else f".{part}"
    return rendered


def validate(tree: JsonTree, schema: dict, error_cls=SchemaInvalid):
    """
    Validate ``tree`` against ``schema`` and raise ``error_cls`` for the most
    relevant violation, with the JSON path of the offending value.
    """
    validator = jsonschema.Draft7Validator(schema)
    error = jsonschema.exceptions.best_match(validator.iter_errors(tree))
    if error is not None:
        raise error_cls(error.message, json_path(error.absolute_path))
