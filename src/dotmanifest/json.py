# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Canonical JSON types and helpers used across dotmanifest.

This module defines the JSON value shapes and generic helpers for working
with JSON-compatible data. It intentionally has no dependencies on
logging, configuration, or manifest layers to keep the dependency graph
simple and acyclic.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TypeAlias, cast

import json5
from pydantic import JsonValue

__all__ = [
    "DuplicateJSONKeyError",
    "FrozenJSONValue",
    "JSONList",
    "JSONMapping",
    "JSONNumberError",
    "JSONValue",
    "dumps_canonical",
    "freeze_json",
    "loads_unique",
    "normalize_enums_for_json",
]

JSONValue: TypeAlias = JsonValue
JSONMapping = dict[str, JsonValue]
JSONList = list[JsonValue]
FrozenJSONValue: TypeAlias = "str | int | float | bool | None | tuple[FrozenJSONValue, ...] | Mapping[str, FrozenJSONValue]"


class DuplicateJSONKeyError(ValueError):
    """Raised when a JSON object declares the same key more than once.

    Attributes:
        key: The repeated key.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Duplicate object key '{key}'")


class JSONNumberError(ValueError):
    """Raised for number literals that have no exact JSON value.

    Attributes:
        literal: The offending literal, truncated for display.
    """

    def __init__(self, literal: str, reason: str) -> None:
        self.literal = literal if len(literal) <= 32 else f"{literal[:29]}..."
        super().__init__(f"{reason}: {self.literal}")


def _unique_object(pairs: list[tuple[str, JSONValue]]) -> JSONMapping:
    result: JSONMapping = {}
    for key, value in pairs:
        if key in result:
            raise DuplicateJSONKeyError(key)
        result[key] = value
    return result


def _reject_constant(literal: str) -> float:
    raise JSONNumberError(literal, "non-finite numbers are not valid JSON")


def _parse_int(literal: str) -> int:
    # int() refuses literals above the interpreter's digit limit (0 = unlimited)
    limit = getattr(sys, "get_int_max_str_digits", lambda: 0)()
    if limit and len(literal.lstrip("+-")) > limit:
        raise JSONNumberError(literal, f"integer literal exceeds {limit} digits")
    return int(literal)


def loads_unique(payload: str) -> JSONValue:
    """Parse JSON text, rejecting objects that repeat a key.

    Strict JSON is decoded with the standard library. Text it rejects is
    retried with ``json5``, which accepts the relaxed syntax manifest files
    are written in (comments and trailing commas). When both decoders fail,
    the standard decoder's error is raised so positions refer to strict JSON.

    Args:
        payload: Raw JSON text.

    Returns:
        The decoded JSON value.

    Raises:
        json.JSONDecodeError: If ``payload`` is not valid JSON or JSON5.
        DuplicateJSONKeyError: If any object repeats a key.
        JSONNumberError: For ``NaN``/``Infinity`` or integers too long to convert.
    """
    try:
        value = json.loads(
            payload,
            object_pairs_hook=_unique_object,
            parse_constant=_reject_constant,
            parse_int=_parse_int,
        )
    except json.JSONDecodeError as strict_error:
        try:
            value = json5.loads(
                payload,
                object_pairs_hook=_unique_object,
                parse_constant=_reject_constant,
                parse_int=_parse_int,
            )
        except (DuplicateJSONKeyError, JSONNumberError):
            raise
        except ValueError:
            raise strict_error from None
    return cast("JSONValue", value)


def freeze_json(value: object) -> FrozenJSONValue:
    """Return a read-only copy of a JSON value.

    Objects become ``MappingProxyType`` instances and arrays become tuples,
    recursively; scalars are returned unchanged.
    """
    if isinstance(value, Mapping):
        mapping = cast("Mapping[str, object]", value)
        return MappingProxyType({key: freeze_json(item) for key, item in mapping.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_json(item) for item in cast("list[object] | tuple[object, ...]", value))
    return cast("FrozenJSONValue", value)


def dumps_canonical(value: object, *, indent: int | None = 2) -> str:
    """Serialise ``value`` as UTF-8 friendly JSON with a trailing newline.

    Args:
        value: JSON-compatible structure (enums are converted to their values).
        indent: Indentation passed to :func:`json.dumps`.

    Returns:
        JSON text.

    Raises:
        ValueError: If ``value`` contains ``NaN`` or an infinity.
    """
    return json.dumps(normalize_enums_for_json(value), indent=indent, ensure_ascii=False, allow_nan=False) + "\n"


def normalize_enums_for_json(value: object) -> JSONValue:
    """Recursively convert Enum keys/values to their string payloads for JSON serialisation.

    Args:
        value: Arbitrary Python object hierarchy that may include `Enum`
            instances, mappings, or sequences.

    Returns:
        A JSON-compatible structure (built from `dict`/`list`/primitives)
        with all enum keys and values replaced by their `.value` payloads.
    """

    def _convert(obj: object) -> JSONValue:
        if isinstance(obj, Enum):
            return cast("JSONValue", obj.value)
        if isinstance(obj, Mapping):
            mapping_obj = cast("Mapping[object, object]", obj)
            result: dict[str, JSONValue] = {}
            for key, raw_val in mapping_obj.items():
                if isinstance(key, Enum):
                    norm_key: str = str(key.value)
                elif isinstance(key, str):
                    norm_key = key
                else:
                    norm_key = str(key)
                result[norm_key] = _convert(raw_val)
            return cast("JSONValue", result)
        if isinstance(obj, (list, tuple)):
            seq_obj = cast("list[object] | tuple[object, ...]", obj)
            return cast("JSONValue", [_convert(item) for item in seq_obj])
        if isinstance(obj, (str, int, float, bool)) or obj is None:
            return cast("JSONValue", obj)
        return cast("JSONValue", str(obj))

    return _convert(value)
