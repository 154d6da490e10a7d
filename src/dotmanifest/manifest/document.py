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

"""Immutable, validated manifest documents.

Instances are only produced by the loader (or built directly in tests) and are
never mutated afterwards, so they can be shared between threads freely.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, cast

from dotmanifest.core.type_aliases import ARTIFACT_PATH_SEPARATOR
from dotmanifest.json import dumps_canonical, freeze_json, normalize_enums_for_json

if TYPE_CHECKING:
    from dotmanifest.core.model_types import ArtifactFormat, HashAlgorithm
    from dotmanifest.core.type_aliases import ArtifactPath, Digest, PlatformKey
    from dotmanifest.json import FrozenJSONValue, JSONMapping


def _empty_platforms() -> Mapping[PlatformKey, ArtifactEntry]:
    return MappingProxyType({})


@dataclass(slots=True, frozen=True)
class ArtifactEntry:
    """Description of the artifact published for one platform.

    Attributes:
        digest: Content fingerprint produced by ``hash``.
        hash: Algorithm that produced ``digest``.
        path: Forward-slash separated location of the payload.
        size: Artifact size in bytes.
        providers: Opaque provider descriptors in preference order, frozen
            (objects as read-only mappings, arrays as tuples).
        format: Archive/compression format, or None for a plain artifact.
        readonly: Whether the materialised artifact must not be rewritten.
    """

    digest: Digest
    hash: HashAlgorithm
    path: ArtifactPath
    size: int
    providers: tuple[FrozenJSONValue, ...] = ()
    format: ArtifactFormat | None = None
    readonly: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "providers", tuple(freeze_json(provider) for provider in self.providers))

    @property
    def path_segments(self) -> tuple[str, ...]:
        """Segments of ``path`` split on ``/`` (never on the host separator)."""
        return tuple(self.path.split(ARTIFACT_PATH_SEPARATOR))

    @property
    def is_plain(self) -> bool:
        """Whether the artifact is stored without archive or compression."""
        return self.format is None


@dataclass(slots=True, frozen=True)
class ManifestDocument:
    """A fully validated manifest.

    Attributes:
        name: Identifying name of the manifest.
        platforms: Read-only mapping of platform key to artifact entry.
    """

    name: str
    platforms: Mapping[PlatformKey, ArtifactEntry] = field(default_factory=_empty_platforms)

    def __post_init__(self) -> None:
        if not isinstance(self.platforms, MappingProxyType):
            object.__setattr__(self, "platforms", MappingProxyType(dict(self.platforms)))

    def platform_keys(self) -> tuple[PlatformKey, ...]:
        """Return the declared platform keys in document order."""
        return tuple(self.platforms)


def entry_to_payload(entry: ArtifactEntry) -> JSONMapping:
    """Return the wire representation of an artifact entry.

    ``format`` is omitted for plain artifacts and ``readonly`` is omitted when
    it holds its default (``True``).

    Args:
        entry: Entry to serialise.

    Returns:
        JSON mapping in file-format field names.
    """
    payload: dict[str, object] = {
        "size": entry.size,
        "hash": entry.hash,
        "digest": entry.digest,
    }
    if entry.format is not None:
        payload["format"] = entry.format
    payload["path"] = entry.path
    payload["providers"] = list(entry.providers)
    if not entry.readonly:
        payload["readonly"] = False
    return cast("JSONMapping", normalize_enums_for_json(payload))


def document_to_payload(document: ManifestDocument) -> JSONMapping:
    """Return the wire representation of a manifest document.

    Args:
        document: Document to serialise.

    Returns:
        JSON mapping with ``name`` and ``platforms``.
    """
    return {
        "name": document.name,
        "platforms": {key: entry_to_payload(entry) for key, entry in document.platforms.items()},
    }


def dump(document: ManifestDocument, *, indent: int | None = 2) -> str:
    """Serialise a document to manifest JSON text that :func:`load` accepts.

    Args:
        document: Document to serialise.
        indent: JSON indentation; ``None`` for compact output.

    Returns:
        JSON text terminated by a newline.
    """
    return dumps_canonical(document_to_payload(document), indent=indent)


__all__ = [
    "ArtifactEntry",
    "ManifestDocument",
    "document_to_payload",
    "dump",
    "entry_to_payload",
]
