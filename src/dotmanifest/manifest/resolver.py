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

"""Read-only lookups against a loaded manifest document."""

from __future__ import annotations

import logging
import string
from typing import TYPE_CHECKING, Final

from dotmanifest._infra.logging_utils import structured_extra
from dotmanifest.core.model_types import LogComponent
from dotmanifest.core.type_aliases import PlatformKey

from .errors import UnknownPlatformError

if TYPE_CHECKING:
    from .document import ArtifactEntry, ManifestDocument

logger = logging.getLogger("dotmanifest.resolver")

_HEX_DIGITS: Final[frozenset[str]] = frozenset(string.hexdigits)


def resolve(document: ManifestDocument, platform_key: str) -> ArtifactEntry:
    """Return the artifact entry declared for ``platform_key``.

    Args:
        document: Loaded manifest document.
        platform_key: Platform identifier, compared exactly.

    Returns:
        The entry stored under ``platform_key``.

    Raises:
        UnknownPlatformError: If the document has no entry for the key.
    """
    entry = document.platforms.get(PlatformKey(platform_key))
    if entry is None:
        logger.debug(
            "No entry for platform '%s' in manifest '%s'",
            platform_key,
            document.name,
            extra=structured_extra(component=LogComponent.RESOLVER, manifest=document.name, platform=platform_key),
        )
        raise UnknownPlatformError(platform_key, document.platforms)
    return entry


def _is_hex(value: str) -> bool:
    return bool(value) and all(char in _HEX_DIGITS for char in value)


def verify_digest(entry: ArtifactEntry, computed_digest: str) -> bool:
    """Compare a digest computed by the caller with the one the manifest declares.

    Hex digests compare case-insensitively; any other encoding must match
    exactly. No hashing happens here.

    Args:
        entry: Resolved artifact entry.
        computed_digest: Digest of the fetched bytes, in the manifest's textual form.

    Returns:
        True when the digests match.
    """
    expected = entry.digest
    if _is_hex(expected) and _is_hex(computed_digest):
        return expected.lower() == computed_digest.lower()
    return expected == computed_digest


__all__ = ["resolve", "verify_digest"]
