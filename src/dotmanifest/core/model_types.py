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

# ignore JUSTIFIED: StrEnum inheritance stack exceeds pylint threshold
# pylint: disable=too-many-ancestors, useless-suppression

"""Enumerations used throughout dotmanifest.

Manifest enums (``HashAlgorithm`` and ``ArtifactFormat``) are closed sets whose
values are the exact lowercase literals of the file format; their ``from_str``
constructors deliberately do not normalise case or whitespace. Settings enums
(``DigestCheck``, ``LogFormat``, ``LogComponent``) come from configuration and
environment variables, so they are parsed leniently.
"""

from __future__ import annotations

from typing import Final

from dotmanifest.compat import StrEnum

HEX_DIGEST_LENGTH: Final[int] = 64


class HashAlgorithm(StrEnum):
    """Algorithm that produced an artifact digest.

    Attributes:
        BLAKE3: BLAKE3 with the default 32-byte output.
        SHA256: SHA-256.
    """

    BLAKE3 = "blake3"
    SHA256 = "sha256"

    @classmethod
    def from_str(cls, raw: str) -> HashAlgorithm:
        """Create a HashAlgorithm from its exact manifest literal.

        Args:
            raw: Manifest ``hash`` value.

        Returns:
            HashAlgorithm enum value.

        Raises:
            ValueError: If ``raw`` is not one of the recognised literals.
        """
        try:
            return cls(raw)
        except ValueError as exc:
            msg = f"Unknown hash algorithm '{raw}'"
            raise ValueError(msg) from exc

    @property
    def digest_length(self) -> int:
        """Number of hex characters in a conventionally encoded digest."""
        return HEX_DIGEST_LENGTH


class ArtifactFormat(StrEnum):
    """Archive or compression format of a stored artifact.

    A missing ``format`` in the manifest means the artifact is stored as-is;
    that case is modelled as ``None`` rather than as a member.
    """

    GZ = "gz"
    TAR = "tar"
    TAR_GZ = "tar.gz"
    TAR_ZST = "tar.zst"
    TAR_XZ = "tar.xz"
    XZ = "xz"
    ZST = "zst"
    ZIP = "zip"

    @classmethod
    def from_str(cls, raw: str) -> ArtifactFormat:
        """Create an ArtifactFormat from its exact manifest literal.

        Args:
            raw: Manifest ``format`` value.

        Returns:
            ArtifactFormat enum value.

        Raises:
            ValueError: If ``raw`` is not one of the recognised literals.
        """
        try:
            return cls(raw)
        except ValueError as exc:
            msg = f"Unknown artifact format '{raw}'"
            raise ValueError(msg) from exc

    @property
    def is_archive(self) -> bool:
        """Whether the format bundles several files (tar or zip)."""
        return self in {
            ArtifactFormat.TAR,
            ArtifactFormat.TAR_GZ,
            ArtifactFormat.TAR_ZST,
            ArtifactFormat.TAR_XZ,
            ArtifactFormat.ZIP,
        }


class DigestCheck(StrEnum):
    """How strictly digest strings are checked against their algorithm.

    Attributes:
        OFF: Only reject empty digests.
        WARN: Log digests that are not 64 hex characters.
        STRICT: Reject digests that are not 64 hex characters.
    """

    OFF = "off"
    WARN = "warn"
    STRICT = "strict"

    @classmethod
    def from_str(cls, raw: str) -> DigestCheck:
        """Create a DigestCheck from a configuration string.

        Args:
            raw: String representation of the policy.

        Returns:
            DigestCheck enum value.

        Raises:
            ValueError: If the string does not match any DigestCheck value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown digest check '{raw}'"
            raise ValueError(msg) from exc


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Human-readable text format.
        JSON: Machine-readable JSON format.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Enumeration of loggable components.

    Attributes:
        MANIFEST: Manifest parsing and validation.
        RESOLVER: Platform lookups and digest comparison.
        CONFIG: Loader settings discovery.
    """

    MANIFEST = "manifest"
    RESOLVER = "resolver"
    CONFIG = "config"

    @classmethod
    def from_str(cls, raw: str) -> LogComponent:
        """Create a LogComponent enum from a string value.

        Args:
            raw: String representation of the component.

        Returns:
            LogComponent enum value.

        Raises:
            ValueError: If the string does not match any LogComponent value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log component '{raw}'"
            raise ValueError(msg) from exc


__all__ = [
    "HEX_DIGEST_LENGTH",
    "ArtifactFormat",
    "DigestCheck",
    "HashAlgorithm",
    "LogComponent",
    "LogFormat",
]
