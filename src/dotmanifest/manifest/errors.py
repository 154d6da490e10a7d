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

"""Error taxonomy for manifest loading and platform resolution.

Loading failures are reported as :class:`ManifestLoadError` subclasses. Field
level failures are first collected as :class:`ManifestIssue` records so that a
caller can inspect every problem in a document (``exc.issues``) while the
exception type still identifies the first failure in validation order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from dotmanifest._infra.exceptions import DotmanifestError, DotmanifestValidationError
from dotmanifest.compat import StrEnum

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path


class IssueKind(StrEnum):
    """Category of a single manifest validation problem."""

    MISSING_FIELD = "missing_field"
    INVALID_FIELD = "invalid_field"
    INVALID_PLATFORM_KEY = "invalid_platform_key"
    UNKNOWN_HASH_ALGORITHM = "unknown_hash_algorithm"
    DIGEST_FORMAT_MISMATCH = "digest_format_mismatch"
    INVALID_ARTIFACT_PATH = "invalid_artifact_path"
    UNKNOWN_ARTIFACT_FORMAT = "unknown_artifact_format"
    SIZE_OUT_OF_RANGE = "size_out_of_range"


@dataclass(slots=True, frozen=True)
class ManifestIssue:
    """One validation problem found in a manifest.

    Attributes:
        kind: Problem category.
        message: Human-readable description.
        platform: Platform key of the offending entry, or None for top-level issues.
        field: Offending field name, or None when the issue concerns a whole entry.
    """

    kind: IssueKind
    message: str
    platform: str | None = None
    field: str | None = None

    @property
    def location(self) -> str:
        """Dotted location of the issue, e.g. ``platforms.linux-x64.path``."""
        parts: list[str] = []
        if self.platform is not None:
            parts.extend(("platforms", self.platform))
        if self.field is not None:
            parts.append(self.field)
        return ".".join(parts) or "<root>"

    def describe(self) -> str:
        """Return ``location: message``."""
        return f"{self.location}: {self.message}"


class ManifestLoadError(DotmanifestValidationError):
    """Base error for manifests that could not be turned into a document.

    Attributes:
        issues: Every validation problem found, in validation order. Empty for
            failures that happen before validation (parsing, reading).
    """

    def __init__(self, message: str, *, issues: Sequence[ManifestIssue] = ()) -> None:
        super().__init__(message)
        self.issues: tuple[ManifestIssue, ...] = tuple(issues)


class MalformedInputError(ManifestLoadError):
    """Raised when the input is not well-formed, object-rooted JSON.

    Attributes:
        lineno: 1-based line of the syntax error, when known.
        colno: 1-based column of the syntax error, when known.
        pos: 0-based character offset of the syntax error, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        lineno: int | None = None,
        colno: int | None = None,
        pos: int | None = None,
    ) -> None:
        self.lineno = lineno
        self.colno = colno
        self.pos = pos
        if lineno is not None and colno is not None:
            message = f"{message} (line {lineno}, column {colno})"
        super().__init__(f"Malformed manifest: {message}")


class DuplicateKeyError(MalformedInputError):
    """Raised when a JSON object in the manifest repeats a key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"duplicate key '{key}'")


class MissingHeaderError(MalformedInputError):
    """Raised when a manifest file does not start with the required header line."""

    def __init__(self, header: str) -> None:
        self.header = header
        super().__init__(f"file must start with `{header}`")


class ManifestReadError(ManifestLoadError):
    """Raised when a manifest file cannot be read from disk."""

    def __init__(self, path: Path, error: Exception) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class ManifestFieldError(ManifestLoadError):
    """Base error for failures attributed to a specific field or platform.

    Attributes:
        issue: The first issue, which determines the concrete error type.
        platform: Platform key of the first issue, if any.
        field: Field name of the first issue, if any.
    """

    kind: ClassVar[IssueKind] = IssueKind.INVALID_FIELD

    def __init__(self, issue: ManifestIssue, *, issues: Sequence[ManifestIssue] = ()) -> None:
        self.issue = issue
        self.platform = issue.platform
        self.field = issue.field
        all_issues = tuple(issues) or (issue,)
        message = issue.describe()
        if len(all_issues) > 1:
            message = f"{message} (and {len(all_issues) - 1} more issue(s))"
        super().__init__(message, issues=all_issues)


class InvalidFieldError(ManifestFieldError):
    """Raised when a field has the wrong JSON type or an empty required string."""

    kind = IssueKind.INVALID_FIELD


class MissingFieldError(ManifestFieldError):
    """Raised when a required field is absent at document or entry level."""

    kind = IssueKind.MISSING_FIELD


class InvalidPlatformKeyError(ManifestFieldError):
    """Raised when a platform key is empty."""

    kind = IssueKind.INVALID_PLATFORM_KEY


class UnknownHashAlgorithmError(ManifestFieldError):
    """Raised when ``hash`` is not one of the recognised algorithm tags."""

    kind = IssueKind.UNKNOWN_HASH_ALGORITHM


class DigestFormatMismatchError(ManifestFieldError):
    """Raised when ``digest`` is empty or inconsistent with its algorithm."""

    kind = IssueKind.DIGEST_FORMAT_MISMATCH


class InvalidArtifactPathError(ManifestFieldError):
    """Raised when ``path`` contains a backslash or an empty segment."""

    kind = IssueKind.INVALID_ARTIFACT_PATH


class UnknownArtifactFormatError(ManifestFieldError):
    """Raised when ``format`` is not one of the recognised archive tags."""

    kind = IssueKind.UNKNOWN_ARTIFACT_FORMAT


class SizeOutOfRangeError(ManifestFieldError):
    """Raised when ``size`` is negative or exceeds the unsigned 64-bit range."""

    kind = IssueKind.SIZE_OUT_OF_RANGE


_FIELD_ERRORS: Final[dict[IssueKind, type[ManifestFieldError]]] = {
    cls.kind: cls
    for cls in (
        InvalidFieldError,
        MissingFieldError,
        InvalidPlatformKeyError,
        UnknownHashAlgorithmError,
        DigestFormatMismatchError,
        InvalidArtifactPathError,
        UnknownArtifactFormatError,
        SizeOutOfRangeError,
    )
}


def error_from_issues(issues: Iterable[ManifestIssue]) -> ManifestFieldError:
    """Build the exception for an ordered, non-empty collection of issues.

    Args:
        issues: Issues in validation order.

    Returns:
        An instance of the error class matching the first issue's kind.

    Raises:
        ValueError: If ``issues`` is empty.
    """
    ordered = tuple(issues)
    if not ordered:
        message = "error_from_issues requires at least one issue"
        raise ValueError(message)
    first = ordered[0]
    return _FIELD_ERRORS[first.kind](first, issues=ordered)


class ResolutionError(DotmanifestError, LookupError):
    """Base error for failed lookups against a loaded document."""


class UnknownPlatformError(ResolutionError):
    """Raised when a platform key is not present in the document.

    Attributes:
        key: The requested platform key.
        available: Platform keys the document does declare.
    """

    def __init__(self, key: str, available: Iterable[str] = ()) -> None:
        self.key = key
        self.available = tuple(sorted(available))
        known = ", ".join(self.available) or "none"
        super().__init__(f"Unknown platform '{key}' (available: {known})")


__all__ = [
    "DigestFormatMismatchError",
    "DuplicateKeyError",
    "InvalidArtifactPathError",
    "InvalidFieldError",
    "InvalidPlatformKeyError",
    "IssueKind",
    "MalformedInputError",
    "ManifestFieldError",
    "ManifestIssue",
    "ManifestLoadError",
    "ManifestReadError",
    "MissingFieldError",
    "MissingHeaderError",
    "ResolutionError",
    "SizeOutOfRangeError",
    "UnknownArtifactFormatError",
    "UnknownHashAlgorithmError",
    "UnknownPlatformError",
    "error_from_issues",
]
