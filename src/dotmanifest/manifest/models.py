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

"""Pydantic models describing the manifest file format.

The models validate parsed JSON and generate the JSON Schema of the format.
Domain problems are raised inside validators as ``PydanticCustomError`` whose
type is an :class:`~dotmanifest.manifest.errors.IssueKind` value;
:func:`validate_manifest_payload` translates the resulting ``ValidationError``
into ordered :class:`ManifestIssue` records and the matching exception.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Final

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    StrictBool,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from dotmanifest.core.model_types import ArtifactFormat, DigestCheck, HashAlgorithm
from dotmanifest.core.type_aliases import (
    ARTIFACT_PATH_SEPARATOR,
    MAX_ARTIFACT_SIZE,
    ArtifactPath,
    Digest,
    PlatformKey,
)

from .document import ArtifactEntry, ManifestDocument
from .errors import IssueKind, ManifestIssue, error_from_issues

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

DIGEST_CHECK_CONTEXT_KEY: Final[str] = "digest_check"
MANIFEST_SCHEMA_ID: Final[str] = "https://dotmanifest.dev/schema/manifest.json"

TOP_LEVEL_FIELD_ORDER: Final[tuple[str, ...]] = ("name", "platforms")
# Per-entry validation order; the first failure in this order wins.
ENTRY_FIELD_ORDER: Final[tuple[str, ...]] = (
    "hash",
    "digest",
    "path",
    "format",
    "size",
    "providers",
    "readonly",
)
REQUIRED_ENTRY_FIELDS: Final[tuple[str, ...]] = ("digest", "hash", "path", "providers", "size")

HASH_ALGORITHM_VALUES: Final[frozenset[str]] = frozenset(member.value for member in HashAlgorithm)
ARTIFACT_FORMAT_VALUES: Final[frozenset[str]] = frozenset(member.value for member in ArtifactFormat)

WIRE_MODEL_CONFIG: ConfigDict = ConfigDict(extra="ignore", frozen=True)


def _issue_error(kind: IssueKind, message: str, **context: object) -> PydanticCustomError:
    return PydanticCustomError(kind.value, message, context)


def _allowed(values: frozenset[str]) -> str:
    return ", ".join(sorted(values))


def check_artifact_path(value: str) -> ArtifactPath:
    """Validate a logical artifact path.

    Args:
        value: Candidate path string.

    Returns:
        The unchanged value typed as ``ArtifactPath``.

    Raises:
        PydanticCustomError: If the path contains a backslash or an empty segment.
    """
    if "\\" in value:
        raise _issue_error(
            IssueKind.INVALID_ARTIFACT_PATH,
            "path '{path}' must use '/' as its only separator",
            path=value,
        )
    if "" in value.split(ARTIFACT_PATH_SEPARATOR):
        raise _issue_error(
            IssueKind.INVALID_ARTIFACT_PATH,
            "path '{path}' must not contain empty segments",
            path=value,
        )
    return ArtifactPath(value)


def digest_matches_convention(digest: str, algorithm: HashAlgorithm) -> bool:
    """Return whether ``digest`` looks like a hex digest produced by ``algorithm``."""
    return len(digest) == algorithm.digest_length and all(char in "0123456789abcdefABCDEF" for char in digest)


def _check_platform_key(value: str) -> str:
    if not value:
        raise _issue_error(IssueKind.INVALID_PLATFORM_KEY, "platform keys must be non-empty strings")
    return value


PlatformKeyField = Annotated[str, AfterValidator(_check_platform_key)]


def _digest_check_from(info: ValidationInfo) -> DigestCheck:
    context = info.context if isinstance(info.context, Mapping) else {}
    raw = context.get(DIGEST_CHECK_CONTEXT_KEY, DigestCheck.WARN)
    if isinstance(raw, DigestCheck):
        return raw
    return DigestCheck.from_str(str(raw))


class ArtifactEntryModel(BaseModel):
    """Wire model for one platform's artifact entry.

    Fields are declared in validation order. Unknown fields are ignored.
    """

    model_config: ClassVar[ConfigDict] = WIRE_MODEL_CONFIG

    hash: HashAlgorithm
    digest: StrictStr
    path: StrictStr
    format: ArtifactFormat | None = None
    size: int = Field(json_schema_extra={"minimum": 0, "maximum": MAX_ARTIFACT_SIZE})
    providers: tuple[JsonValue, ...]
    readonly: StrictBool = True

    @field_validator("hash", mode="before")
    @classmethod
    def _parse_hash(cls, value: object) -> HashAlgorithm:
        if isinstance(value, HashAlgorithm):
            return value
        if isinstance(value, str) and value in HASH_ALGORITHM_VALUES:
            return HashAlgorithm.from_str(value)
        raise _issue_error(
            IssueKind.UNKNOWN_HASH_ALGORITHM,
            "unknown hash algorithm {value}; expected one of: {allowed}",
            value=repr(value),
            allowed=_allowed(HASH_ALGORITHM_VALUES),
        )

    @field_validator("digest")
    @classmethod
    def _check_digest(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise _issue_error(IssueKind.DIGEST_FORMAT_MISMATCH, "digest must not be empty")
        algorithm = info.data.get("hash")
        if (
            isinstance(algorithm, HashAlgorithm)
            and _digest_check_from(info) is DigestCheck.STRICT
            and not digest_matches_convention(value, algorithm)
        ):
            raise _issue_error(
                IssueKind.DIGEST_FORMAT_MISMATCH,
                "digest '{digest}' is not a {length}-character hex {algorithm} digest",
                digest=value,
                length=algorithm.digest_length,
                algorithm=algorithm.value,
            )
        return value

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        return check_artifact_path(value)

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: object) -> ArtifactFormat:
        if isinstance(value, ArtifactFormat):
            return value
        if isinstance(value, str) and value in ARTIFACT_FORMAT_VALUES:
            return ArtifactFormat.from_str(value)
        raise _issue_error(
            IssueKind.UNKNOWN_ARTIFACT_FORMAT,
            "unknown artifact format {value}; expected one of: {allowed}",
            value=repr(value),
            allowed=_allowed(ARTIFACT_FORMAT_VALUES),
        )

    @field_validator("size", mode="before")
    @classmethod
    def _check_size(cls, value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _issue_error(IssueKind.INVALID_FIELD, "size must be an integer number of bytes")
        if not 0 <= value <= MAX_ARTIFACT_SIZE:
            raise _issue_error(
                IssueKind.SIZE_OUT_OF_RANGE,
                "size {size} is outside the range 0..{maximum}",
                size=value,
                maximum=MAX_ARTIFACT_SIZE,
            )
        return value

    @field_validator("providers", mode="before")
    @classmethod
    def _require_array(cls, value: object) -> object:
        if not isinstance(value, (list, tuple)):
            raise _issue_error(IssueKind.INVALID_FIELD, "providers must be an array")
        return value


class ManifestModel(BaseModel):
    """Wire model for a manifest document."""

    model_config: ClassVar[ConfigDict] = WIRE_MODEL_CONFIG

    name: Annotated[StrictStr, Field(min_length=1)]
    platforms: dict[PlatformKeyField, ArtifactEntryModel]


def _issue_from_error(error: ErrorDetails) -> ManifestIssue:
    loc = error["loc"]
    platform: str | None = None
    field: str | None = None
    if len(loc) >= 2 and loc[0] == "platforms":
        platform = str(loc[1])
        rest = loc[2:]
        if rest and rest[0] != "[key]":
            field = str(rest[0])
    elif loc:
        field = str(loc[0])

    error_type = error["type"]
    if error_type == "missing":
        return ManifestIssue(
            kind=IssueKind.MISSING_FIELD,
            message=f"missing required field '{field}'",
            platform=platform,
            field=field,
        )
    try:
        kind = IssueKind(error_type)
    except ValueError:
        kind = IssueKind.INVALID_FIELD
    return ManifestIssue(kind=kind, message=error["msg"], platform=platform, field=field)


def _issue_sort_key(issue: ManifestIssue, platform_order: Mapping[str, int]) -> tuple[int, int, int, int]:
    stage = {IssueKind.INVALID_PLATFORM_KEY: 0, IssueKind.MISSING_FIELD: 1}.get(issue.kind, 2)
    if issue.platform is None:
        field_rank = TOP_LEVEL_FIELD_ORDER.index(issue.field) if issue.field in TOP_LEVEL_FIELD_ORDER else 0
        return (0, 0, stage, field_rank)
    field_rank = ENTRY_FIELD_ORDER.index(issue.field) if issue.field in ENTRY_FIELD_ORDER else -1
    return (1, platform_order.get(issue.platform, len(platform_order)), stage, field_rank)


def issues_from_validation_error(
    exc: ValidationError,
    *,
    platform_order: Mapping[str, int] | None = None,
) -> list[ManifestIssue]:
    """Translate a pydantic ``ValidationError`` into ordered manifest issues.

    Args:
        exc: Error raised while validating ``ManifestModel``.
        platform_order: Position of each platform key in the source document.

    Returns:
        Issues sorted into validation order: top-level fields first, then each
        platform in document order (key check, missing fields, then fields in
        ``ENTRY_FIELD_ORDER``).
    """
    order = platform_order or {}
    issues = [_issue_from_error(error) for error in exc.errors(include_url=False)]
    return sorted(issues, key=lambda issue: _issue_sort_key(issue, order))


def validate_manifest_payload(
    payload: Any,  # noqa: ANN401  # JUSTIFIED: Accepts arbitrary input from JSON parsing, validated at runtime
    *,
    digest_check: DigestCheck = DigestCheck.WARN,
) -> ManifestModel:
    """Validate parsed JSON against the manifest wire models.

    Args:
        payload: Parsed JSON object.
        digest_check: Policy for the digest lexical convention.

    Returns:
        The validated wire model.

    Raises:
        ManifestFieldError: Subclass matching the first issue; ``issues`` holds all of them.
    """
    try:
        return ManifestModel.model_validate(payload, context={DIGEST_CHECK_CONTEXT_KEY: digest_check})
    except ValidationError as exc:
        platforms = payload.get("platforms") if isinstance(payload, Mapping) else None
        order = {str(key): index for index, key in enumerate(platforms)} if isinstance(platforms, Mapping) else {}
        raise error_from_issues(issues_from_validation_error(exc, platform_order=order)) from exc


def entry_from_model(model: ArtifactEntryModel) -> ArtifactEntry:
    """Convert a validated entry model into an immutable ``ArtifactEntry``."""
    return ArtifactEntry(
        digest=Digest(model.digest),
        hash=model.hash,
        path=ArtifactPath(model.path),
        size=model.size,
        providers=tuple(model.providers),
        format=model.format,
        readonly=model.readonly,
    )


def document_from_model(model: ManifestModel) -> ManifestDocument:
    """Convert a validated manifest model into an immutable ``ManifestDocument``.

    Args:
        model: Validated wire model.

    Returns:
        Document whose ``platforms`` preserves the source key order.
    """
    return ManifestDocument(
        name=model.name,
        platforms={PlatformKey(key): entry_from_model(entry) for key, entry in model.platforms.items()},
    )


def manifest_json_schema() -> dict[str, Any]:
    """Return the JSON Schema describing manifest files.

    Returns:
        Dictionary containing the complete JSON Schema definition.
    """
    schema = ManifestModel.model_json_schema(by_alias=True)
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    schema.setdefault("$id", MANIFEST_SCHEMA_ID)
    return schema


__all__ = [
    "DIGEST_CHECK_CONTEXT_KEY",
    "ENTRY_FIELD_ORDER",
    "REQUIRED_ENTRY_FIELDS",
    "ArtifactEntryModel",
    "ManifestModel",
    "check_artifact_path",
    "digest_matches_convention",
    "document_from_model",
    "entry_from_model",
    "issues_from_validation_error",
    "manifest_json_schema",
    "validate_manifest_payload",
]
