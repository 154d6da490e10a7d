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

"""Manifest loading, validation and platform resolution.

Key components:
    - load / load_file / load_path: Parse and validate manifest text
    - ManifestDocument / ArtifactEntry: Immutable validated documents
    - resolve / verify_digest: Read-only lookups for fetch pipelines
    - ManifestModel: Pydantic wire models and JSON Schema generation
"""

from __future__ import annotations

from .document import ArtifactEntry, ManifestDocument, document_to_payload, dump, entry_to_payload
from .errors import (
    DigestFormatMismatchError,
    DuplicateKeyError,
    InvalidArtifactPathError,
    InvalidFieldError,
    InvalidPlatformKeyError,
    IssueKind,
    MalformedInputError,
    ManifestFieldError,
    ManifestIssue,
    ManifestLoadError,
    ManifestReadError,
    MissingFieldError,
    MissingHeaderError,
    ResolutionError,
    SizeOutOfRangeError,
    UnknownArtifactFormatError,
    UnknownHashAlgorithmError,
    UnknownPlatformError,
)
from .loader import REQUIRED_HEADER, load, load_file, load_path, parse_file, parse_json, validate
from .models import ArtifactEntryModel, ManifestModel, manifest_json_schema
from .resolver import resolve, verify_digest

__all__ = [
    "REQUIRED_HEADER",
    "ArtifactEntry",
    "ArtifactEntryModel",
    "DigestFormatMismatchError",
    "DuplicateKeyError",
    "InvalidArtifactPathError",
    "InvalidFieldError",
    "InvalidPlatformKeyError",
    "IssueKind",
    "MalformedInputError",
    "ManifestDocument",
    "ManifestFieldError",
    "ManifestIssue",
    "ManifestLoadError",
    "ManifestModel",
    "ManifestReadError",
    "MissingFieldError",
    "MissingHeaderError",
    "ResolutionError",
    "SizeOutOfRangeError",
    "UnknownArtifactFormatError",
    "UnknownHashAlgorithmError",
    "UnknownPlatformError",
    "document_to_payload",
    "dump",
    "entry_to_payload",
    "load",
    "load_file",
    "load_path",
    "manifest_json_schema",
    "parse_file",
    "parse_json",
    "resolve",
    "validate",
    "verify_digest",
]
