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

"""dotmanifest: load, validate and resolve multi-platform artifact manifests.

A manifest maps platform identifiers to the single artifact published for each
platform (digest, hash algorithm, logical path, size, archive format and
ordered providers)::

    from dotmanifest import load, resolve, verify_digest

    document = load(text)
    entry = resolve(document, "linux-x86_64")
    ok = verify_digest(entry, computed)
"""

from __future__ import annotations

from dotmanifest._infra.error_codes import error_code_for
from dotmanifest._infra.exceptions import DotmanifestError, DotmanifestTypeError, DotmanifestValidationError
from dotmanifest._infra.logging_utils import configure_logging
from dotmanifest.config import LoaderSettings, load_settings
from dotmanifest.core.model_types import ArtifactFormat, DigestCheck, HashAlgorithm
from dotmanifest.manifest import (
    REQUIRED_HEADER,
    ArtifactEntry,
    DigestFormatMismatchError,
    DuplicateKeyError,
    InvalidArtifactPathError,
    InvalidFieldError,
    InvalidPlatformKeyError,
    MalformedInputError,
    ManifestDocument,
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
    dump,
    load,
    load_file,
    load_path,
    manifest_json_schema,
    parse_file,
    resolve,
    verify_digest,
)

__version__ = "0.1.0"

__all__ = [
    "REQUIRED_HEADER",
    "ArtifactEntry",
    "ArtifactFormat",
    "DigestCheck",
    "DigestFormatMismatchError",
    "DotmanifestError",
    "DotmanifestTypeError",
    "DotmanifestValidationError",
    "DuplicateKeyError",
    "HashAlgorithm",
    "InvalidArtifactPathError",
    "InvalidFieldError",
    "InvalidPlatformKeyError",
    "LoaderSettings",
    "MalformedInputError",
    "ManifestDocument",
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
    "__version__",
    "configure_logging",
    "dump",
    "error_code_for",
    "load",
    "load_file",
    "load_path",
    "load_settings",
    "manifest_json_schema",
    "parse_file",
    "resolve",
    "verify_digest",
]
