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

"""Stable error code registry used across dotmanifest."""

from __future__ import annotations

from typing import TYPE_CHECKING, NewType

from dotmanifest.config import (
    ConfigFieldChoiceError,
    ConfigReadError,
    ConfigValidationError,
    InvalidConfigFileError,
)
from dotmanifest.manifest.errors import (
    DigestFormatMismatchError,
    DuplicateKeyError,
    InvalidArtifactPathError,
    InvalidFieldError,
    InvalidPlatformKeyError,
    MalformedInputError,
    ManifestFieldError,
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

from .exceptions import DotmanifestError, DotmanifestTypeError, DotmanifestValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ErrorCode = NewType("ErrorCode", str)

_ERROR_CODES: dict[type[BaseException], ErrorCode] = {
    DotmanifestError: ErrorCode("DM000"),
    DotmanifestValidationError: ErrorCode("DM100"),
    DotmanifestTypeError: ErrorCode("DM101"),
    ConfigValidationError: ErrorCode("DM110"),
    ConfigFieldChoiceError: ErrorCode("DM111"),
    ConfigReadError: ErrorCode("DM112"),
    InvalidConfigFileError: ErrorCode("DM113"),
    ManifestLoadError: ErrorCode("DM300"),
    MalformedInputError: ErrorCode("DM301"),
    DuplicateKeyError: ErrorCode("DM302"),
    MissingHeaderError: ErrorCode("DM303"),
    ManifestReadError: ErrorCode("DM304"),
    ManifestFieldError: ErrorCode("DM310"),
    InvalidFieldError: ErrorCode("DM311"),
    MissingFieldError: ErrorCode("DM312"),
    InvalidPlatformKeyError: ErrorCode("DM313"),
    UnknownHashAlgorithmError: ErrorCode("DM314"),
    DigestFormatMismatchError: ErrorCode("DM315"),
    InvalidArtifactPathError: ErrorCode("DM316"),
    UnknownArtifactFormatError: ErrorCode("DM317"),
    SizeOutOfRangeError: ErrorCode("DM318"),
    ResolutionError: ErrorCode("DM400"),
    UnknownPlatformError: ErrorCode("DM401"),
}


def error_code_for(exc: BaseException) -> ErrorCode:
    """Return a stable error code for a structured dotmanifest exception.

    Args:
        exc: Exception instance raised by dotmanifest code paths.

    Returns:
        Error code mapped from the exception's class hierarchy.
    """
    for cls in type(exc).__mro__:
        code = _ERROR_CODES.get(cls)
        if code:
            return code
    return ErrorCode("DM000")


def error_code_catalog() -> Mapping[str, ErrorCode]:
    """Return a stable mapping of fully-qualified exception names to error codes.

    Returns:
        Mapping of ``<module>.<ExceptionName>`` strings to error codes.
    """
    result: dict[str, ErrorCode] = {}
    for exc_type, code in _ERROR_CODES.items():
        key = f"{exc_type.__module__}.{exc_type.__name__}"
        result[key] = code
    return result


__all__ = ["ErrorCode", "error_code_catalog", "error_code_for"]
