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

"""Loader settings models and configuration errors.

``LoaderSettingsModel`` validates the ``[tool.dotmanifest]`` table (or a
standalone ``dotmanifest.toml``); ``LoaderSettings`` is the immutable runtime
form handed to the manifest loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator

from dotmanifest._infra.exceptions import DotmanifestValidationError
from dotmanifest.core.model_types import DigestCheck

if TYPE_CHECKING:
    from pathlib import Path

DIGEST_CHECK_ALLOWED_VALUES: Final[tuple[str, ...]] = tuple(policy.value for policy in DigestCheck)


class ConfigValidationError(DotmanifestValidationError):
    """Raised when configuration data contains invalid values."""


class ConfigFieldChoiceError(ConfigValidationError):
    """Raised when a configuration field is provided with an unsupported value."""

    def __init__(self, field: str, allowed: tuple[str, ...]) -> None:
        """Initialize the exception with the field name and allowed values.

        Args:
            field: The name of the configuration field (or environment variable).
            allowed: Tuple of allowed values for this field.
        """
        self.field = field
        self.allowed = allowed
        allowed_text = ", ".join(sorted(allowed))
        super().__init__(f"{field} must be one of: {allowed_text}")


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, path: Path, error: Exception) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when a configuration file does not match the settings schema."""

    def __init__(self, path: Path, error: Exception) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Invalid configuration in {path}: {error}")


@dataclass(slots=True, frozen=True)
class LoaderSettings:
    """Runtime options for the manifest loader.

    Attributes:
        digest_check: Policy for digests that do not look like 64 hex characters.
        require_header: Whether manifest files must start with the header line.
    """

    digest_check: DigestCheck = DigestCheck.WARN
    require_header: bool = True


class LoaderSettingsModel(BaseModel):
    """Pydantic model for the settings table; unset fields stay ``None``."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid", populate_by_name=True)

    digest_check: DigestCheck | None = None
    require_header: StrictBool | None = None

    @field_validator("digest_check", mode="before")
    @classmethod
    def _parse_digest_check(cls, value: object) -> DigestCheck | None:
        if value is None or isinstance(value, DigestCheck):
            return value
        if isinstance(value, str):
            try:
                return DigestCheck.from_str(value)
            except ValueError as exc:
                raise ConfigFieldChoiceError("digest_check", DIGEST_CHECK_ALLOWED_VALUES) from exc
        raise ConfigFieldChoiceError("digest_check", DIGEST_CHECK_ALLOWED_VALUES)


__all__ = [
    "DIGEST_CHECK_ALLOWED_VALUES",
    "ConfigFieldChoiceError",
    "ConfigReadError",
    "ConfigValidationError",
    "InvalidConfigFileError",
    "LoaderSettings",
    "LoaderSettingsModel",
]
