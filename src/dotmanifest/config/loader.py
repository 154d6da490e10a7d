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

"""Discover and resolve loader settings.

Settings come from, in order of precedence: explicit keyword arguments,
environment variables (``DOTMANIFEST_DIGEST_CHECK``,
``DOTMANIFEST_REQUIRE_HEADER``), the first configuration file found, and the
``LoaderSettings`` defaults. Configuration files are searched in the given
root: ``dotmanifest.toml`` and ``.dotmanifest.toml`` hold the settings at the
top level, ``pyproject.toml`` under ``[tool.dotmanifest]``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from dotmanifest._infra.logging_utils import structured_extra
from dotmanifest._infra.precedence import resolve_with_precedence
from dotmanifest.compat import tomllib
from dotmanifest.core.model_types import DigestCheck, LogComponent

from .constants import (
    CONFIG_FILENAMES,
    DIGEST_CHECK_ENV,
    FALSE_STRINGS,
    PYPROJECT_FILENAME,
    PYPROJECT_TOOL_KEY,
    REQUIRE_HEADER_ENV,
    TRUE_STRINGS,
)
from .models import (
    DIGEST_CHECK_ALLOWED_VALUES,
    ConfigFieldChoiceError,
    ConfigReadError,
    InvalidConfigFileError,
    LoaderSettings,
    LoaderSettingsModel,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("dotmanifest.config")


@dataclass(slots=True, frozen=True)
class LoadedSettings:
    """Container for resolved settings and the file they were read from.

    Attributes:
        settings: Resolved loader settings.
        path: Configuration file that contributed values, or None.
    """

    settings: LoaderSettings
    path: Path | None


def load_settings(
    explicit_path: Path | None = None,
    *,
    digest_check: DigestCheck | str | None = None,
    require_header: bool | None = None,
    search_root: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LoaderSettings:
    """Resolve loader settings; see :func:`load_settings_with_metadata`.

    Returns:
        Resolved ``LoaderSettings``.
    """
    return load_settings_with_metadata(
        explicit_path,
        digest_check=digest_check,
        require_header=require_header,
        search_root=search_root,
        environ=environ,
    ).settings


def load_settings_with_metadata(
    explicit_path: Path | None = None,
    *,
    digest_check: DigestCheck | str | None = None,
    require_header: bool | None = None,
    search_root: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LoadedSettings:
    """Resolve loader settings together with their source file.

    Args:
        explicit_path: Configuration file to read instead of searching. The
            file must exist and contain dotmanifest settings.
        digest_check: Explicit digest policy, overriding every other source.
        require_header: Explicit header requirement, overriding every other source.
        search_root: Directory searched for configuration files (defaults to
            the current working directory).
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        LoadedSettings with the resolved values and the contributing file.

    Raises:
        ConfigReadError: If a configuration file cannot be read or parsed.
        InvalidConfigFileError: If a configuration file has invalid settings.
        ConfigFieldChoiceError: If an explicit or environment value is invalid.
    """
    env = os.environ if environ is None else environ
    file_model, source = _load_file_settings(explicit_path, search_root or Path.cwd())
    defaults = LoaderSettings()

    settings = LoaderSettings(
        digest_check=resolve_with_precedence(
            explicit_value=_coerce_digest_check(digest_check, field="digest_check"),
            env_value=_coerce_digest_check(env.get(DIGEST_CHECK_ENV), field=DIGEST_CHECK_ENV),
            config_value=file_model.digest_check if file_model else None,
            default=defaults.digest_check,
        ),
        require_header=resolve_with_precedence(
            explicit_value=require_header,
            env_value=_coerce_env_bool(env.get(REQUIRE_HEADER_ENV), field=REQUIRE_HEADER_ENV),
            config_value=file_model.require_header if file_model else None,
            default=defaults.require_header,
        ),
    )
    logger.debug(
        "Resolved loader settings",
        extra=structured_extra(
            component=LogComponent.CONFIG,
            path=source,
            details={"digest_check": settings.digest_check, "require_header": settings.require_header},
        ),
    )
    return LoadedSettings(settings=settings, path=source)


def _coerce_digest_check(value: DigestCheck | str | None, *, field: str) -> DigestCheck | None:
    if value is None or isinstance(value, DigestCheck):
        return value
    if not value.strip():
        return None
    try:
        return DigestCheck.from_str(value)
    except ValueError as exc:
        raise ConfigFieldChoiceError(field, DIGEST_CHECK_ALLOWED_VALUES) from exc


def _coerce_env_bool(value: str | None, *, field: str) -> bool | None:
    if value is None or not value.strip():
        return None
    normalised = value.strip().lower()
    if normalised in TRUE_STRINGS:
        return True
    if normalised in FALSE_STRINGS:
        return False
    raise ConfigFieldChoiceError(field, tuple(TRUE_STRINGS | FALSE_STRINGS))


def _load_file_settings(
    explicit_path: Path | None,
    search_root: Path,
) -> tuple[LoaderSettingsModel | None, Path | None]:
    if explicit_path is not None:
        candidate = explicit_path if explicit_path.is_absolute() else (search_root / explicit_path).resolve()
        model = _load_candidate(candidate, explicit=True)
        return model, candidate
    for name in CONFIG_FILENAMES:
        candidate = search_root / name
        model = _load_candidate(candidate, explicit=False)
        if model is not None:
            return model, candidate.resolve()
    return None, None


def _load_candidate(candidate: Path, *, explicit: bool) -> LoaderSettingsModel | None:
    if not explicit and not candidate.is_file():
        return None
    try:
        raw_map: dict[str, object] = tomllib.loads(candidate.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigReadError(candidate, exc) from exc

    payload = _extract_settings_payload(candidate, raw_map)
    if payload is None:
        if explicit:
            message = f"{candidate.name} does not define a [tool.{PYPROJECT_TOOL_KEY}] table"
            raise InvalidConfigFileError(candidate, ValueError(message))
        return None
    try:
        return LoaderSettingsModel.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigFileError(candidate, exc) from exc


def _extract_settings_payload(candidate: Path, raw_map: dict[str, object]) -> dict[str, object] | None:
    """Extract the settings table from a parsed TOML document.

    Args:
        candidate: Source configuration path.
        raw_map: Data parsed from the TOML document.

    Returns:
        Mapping to validate, or None when a pyproject.toml has no settings table.

    Raises:
        InvalidConfigFileError: If ``[tool.dotmanifest]`` exists but is not a table.
    """
    if candidate.name != PYPROJECT_FILENAME:
        return raw_map
    tool_section = raw_map.get("tool")
    if not isinstance(tool_section, dict):
        return None
    section = cast("dict[str, object]", tool_section).get(PYPROJECT_TOOL_KEY)
    if section is None:
        return None
    if not isinstance(section, dict):
        message = f"[tool.{PYPROJECT_TOOL_KEY}] must be a TOML table"
        raise InvalidConfigFileError(candidate, ValueError(message))
    return cast("dict[str, object]", section)


__all__ = ["LoadedSettings", "load_settings", "load_settings_with_metadata"]
