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

"""Load manifest text into validated, immutable documents.

:func:`load` is the core operation: it parses JSON text, validates it and
returns a :class:`ManifestDocument`, or raises a
:class:`~dotmanifest.manifest.errors.ManifestLoadError` subclass. It performs
no I/O and touches no shared state, so concurrent calls need no coordination.
:func:`load_file` and :func:`load_path` add handling of the executable file
header line.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Final

from dotmanifest._infra.logging_utils import structured_extra
from dotmanifest.config.models import LoaderSettings
from dotmanifest.core.model_types import DigestCheck, LogComponent
from dotmanifest.json import DuplicateJSONKeyError, JSONNumberError, loads_unique

from .errors import (
    DuplicateKeyError,
    MalformedInputError,
    ManifestFieldError,
    ManifestReadError,
    MissingHeaderError,
)
from .models import digest_matches_convention, document_from_model, validate_manifest_payload

if TYPE_CHECKING:
    import os

    from dotmanifest.json import JSONMapping

    from .document import ManifestDocument

REQUIRED_HEADER: Final[str] = "#!/usr/bin/env dotslash"

logger = logging.getLogger("dotmanifest.manifest")


def parse_json(raw_text: str | bytes) -> JSONMapping:
    """Parse manifest text into a generic JSON object.

    Args:
        raw_text: UTF-8 JSON text (``bytes`` are decoded as UTF-8).

    Returns:
        The root JSON object.

    Raises:
        MalformedInputError: If the text is not valid UTF-8 or JSON, or the
            root is not an object.
        DuplicateKeyError: If any object repeats a key.
    """
    if isinstance(raw_text, bytes):
        try:
            raw_text = raw_text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInputError(f"input is not valid UTF-8 ({exc.reason})", pos=exc.start) from exc
    try:
        value = loads_unique(raw_text)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(exc.msg, lineno=exc.lineno, colno=exc.colno, pos=exc.pos) from exc
    except DuplicateJSONKeyError as exc:
        raise DuplicateKeyError(exc.key) from exc
    except JSONNumberError as exc:
        raise MalformedInputError(str(exc)) from exc
    if not isinstance(value, dict):
        message = f"root must be a JSON object, not {type(value).__name__}"
        raise MalformedInputError(message)
    return value


def validate(payload: JSONMapping, *, settings: LoaderSettings | None = None) -> ManifestDocument:
    """Validate an already parsed JSON object into a document.

    Args:
        payload: Root JSON object.
        settings: Loader settings; defaults to ``LoaderSettings()``.

    Returns:
        The validated document.

    Raises:
        ManifestFieldError: Subclass describing the first problem found.
    """
    active = settings or LoaderSettings()
    try:
        model = validate_manifest_payload(payload, digest_check=active.digest_check)
    except ManifestFieldError as exc:
        extra = structured_extra(component=LogComponent.MANIFEST, issue_count=len(exc.issues))
        name = payload.get("name")
        if isinstance(name, str):
            extra["manifest"] = name
        logger.debug("Manifest validation failed with %d issue(s)", len(exc.issues), extra=extra)
        raise
    document = document_from_model(model)
    if active.digest_check is DigestCheck.WARN:
        _warn_unconventional_digests(document)
    return document


def load(raw_text: str | bytes, *, settings: LoaderSettings | None = None) -> ManifestDocument:
    """Parse and validate manifest JSON text.

    Args:
        raw_text: Manifest JSON text.
        settings: Loader settings; defaults to ``LoaderSettings()``.

    Returns:
        The validated, immutable document. A partially valid document is
        never returned.

    Raises:
        MalformedInputError: If the text is not object-rooted JSON.
        ManifestFieldError: Subclass for the first validation failure; its
            ``issues`` attribute lists every failure in the document.
    """
    started = time.perf_counter()
    document = validate(parse_json(raw_text), settings=settings)
    logger.debug(
        "Loaded manifest '%s'",
        document.name,
        extra=structured_extra(
            component=LogComponent.MANIFEST,
            manifest=document.name,
            platform_count=len(document.platforms),
            duration_ms=(time.perf_counter() - started) * 1000,
        ),
    )
    return document


def strip_header(data: str) -> str:
    """Remove the required header line from manifest file contents.

    Args:
        data: Full file contents.

    Returns:
        The contents after the header line.

    Raises:
        MissingHeaderError: If the data does not start with the header line
            followed by ``\\n`` or ``\\r\\n``.
    """
    if data.startswith(REQUIRED_HEADER):
        rest = data[len(REQUIRED_HEADER) :]
        for newline in ("\r\n", "\n"):
            if rest.startswith(newline):
                return rest[len(newline) :]
    raise MissingHeaderError(REQUIRED_HEADER)


def parse_file(data: str, *, settings: LoaderSettings | None = None) -> tuple[JSONMapping, ManifestDocument]:
    """Parse manifest file contents, returning the raw JSON alongside the document.

    When ``settings.require_header`` is false, contents without a header are
    accepted as plain JSON; a present header is still stripped.

    Args:
        data: Full file contents.
        settings: Loader settings; defaults to ``LoaderSettings()``.

    Returns:
        Tuple of the root JSON object and the validated document.
    """
    active = settings or LoaderSettings()
    if active.require_header or data.startswith(REQUIRED_HEADER):
        data = strip_header(data)
    payload = parse_json(data)
    return payload, validate(payload, settings=active)


def load_file(data: str, *, settings: LoaderSettings | None = None) -> ManifestDocument:
    """Parse manifest file contents (header line plus JSON) into a document."""
    return parse_file(data, settings=settings)[1]


def load_path(path: str | os.PathLike[str], *, settings: LoaderSettings | None = None) -> ManifestDocument:
    """Read a manifest file from disk and load it.

    Args:
        path: Location of the manifest file.
        settings: Loader settings; defaults to ``LoaderSettings()``.

    Returns:
        The validated document.

    Raises:
        ManifestReadError: If the file cannot be read as UTF-8 text.
    """
    source = Path(path)
    try:
        data = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestReadError(source, exc) from exc
    document = load_file(data, settings=settings)
    logger.info(
        "Loaded manifest '%s' from %s",
        document.name,
        source,
        extra=structured_extra(
            component=LogComponent.MANIFEST,
            manifest=document.name,
            path=source,
            platform_count=len(document.platforms),
        ),
    )
    return document


def _warn_unconventional_digests(document: ManifestDocument) -> None:
    for key, entry in document.platforms.items():
        if digest_matches_convention(entry.digest, entry.hash):
            continue
        logger.warning(
            "Digest for platform '%s' is not a %d-character hex %s digest",
            key,
            entry.hash.digest_length,
            entry.hash.value,
            extra=structured_extra(
                component=LogComponent.MANIFEST,
                manifest=document.name,
                platform=key,
                details={"digest": entry.digest, "hash": entry.hash},
            ),
        )


__all__ = [
    "REQUIRED_HEADER",
    "load",
    "load_file",
    "load_path",
    "parse_file",
    "parse_json",
    "strip_header",
    "validate",
]
