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

"""Builders for manifest payloads used across the test suite."""

from __future__ import annotations

import json
from copy import deepcopy
from typing import Any, Final

from dotmanifest.manifest.loader import REQUIRED_HEADER

SHA256_DIGEST: Final[str] = "7f83b1657ff1fc53b92dc18148a1d65dfc2d4b1fa3d677284addd200126d9069"
BLAKE3_DIGEST: Final[str] = "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"

_SAMPLE_ENTRY: Final[dict[str, Any]] = {
    "size": 123,
    "hash": "sha256",
    "digest": SHA256_DIGEST,
    "format": "tar",
    "path": "bindir/my_tool",
    "providers": [
        {"type": "http", "url": "https://example.com/my_tool.tar"},
        {"type": "github-release", "repo": "example/my_tool", "tag": "v1.0.0", "name": "my_tool.tar"},
    ],
}

__all__ = [
    "BLAKE3_DIGEST",
    "SHA256_DIGEST",
    "build_entry",
    "build_file_text",
    "build_manifest",
    "build_text",
]


def build_entry(**overrides: Any) -> dict[str, Any]:  # noqa: ANN401  # JUSTIFIED: raw JSON payloads
    """Return a valid artifact entry payload with ``overrides`` applied."""
    entry = deepcopy(_SAMPLE_ENTRY)
    entry.update(overrides)
    return entry


def build_manifest(
    platforms: dict[str, dict[str, Any]] | None = None,
    *,
    name: str = "my_tool",
) -> dict[str, Any]:
    """Return a valid manifest payload; defaults to one linux-x86_64 entry."""
    if platforms is None:
        platforms = {"linux-x86_64": build_entry()}
    return {"name": name, "platforms": platforms}


def build_text(payload: dict[str, Any]) -> str:
    """Serialise a payload as manifest JSON text."""
    return json.dumps(payload, indent=2)


def build_file_text(payload: dict[str, Any], *, newline: str = "\n") -> str:
    """Serialise a payload as a manifest file including the header line."""
    return f"{REQUIRED_HEADER}{newline}{build_text(payload)}"
