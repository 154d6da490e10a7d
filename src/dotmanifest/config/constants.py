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

"""Shared configuration constants for dotmanifest."""

from __future__ import annotations

from typing import Final

CONFIG_FILENAMES: Final[tuple[str, ...]] = ("dotmanifest.toml", ".dotmanifest.toml", "pyproject.toml")
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "dotmanifest"

DIGEST_CHECK_ENV: Final[str] = "DOTMANIFEST_DIGEST_CHECK"
REQUIRE_HEADER_ENV: Final[str] = "DOTMANIFEST_REQUIRE_HEADER"

TRUE_STRINGS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
FALSE_STRINGS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})

__all__ = [
    "CONFIG_FILENAMES",
    "DIGEST_CHECK_ENV",
    "FALSE_STRINGS",
    "PYPROJECT_FILENAME",
    "PYPROJECT_TOOL_KEY",
    "REQUIRE_HEADER_ENV",
    "TRUE_STRINGS",
]
