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

"""Typed aliases used across dotmanifest."""

from __future__ import annotations

from typing import Final, NewType

PlatformKey = NewType("PlatformKey", str)
Digest = NewType("Digest", str)
# Logical, forward-slash separated location of the payload inside an artifact.
# Never round-trip through pathlib/os.path: host separators must not leak in.
ArtifactPath = NewType("ArtifactPath", str)

ARTIFACT_PATH_SEPARATOR: Final[str] = "/"
MAX_ARTIFACT_SIZE: Final[int] = 2**64 - 1

__all__ = [
    "ARTIFACT_PATH_SEPARATOR",
    "MAX_ARTIFACT_SIZE",
    "ArtifactPath",
    "Digest",
    "PlatformKey",
]
