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

"""Core types shared by the manifest loader, configuration and logging layers."""

from __future__ import annotations

from .model_types import ArtifactFormat, DigestCheck, HashAlgorithm, LogComponent, LogFormat
from .type_aliases import MAX_ARTIFACT_SIZE, ArtifactPath, Digest, PlatformKey

__all__ = [
    "MAX_ARTIFACT_SIZE",
    "ArtifactFormat",
    "ArtifactPath",
    "Digest",
    "DigestCheck",
    "HashAlgorithm",
    "LogComponent",
    "LogFormat",
    "PlatformKey",
]
