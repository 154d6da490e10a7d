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

"""Configuration management for dotmanifest.

Resolves the loader settings from explicit arguments, environment variables
and TOML configuration files.
"""

from __future__ import annotations

from .loader import LoadedSettings, load_settings, load_settings_with_metadata
from .models import (
    ConfigFieldChoiceError,
    ConfigReadError,
    ConfigValidationError,
    InvalidConfigFileError,
    LoaderSettings,
    LoaderSettingsModel,
)

__all__ = [
    "ConfigFieldChoiceError",
    "ConfigReadError",
    "ConfigValidationError",
    "InvalidConfigFileError",
    "LoadedSettings",
    "LoaderSettings",
    "LoaderSettingsModel",
    "load_settings",
    "load_settings_with_metadata",
]
