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

"""Precedence chain resolution for dotmanifest settings.

Precedence (highest to lowest): explicit argument > environment > config file > default.
"""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


def resolve_with_precedence(
    *,
    explicit_value: T | None = None,
    env_value: T | None = None,
    config_value: T | None = None,
    default: T,
) -> T:
    """Resolve a value using the standard precedence chain.

    Args:
        explicit_value: Value passed directly by the caller.
        env_value: Value from an environment variable.
        config_value: Value from a config file.
        default: Fallback default value.

    Returns:
        The highest-precedence non-None value, or default.

    Example:
        >>> resolve_with_precedence(explicit_value=None, env_value="strict", config_value="off", default="warn")
        'strict'
    """
    if explicit_value is not None:
        return explicit_value
    if env_value is not None:
        return env_value
    if config_value is not None:
        return config_value
    return default
