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

"""Version-tolerant imports for dotmanifest (Python 3.10+).

Modules that need TOML parsing, a UTC timezone, string enums, or newer typing
constructs import them from here instead of branching on the interpreter
version themselves.

Deps (pyproject markers):
- typing_extensions (for py<3.12)
- tomli (for py<3.11)
"""

from __future__ import annotations

import datetime as _dt
import enum as _enum
from datetime import timezone as _timezone
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    import tomli as tomllib
else:
    try:
        import tomllib  # py311+
    except ModuleNotFoundError:
        import tomli as tomllib


UTC = getattr(_dt, "UTC", _timezone.utc)


class _StrEnumBase(str, _enum.Enum):
    """Type base for StrEnum-like enums."""


_StrEnum = getattr(_enum, "StrEnum", None)

if _StrEnum is None:

    class _CompatStrEnum(_StrEnumBase):
        """Backport of enum.StrEnum for Python 3.10."""

        def __str__(self) -> str:
            return str(self.value)

    StrEnum: type[_StrEnumBase] = _CompatStrEnum
else:
    StrEnum: type[_StrEnumBase] = cast("type[_StrEnumBase]", _StrEnum)


if TYPE_CHECKING:
    from typing_extensions import (
        TypedDict,  # noqa: TC004  # JUSTIFIED: for py310 type checking
        Unpack,
        override,
    )
else:
    from typing import TypedDict

    try:
        from typing import override
    except ImportError:  # py<3.12
        from typing_extensions import override

    try:
        from typing import Unpack
    except ImportError:  # py<3.11
        from typing_extensions import Unpack


__all__ = [
    "UTC",
    "StrEnum",
    "TypedDict",
    "Unpack",
    "override",
    "tomllib",
]
