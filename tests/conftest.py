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

"""Pytest entry point that wires shared fixtures and markers."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with the custom markers used by the test suite."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "property: Property-based tests")


@pytest.fixture(autouse=True)
def _reset_dotmanifest_logging() -> Iterator[None]:
    """Undo ``configure_logging`` side effects so caplog keeps working."""
    yield
    root = logging.getLogger("dotmanifest")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
    for name in ("dotmanifest.manifest", "dotmanifest.resolver", "dotmanifest.config"):
        logging.getLogger(name).setLevel(logging.NOTSET)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove dotmanifest environment variables for the duration of a test."""
    for name in (
        "DOTMANIFEST_DIGEST_CHECK",
        "DOTMANIFEST_REQUIRE_HEADER",
        "DOTMANIFEST_LOG_FORMAT",
        "DOTMANIFEST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
