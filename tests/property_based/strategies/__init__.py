# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Common Hypothesis strategies."""

from __future__ import annotations

from .common import (
    artifact_entries,
    artifact_paths,
    hex_digests,
    manifest_payloads,
    path_segments,
    platform_keys,
    provider_values,
)

__all__ = [
    "artifact_entries",
    "artifact_paths",
    "hex_digests",
    "manifest_payloads",
    "path_segments",
    "platform_keys",
    "provider_values",
]
