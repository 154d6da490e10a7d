# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from typing import Any

from hypothesis import strategies as st

from dotmanifest.core.model_types import ArtifactFormat, HashAlgorithm
from dotmanifest.core.type_aliases import MAX_ARTIFACT_SIZE

__all__ = [
    "artifact_entries",
    "artifact_paths",
    "hex_digests",
    "manifest_payloads",
    "path_segments",
    "platform_keys",
    "provider_values",
]

_JSON_SCALARS: st.SearchStrategy[Any] = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(10**9), max_value=10**9),
    st.text(max_size=10),
)


def path_segments(max_size: int = 8) -> st.SearchStrategy[str]:
    """Return a strategy for non-empty path segments without separators."""
    return st.text(
        alphabet=st.characters(exclude_characters="/\\", exclude_categories=("Cs",)),
        min_size=1,
        max_size=max_size,
    )


def artifact_paths(max_segments: int = 4) -> st.SearchStrategy[str]:
    """Return a strategy for valid forward-slash artifact paths."""
    return st.lists(path_segments(), min_size=1, max_size=max_segments).map("/".join)


def hex_digests() -> st.SearchStrategy[str]:
    """Strategy for 64-character lowercase hex digests."""
    return st.text(alphabet="0123456789abcdef", min_size=64, max_size=64)


def platform_keys() -> st.SearchStrategy[str]:
    """Strategy for platform keys such as ``linux-x86_64``."""
    return st.from_regex(r"[a-z][a-z0-9_-]{0,15}", fullmatch=True)


def provider_values() -> st.SearchStrategy[list[Any]]:
    """Return a strategy for opaque provider lists.

    Returns:
        Lists mixing typical provider objects with arbitrary JSON values.
    """
    http_provider = st.fixed_dictionaries(
        {"type": st.just("http"), "url": st.text(min_size=1, max_size=20)},
    )
    arbitrary = st.recursive(
        _JSON_SCALARS,
        lambda children: st.lists(children, max_size=3) | st.dictionaries(st.text(max_size=5), children, max_size=3),
        max_leaves=5,
    )
    return st.lists(st.one_of(http_provider, arbitrary), max_size=3)


def artifact_entries() -> st.SearchStrategy[dict[str, Any]]:
    """Return a strategy for valid artifact entry payloads."""
    return st.fixed_dictionaries(
        {
            "size": st.integers(min_value=0, max_value=MAX_ARTIFACT_SIZE),
            "hash": st.sampled_from([member.value for member in HashAlgorithm]),
            "digest": hex_digests(),
            "path": artifact_paths(),
            "providers": provider_values(),
        },
        optional={
            "format": st.sampled_from([member.value for member in ArtifactFormat]),
            "readonly": st.booleans(),
        },
    )


def manifest_payloads(max_platforms: int = 4) -> st.SearchStrategy[dict[str, Any]]:
    """Return a strategy for valid manifest payloads.

    Args:
        max_platforms: Upper bound on the number of platform entries.

    Returns:
        Hypothesis strategy producing JSON-ready manifest dictionaries.
    """
    return st.fixed_dictionaries(
        {
            "name": st.text(min_size=1, max_size=20),
            "platforms": st.dictionaries(platform_keys(), artifact_entries(), max_size=max_platforms),
        },
    )
