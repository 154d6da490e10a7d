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

"""Unit tests for Manifest Loader."""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any

import pytest

from dotmanifest.config import LoaderSettings
from dotmanifest.core.model_types import ArtifactFormat, DigestCheck, HashAlgorithm
from dotmanifest.manifest import (
    ArtifactEntry,
    DigestFormatMismatchError,
    DuplicateKeyError,
    InvalidArtifactPathError,
    InvalidFieldError,
    InvalidPlatformKeyError,
    IssueKind,
    MalformedInputError,
    ManifestLoadError,
    MissingFieldError,
    SizeOutOfRangeError,
    UnknownArtifactFormatError,
    UnknownHashAlgorithmError,
    dump,
    load,
    resolve,
)
from dotmanifest.manifest.models import REQUIRED_ENTRY_FIELDS
from tests.fixtures.manifests import SHA256_DIGEST, build_entry, build_manifest, build_text

pytestmark = pytest.mark.unit

TOOL_MANIFEST = (
    '{"name":"tool","platforms":{"linux-x64":{"digest":"abc123","hash":"sha256",'
    '"path":"bin/tool","providers":[],"size":1024,"format":"tar.gz"}}}'
)


def _load_entry(**overrides: Any) -> ArtifactEntry:  # noqa: ANN401
    document = load(build_text(build_manifest({"linux-x86_64": build_entry(**overrides)})))
    return resolve(document, "linux-x86_64")


def test_load_tool_manifest() -> None:
    document = load(TOOL_MANIFEST)
    assert document.name == "tool"
    assert document.platform_keys() == ("linux-x64",)
    assert resolve(document, "linux-x64") == ArtifactEntry(
        digest="abc123",
        hash=HashAlgorithm.SHA256,
        path="bin/tool",
        size=1024,
        providers=(),
        format=ArtifactFormat.TAR_GZ,
        readonly=True,
    )


def test_load_backslash_path_fails() -> None:
    text = TOOL_MANIFEST.replace('"bin/tool"', '"bin\\\\tool"')
    assert json.loads(text)["platforms"]["linux-x64"]["path"] == "bin\\tool"
    with pytest.raises(InvalidArtifactPathError) as excinfo:
        _ = load(text)
    assert excinfo.value.platform == "linux-x64"
    assert excinfo.value.field == "path"


def test_load_md5_hash_fails() -> None:
    with pytest.raises(UnknownHashAlgorithmError):
        _ = load(TOOL_MANIFEST.replace('"sha256"', '"md5"'))


def test_load_preserves_provider_order_and_values() -> None:
    payload = build_manifest()
    document = load(build_text(payload))
    entry = resolve(document, "linux-x86_64")
    assert list(entry.providers) == payload["platforms"]["linux-x86_64"]["providers"]
    assert entry.providers[0] == {"type": "http", "url": "https://example.com/my_tool.tar"}


def test_load_accepts_empty_platforms() -> None:
    document = load('{"name": "empty", "platforms": {}}')
    assert document.name == "empty"
    assert len(document.platforms) == 0


def test_load_accepts_bytes() -> None:
    document = load(build_text(build_manifest()).encode("utf-8"))
    assert document.name == "my_tool"


def test_load_ignores_unknown_fields() -> None:
    payload = build_manifest({"linux-x86_64": build_entry(mirror="ignored", extra={"nested": True})})
    payload["$schema"] = "https://example.com/schema.json"
    payload["comment"] = "forward compatible"
    entry = resolve(load(build_text(payload)), "linux-x86_64")
    assert entry.path == "bindir/my_tool"


def test_load_defaults_format_and_readonly() -> None:
    entry = _load_entry()
    assert entry.readonly is True
    plain = build_entry()
    del plain["format"]
    document = load(build_text(build_manifest({"linux-x86_64": plain})))
    assert resolve(document, "linux-x86_64").format is None
    assert resolve(document, "linux-x86_64").is_plain


def test_load_keeps_explicit_readonly_false() -> None:
    assert _load_entry(readonly=False).readonly is False


@pytest.mark.parametrize("field", REQUIRED_ENTRY_FIELDS)
def test_missing_entry_field_is_reported(field: str) -> None:
    entry = build_entry()
    del entry[field]
    with pytest.raises(MissingFieldError) as excinfo:
        _ = load(build_text(build_manifest({"linux-x86_64": entry})))
    assert excinfo.value.field == field
    assert excinfo.value.platform == "linux-x86_64"


@pytest.mark.parametrize("field", ["name", "platforms"])
def test_missing_top_level_field_is_reported(field: str) -> None:
    payload = build_manifest()
    del payload[field]
    with pytest.raises(MissingFieldError) as excinfo:
        _ = load(build_text(payload))
    assert excinfo.value.field == field
    assert excinfo.value.platform is None


@pytest.mark.parametrize("value", ["blake3", "sha256"])
def test_recognised_hash_algorithms_load(value: str) -> None:
    assert _load_entry(hash=value).hash == HashAlgorithm(value)


@pytest.mark.parametrize("value", ["md5", "SHA256", "Blake3", "sha-256", "", 256, None])
def test_unknown_hash_algorithm_is_rejected(value: object) -> None:
    with pytest.raises(UnknownHashAlgorithmError) as excinfo:
        _ = _load_entry(hash=value)
    assert excinfo.value.field == "hash"


@pytest.mark.parametrize("value", [member.value for member in ArtifactFormat])
def test_recognised_formats_load(value: str) -> None:
    assert _load_entry(format=value).format == ArtifactFormat(value)


@pytest.mark.parametrize("value", ["tgz", "TAR", "tar.bz2", "Zip", "", None, 7])
def test_unknown_format_is_rejected(value: object) -> None:
    with pytest.raises(UnknownArtifactFormatError) as excinfo:
        _ = _load_entry(format=value)
    assert excinfo.value.field == "format"


@pytest.mark.parametrize("path", ["tool", "bin/tool", "a/b/c/d.exe", ".hidden/tool", "my tool/x"])
def test_forward_slash_paths_load(path: str) -> None:
    assert _load_entry(path=path).path == path


@pytest.mark.parametrize("path", ["bin\\tool", "C:\\tools\\x.exe", "/bin/tool", "bin/", "bin//tool", ""])
def test_invalid_paths_are_rejected(path: str) -> None:
    with pytest.raises(InvalidArtifactPathError):
        _ = _load_entry(path=path)


@pytest.mark.parametrize("size", [0, 1, 1024, 2**64 - 1])
def test_sizes_in_range_load(size: int) -> None:
    assert _load_entry(size=size).size == size


@pytest.mark.parametrize("size", [-1, -(2**63), 2**64, 2**70])
def test_sizes_out_of_range_are_rejected(size: int) -> None:
    with pytest.raises(SizeOutOfRangeError):
        _ = _load_entry(size=size)


@pytest.mark.parametrize("size", [True, 1.5, 1024.0, "1024", None])
def test_non_integer_sizes_are_invalid(size: object) -> None:
    with pytest.raises(InvalidFieldError) as excinfo:
        _ = _load_entry(size=size)
    assert excinfo.value.field == "size"


def test_empty_digest_is_rejected_even_when_checks_are_off() -> None:
    text = build_text(build_manifest({"linux-x86_64": build_entry(digest="")}))
    with pytest.raises(DigestFormatMismatchError):
        _ = load(text, settings=LoaderSettings(digest_check=DigestCheck.OFF))


def test_strict_digest_check_rejects_unconventional_digest() -> None:
    with pytest.raises(DigestFormatMismatchError) as excinfo:
        _ = load(TOOL_MANIFEST, settings=LoaderSettings(digest_check=DigestCheck.STRICT))
    assert excinfo.value.platform == "linux-x64"


def test_strict_digest_check_accepts_hex_digests_in_any_case() -> None:
    settings = LoaderSettings(digest_check=DigestCheck.STRICT)
    for digest in (SHA256_DIGEST, SHA256_DIGEST.upper()):
        text = build_text(build_manifest({"linux-x86_64": build_entry(digest=digest)}))
        assert resolve(load(text, settings=settings), "linux-x86_64").digest == digest


def test_warn_digest_check_logs_and_loads(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="dotmanifest.manifest"):
        document = load(TOOL_MANIFEST)
    assert resolve(document, "linux-x64").digest == "abc123"
    warnings = [record for record in caplog.records if record.name == "dotmanifest.manifest"]
    assert len(warnings) == 1
    assert "linux-x64" in warnings[0].getMessage()
    assert getattr(warnings[0], "platform", None) == "linux-x64"


def test_off_digest_check_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="dotmanifest.manifest"):
        _ = load(TOOL_MANIFEST, settings=LoaderSettings(digest_check=DigestCheck.OFF))
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]


def test_empty_platform_key_is_rejected() -> None:
    with pytest.raises(InvalidPlatformKeyError) as excinfo:
        _ = load(build_text(build_manifest({"": build_entry()})))
    assert excinfo.value.platform == ""


@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"name": 5, "platforms": {}}, "name"),
        ({"name": "", "platforms": {}}, "name"),
        ({"name": "tool", "platforms": []}, "platforms"),
    ],
)
def test_invalid_top_level_values(payload: dict[str, Any], field: str) -> None:
    with pytest.raises(InvalidFieldError) as excinfo:
        _ = load(build_text(payload))
    assert excinfo.value.field == field


def test_entry_must_be_an_object() -> None:
    with pytest.raises(InvalidFieldError) as excinfo:
        _ = load(build_text(build_manifest({"linux-x86_64": "bindir/my_tool"})))  # type: ignore[dict-item]
    assert excinfo.value.platform == "linux-x86_64"
    assert excinfo.value.field is None


@pytest.mark.parametrize(("field", "value"), [("providers", {"type": "http"}), ("readonly", "yes")])
def test_wrong_json_types_are_invalid(field: str, value: object) -> None:
    with pytest.raises(InvalidFieldError) as excinfo:
        _ = _load_entry(**{field: value})
    assert excinfo.value.field == field


@pytest.mark.parametrize(
    "text",
    [
        "",
        "{",
        "not json",
        '{"name": "x",,}',
        "[1, 2]",
        '"manifest"',
        "null",
        '{"name": NaN, "platforms": {}}',
        '{"name": "x", "platforms": {}, "limit": Infinity}',
        '{"name": "x", "platforms": {}, "limit": -Infinity,}',
    ],
)
def test_malformed_input_is_rejected(text: str) -> None:
    with pytest.raises(MalformedInputError):
        _ = load(text)


def test_non_finite_provider_values_are_rejected() -> None:
    text = build_text(build_manifest()).replace('"https://example.com/my_tool.tar"', "NaN")
    with pytest.raises(MalformedInputError, match="non-finite"):
        _ = load(text)


def test_oversized_integer_literal_is_a_load_error() -> None:
    text = build_text(build_manifest()).replace('"size": 123', f'"size": {"9" * 5000}')
    with pytest.raises(ManifestLoadError) as excinfo:
        _ = load(text)
    assert isinstance(excinfo.value, (MalformedInputError, SizeOutOfRangeError))


def test_long_size_literal_within_digit_limit_is_out_of_range() -> None:
    text = build_text(build_manifest()).replace('"size": 123', f'"size": {"9" * 40}')
    with pytest.raises(SizeOutOfRangeError):
        _ = load(text)


def test_relaxed_syntax_is_accepted() -> None:
    text = """
    // generated by the release pipeline
    {
        "name": "my_tool",
        "platforms": {
            "linux-x86_64": {
                "size": 123,
                "hash": "sha256",
                "digest": "%s",
                "path": "bindir/my_tool", /* plain binary */
                "providers": [{"type": "http", "url": "https://example.com/my_tool"},],
            },
        },
    }
    """ % SHA256_DIGEST  # noqa: UP031
    entry = resolve(load(text), "linux-x86_64")
    assert entry.path == "bindir/my_tool"
    assert entry.providers == ({"type": "http", "url": "https://example.com/my_tool"},)


def test_relaxed_syntax_still_rejects_duplicate_keys() -> None:
    with pytest.raises(DuplicateKeyError) as excinfo:
        _ = load('{"name": "a", "name": "b", "platforms": {},}')
    assert excinfo.value.key == "name"


def test_malformed_input_reports_position() -> None:
    with pytest.raises(MalformedInputError) as excinfo:
        _ = load('{\n  "name": "tool",\n  "platforms": {,}\n}')
    assert excinfo.value.lineno == 3
    assert excinfo.value.colno is not None
    assert excinfo.value.pos is not None
    assert "line 3" in str(excinfo.value)


def test_invalid_utf8_is_malformed() -> None:
    with pytest.raises(MalformedInputError):
        _ = load(b'{"name": "\xff"}')


def test_duplicate_platform_key_is_rejected() -> None:
    entry = json.dumps(build_entry())
    text = f'{{"name": "tool", "platforms": {{"linux": {entry}, "linux": {entry}}}}}'
    with pytest.raises(DuplicateKeyError) as excinfo:
        _ = load(text)
    assert excinfo.value.key == "linux"
    assert isinstance(excinfo.value, MalformedInputError)


def test_all_issues_are_collected_in_validation_order() -> None:
    payload = build_manifest(
        {
            "linux-x86_64": build_entry(path="bin\\tool", size=-5),
            "macos-aarch64": {key: value for key, value in build_entry().items() if key != "hash"},
        },
    )
    with pytest.raises(InvalidArtifactPathError) as excinfo:
        _ = load(build_text(payload))
    issues = excinfo.value.issues
    assert [(issue.platform, issue.kind) for issue in issues] == [
        ("linux-x86_64", IssueKind.INVALID_ARTIFACT_PATH),
        ("linux-x86_64", IssueKind.SIZE_OUT_OF_RANGE),
        ("macos-aarch64", IssueKind.MISSING_FIELD),
    ]
    assert "2 more issue(s)" in str(excinfo.value)


def test_missing_fields_are_reported_before_value_errors() -> None:
    entry = build_entry(hash="md5")
    del entry["digest"]
    with pytest.raises(MissingFieldError) as excinfo:
        _ = load(build_text(build_manifest({"linux-x86_64": entry})))
    assert [issue.kind for issue in excinfo.value.issues] == [
        IssueKind.MISSING_FIELD,
        IssueKind.UNKNOWN_HASH_ALGORITHM,
    ]


def test_top_level_issues_come_first() -> None:
    payload = {"platforms": {"linux-x86_64": build_entry(format="rar")}}
    with pytest.raises(MissingFieldError) as excinfo:
        _ = load(build_text(payload))
    assert excinfo.value.field == "name"
    assert excinfo.value.issues[-1].kind is IssueKind.UNKNOWN_ARTIFACT_FORMAT
    assert excinfo.value.issues[-1].location == "platforms.linux-x86_64.format"


def test_load_errors_share_a_common_base() -> None:
    for error_type in (
        MalformedInputError,
        MissingFieldError,
        InvalidPlatformKeyError,
        UnknownHashAlgorithmError,
        UnknownArtifactFormatError,
        DigestFormatMismatchError,
        InvalidArtifactPathError,
        SizeOutOfRangeError,
    ):
        assert issubclass(error_type, ManifestLoadError)
        assert issubclass(error_type, ValueError)


def test_document_is_immutable() -> None:
    document = load(build_text(build_manifest()))
    with pytest.raises(dataclasses.FrozenInstanceError):
        document.name = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        document.platforms["windows-x86_64"] = resolve(document, "linux-x86_64")  # type: ignore[index]
    entry = resolve(document, "linux-x86_64")
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.size = 0  # type: ignore[misc]


def test_provider_values_are_read_only() -> None:
    payload = build_manifest(
        {"linux-x86_64": build_entry(providers=[{"type": "http", "url": "u", "mirrors": ["a", "b"]}])},
    )
    document = load(build_text(payload))
    provider = resolve(document, "linux-x86_64").providers[0]
    with pytest.raises(TypeError):
        provider["url"] = "changed"  # type: ignore[index]
    with pytest.raises((TypeError, AttributeError)):
        provider["mirrors"].append("c")  # type: ignore[index,union-attr]
    assert resolve(document, "linux-x86_64").providers[0]["url"] == "u"
    assert provider["mirrors"] == ("a", "b")  # type: ignore[index]
    assert json.loads(dump(document))["platforms"]["linux-x86_64"]["providers"] == [
        {"type": "http", "url": "u", "mirrors": ["a", "b"]},
    ]
