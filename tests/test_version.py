"""Tests for appupdater.core.version and UpdateInfo availability."""

import pytest
from semver import Version

from appupdater.core.version import ZERO_VERSION, bump_patch, is_newer, parse_version

from conftest import make_info


class TestParseVersion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("1.2.3", Version(1, 2, 3)),
            ("v1.2.3", Version(1, 2, 3)),
            ("V1.2.3", Version(1, 2, 3)),
            ("  2.0.1\n", Version(2, 0, 1)),
            ("1.2", Version(1, 2, 0)),
            ("v10.4", Version(10, 4, 0)),
            ("1.0.0-beta.2", Version(1, 0, 0, prerelease="beta.2")),
            ("1.0.0-alpha.beta", Version(1, 0, 0, prerelease="alpha.beta")),
            ("1.0.0+build.7", Version(1, 0, 0, build="build.7")),
        ],
        ids=["plain", "v-prefix", "V-prefix", "whitespace", "major-minor", "prefixed-major-minor",
             "prerelease", "dotted-prerelease", "build-metadata"],
    )
    def test_parse(self, raw, expected):
        parsed = parse_version(raw)
        assert parsed == expected
        assert parsed.prerelease == expected.prerelease

    @pytest.mark.parametrize(
        "raw",
        ["", "garbage", "Varies with device", "1.2.x", "2", "1.0.0.5", "1.0.3.12", "01.2.3",
         None, 42],
        ids=["empty", "word", "store-placeholder", "wildcard", "major-only", "four-part",
             "build-number", "leading-zero", "none", "int"],
    )
    def test_garbage_becomes_zero(self, raw):
        assert parse_version(raw) == ZERO_VERSION

    def test_prefix_and_plain_agree(self):
        for a, b, c in [(0, 0, 1), (1, 2, 3), (12, 0, 40)]:
            assert parse_version(f"v{a}.{b}.{c}") == parse_version(f"{a}.{b}.{c}") == Version(a, b, c)

    def test_prerelease_sorts_below_release(self):
        assert parse_version("2.0.0-rc.1") < parse_version("2.0.0")
        assert parse_version("2.0.0-alpha") < parse_version("2.0.0-beta")

    def test_prerelease_labels_compare_as_text(self):
        assert parse_version("1.0.0-alpha") < parse_version("1.0.0-dev")
        assert parse_version("1.0.0-alpha") < parse_version("1.0.0-alpha.beta")
        assert parse_version("1.0.0-alpha.2") < parse_version("1.0.0-alpha.10")

    def test_segments_compare_numerically(self):
        assert parse_version("1.10.0") > parse_version("1.9.9")


class TestHelpers:
    def test_is_newer(self):
        assert is_newer(Version(1, 0, 0), Version(1, 0, 1))
        assert not is_newer(Version(1, 0, 0), Version(1, 0, 0))
        assert not is_newer(Version(1, 0, 1), Version(1, 0, 0))

    def test_bump_patch(self):
        assert bump_patch(Version(1, 4, 9)) == Version(1, 4, 10)
        assert bump_patch(parse_version("2.0")) == Version(2, 0, 1)
        assert bump_patch(parse_version("1.2.3-rc.1")) == Version(1, 2, 4)


class TestUpdateAvailable:
    @pytest.mark.parametrize(
        ("current", "latest", "expected"),
        [
            ("1.0.0", "1.0.1", True),
            ("1.0.0", "1.0.0", False),
            ("1.2.0", "1.1.9", False),
            ("0.9.9", "1.0.0", True),
            ("1.0.0", "garbage", False),
            ("1.0.0", "2", False),
            ("1.0.0", "1.0.3.12", False),
            ("1.0.0", "1.1.0-alpha.beta", True),
        ],
        ids=["patch", "same", "ahead", "major-bump", "malformed-remote", "major-only-remote",
             "four-part-remote", "prerelease-remote"],
    )
    def test_is_update_available(self, current, latest, expected):
        assert make_info(current, latest).is_update_available is expected
