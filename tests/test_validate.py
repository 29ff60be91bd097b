"""Tests for record validation."""

import dataclasses

import pytest

from apkmeta.dependency import Dependency
from apkmeta.errors import ValidationError
from apkmeta.pkginfo import PkgInfo
from apkmeta.validate import Violation, check, pattern, validate

from test_apkbuild import sample_apkbuild
from test_pkginfo import sample_pkginfo


def paths(violations):
    return [v.path for v in violations]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("name,value", [
    ("PKGVER", "1.2.3"),
    ("PKGVER", "1.0_rc1"),
    ("PKGVER", "2.0a"),
    ("PKGVER_REL", "1.2.3-r2"),
    ("PKGVER_REL_OR_ZERO", "0"),
    ("PROVIDER", "so:libc.musl-x86_64.so.1"),
    ("EMAIL", "Kevin Flynn <kevin.flynn@encom.com>"),
    ("URL", "https://example.org/sample?x=1#top"),
    ("URL", "http://127.0.0.1:8080/"),
    ("TRIGGER_PATH", "/usr/share/fonts/*"),
])
def test_pattern_matches(name, value):
    assert pattern(name).fullmatch(value)


@pytest.mark.parametrize("name,value", [
    ("PKGVER", "1_2_3"),
    ("PKGVER", "a-r0"),
    ("PKGVER_REL", "1.2.3"),
    ("PROVIDER", "foo doc"),
    ("EMAIL", "kevin.flynn@encom.com"),
    ("URL", "ftp://example.org"),
    ("URL", "https://user@example.org"),
    ("WORD", "x86_64\n"),
])
def test_pattern_rejects(name, value):
    assert not pattern(name).fullmatch(value)


def test_pattern_is_cached():
    assert pattern("PKGNAME") is pattern("PKGNAME")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def test_valid_dependencies():
    deps = [Dependency.parse(s) for s in ("foo", "bar>=1.2-r0", "!baz", "qux><Q1abc", "x@edge")]
    assert validate(deps) == []


@pytest.mark.parametrize("dep,path", [
    (Dependency("!foo"), "dependencies[0].name"),
    (Dependency("foo doc"), "dependencies[0].name"),
    (Dependency.parse("foo=1_2_3"), "dependencies[0].version"),
    (Dependency.parse("foo=a-r0"), "dependencies[0].version"),
    (Dependency("foo", repo_pin="a b"), "dependencies[0].repo_pin"),
])
def test_invalid_dependency(dep, path):
    assert paths(validate([dep])) == [path]


def test_duplicate_dependencies():
    deps = [Dependency.parse(s) for s in ("foo", "bar", "!foo", "baz>1", "baz<2", "foo=1")]
    violations = validate(deps)
    assert violations == [
        Violation("dependencies", "has duplicate dependency names: foo, baz"),
    ]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def test_valid_pkginfo():
    assert validate(sample_pkginfo()) == []


def test_invalid_pkginfo():
    pkginfo = dataclasses.replace(
        sample_pkginfo(),
        pkgver="1.2.3",
        url="ftp://example.org",
        pkgdesc="x" * 129,
        maintainer="nobody",
        builddate=-1,
    )
    assert sorted(paths(validate(pkginfo))) == [
        "builddate", "maintainer", "pkgdesc", "pkgver", "url",
    ]


def test_valid_apkbuild():
    assert validate(sample_apkbuild()) == []


def test_invalid_apkbuild():
    apkbuild = sample_apkbuild()
    apkbuild.source[0].uri = "../outside.tar.gz"
    apkbuild.source[1].checksum = "abc"
    apkbuild.options.append("no check")
    apkbuild.secfixes[0].version = "latest"
    assert sorted(paths(validate(apkbuild))) == [
        "options[1]",
        "secfixes[0].version",
        "sources[0].uri",
        "sources[1].checksum",
    ]


def test_check_raises():
    pkginfo = dataclasses.replace(sample_pkginfo(), arch="x86 64")
    with pytest.raises(ValidationError) as exc:
        check(pkginfo)
    assert exc.value.violations == [Violation("arch", "does not match the WORD pattern")]
    assert "arch: does not match the WORD pattern" in str(exc.value)


def test_check_passes():
    check(sample_pkginfo())


def test_validate_unsupported_type():
    with pytest.raises(TypeError):
        validate(PkgInfo)
