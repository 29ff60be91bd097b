"""Field validation of decoded records.

Validation is separate from decoding: a record that decoded fine may still
have violations, and :func:`validate` never raises for them — it returns a
list. Use :func:`check` to raise :class:`ValidationError` instead.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

from .apkbuild import Apkbuild, Source
from .dependency import Dependency, Op
from .errors import ValidationError
from .pkginfo import PkgInfo

# This is a bit stricter than apk-tools, which allows letters in more places
# than is sensible, but it's compatible with what's used in aports.
_PKGVER_PART = r"[0-9]+(?:\.[0-9]+)*[a-z]?[0-9]*(?:_[a-z]+[0-9]*)*"

_PATTERNS: dict[str, tuple[str, int]] = {
    "FILE_NAME": (r"^[^/\t\n\r ]+$", 0),
    "NEGATABLE_WORD": (r"^!?[a-z0-9_-]+$", 0),
    "ONE_LINE": (r"^[^\n\r]*$", 0),
    "PKGNAME": (r"^[a-zA-Z0-9][a-zA-Z0-9_.+-]*$", 0),
    "PKGVER": (rf"^{_PKGVER_PART}$", 0),
    "PKGVER_MAYBE_REL": (rf"^{_PKGVER_PART}(?:-r[0-9]+)?$", 0),
    "PKGVER_REL": (rf"^{_PKGVER_PART}-r[0-9]+$", 0),
    "PKGVER_REL_OR_ZERO": (rf"^(?:{_PKGVER_PART}-r[0-9]+|0)$", 0),
    "PROVIDER": (r"^[a-zA-Z0-9_.+\-:/\[\]]+$", 0),
    "REPO_PIN": (r"^[^\t\n\r @<>=~]+$", 0),
    "SHA1": (r"^[a-f0-9]{40}$", 0),
    "SHA256": (r"^[a-f0-9]{64}$", 0),
    "SHA512": (r"^[a-f0-9]{128}$", 0),
    "TRIGGER_PATH": (r"^(?:/[^/\t\n\r :]+)+/?$", 0),
    "USER_NAME": (r"^[a-z_][a-z0-9._-]*\$?$", 0),
    "WORD": (r"^[a-z0-9_-]+$", 0),
    # Mailbox format, e.g. ``Kevin Flynn <kevin.flynn@encom.com>``. No IP
    # literals in the domain, no non-ASCII local-part or IDN.
    "EMAIL": (r"""^
        [^\n\r@<>"]*                         # display-name
        <
        [a-zA-Z0-9.!\#$%&*+/=?^_{|}~-]{1,64}  # local-part w/o ' and `
        @
        (?:[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?\.)+
        [a-zA-Z][a-zA-Z0-9-]*[a-zA-Z]        # TLD
        >
        $""", re.VERBOSE),
    # http(s) only, no userinfo, no non-ASCII IDN.
    "URL": (r"""^
        https?://
        (?:
            \[(?:[a-f0-9]{1,4}::?){1,7}[a-f0-9]{0,4}\]   # IPv6-like
            |
            [0-9]{1,3}(?:\.[0-9]{1,3}){3}               # IPv4-like
            |
            (?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+
            [a-z][a-z0-9-]*[a-z]                        # TLD
        )
        (?::[0-9]+)?
        (?:[/?\#][a-z0-9\-._~!$&'()*+,;=:/?\#@%]*)?     # path, query, fragment
        $""", re.VERBOSE | re.IGNORECASE | re.ASCII),
}


@functools.cache
def pattern(name: str) -> re.Pattern:
    """Compile the named pattern on first use and keep it for the process."""
    source, flags = _PATTERNS[name]
    return re.compile(source, flags)


@dataclass(frozen=True)
class Violation:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def validate(record) -> list[Violation]:
    """Return the violations found in a PkgInfo, Apkbuild or dependency list."""
    out: list[Violation] = []
    if isinstance(record, PkgInfo):
        _validate_pkginfo(record, out)
    elif isinstance(record, Apkbuild):
        _validate_apkbuild(record, out)
    elif isinstance(record, list):
        _validate_dependencies("dependencies", record, out)
    else:
        raise TypeError(f"cannot validate {type(record).__name__}")
    return out


def check(record) -> None:
    """Raise :class:`ValidationError` if *record* has any violation."""
    violations = validate(record)
    if violations:
        raise ValidationError(violations)


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------

def _match(out: list[Violation], path: str, value: str | None, name: str) -> None:
    if value is not None and not pattern(name).fullmatch(value):
        out.append(Violation(path, f"does not match the {name} pattern"))


def _email(out: list[Violation], path: str, value: str | None) -> None:
    if value is not None and not pattern("EMAIL").fullmatch(value):
        out.append(Violation(
            path,
            "is not a valid email address in the mailbox format (e.g. Foo <foo@example.org>)",
        ))


def _http_url(out: list[Violation], path: str, value: str) -> None:
    if not pattern("URL").fullmatch(value):
        out.append(Violation(
            path, "is not a valid URL with http or https scheme and without userinfo",
        ))


def _one_line_desc(out: list[Violation], path: str, value: str) -> None:
    if len(value) > 128:
        out.append(Violation(path, "is longer than 128 characters"))
    _match(out, path, value, "ONE_LINE")


def _license(out: list[Violation], path: str, value: str) -> None:
    if not value.isascii():
        out.append(Violation(path, "is not ASCII"))
    _match(out, path, value, "ONE_LINE")


def _source_uri(out: list[Violation], path: str, value: str) -> None:
    if "://" in value:
        _http_url(out, path, value)
    elif value.startswith("/") or value.startswith("../") or "/../" in value:
        out.append(Violation(path, "is not a relative path with no '../'"))
    elif any(c in value for c in " \t\n\r\f"):
        out.append(Violation(path, "must not contain whitespaces"))


def _validate_dependency(path: str, dep: Dependency, out: list[Violation]) -> None:
    _match(out, f"{path}.name", dep.name, "PROVIDER")
    if dep.constraint is not None and dep.constraint.op != Op.Checksum:
        _match(out, f"{path}.version", dep.constraint.version, "PKGVER_MAYBE_REL")
    _match(out, f"{path}.repo_pin", dep.repo_pin, "REPO_PIN")


def _validate_dependencies(path: str, deps: list[Dependency], out: list[Violation]) -> None:
    for i, dep in enumerate(deps):
        _validate_dependency(f"{path}[{i}]", dep, out)

    seen: set[str] = set()
    dups: list[str] = []
    for dep in deps:
        if dep.name in seen and dep.name not in dups:
            dups.append(dep.name)
        seen.add(dep.name)
    if dups:
        out.append(Violation(path, f"has duplicate dependency names: {', '.join(dups)}"))


def _validate_source(path: str, source: Source, out: list[Violation]) -> None:
    _match(out, f"{path}.name", source.name, "FILE_NAME")
    _source_uri(out, f"{path}.uri", source.uri)
    _match(out, f"{path}.checksum", source.checksum, "SHA512")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

_DEPENDENCY_FIELDS = {
    PkgInfo: ("depends", "conflicts", "install_if", "provides", "replaces"),
    Apkbuild: (
        "depends", "makedepends", "makedepends_build", "makedepends_host",
        "checkdepends", "install_if", "provides", "replaces",
    ),
}


def _validate_pkginfo(p: PkgInfo, out: list[Violation]) -> None:
    _email(out, "maintainer", p.maintainer)
    _match(out, "pkgname", p.pkgname, "PKGNAME")
    _match(out, "pkgver", p.pkgver, "PKGVER_REL")
    _one_line_desc(out, "pkgdesc", p.pkgdesc)
    _http_url(out, "url", p.url)
    _match(out, "arch", p.arch, "WORD")
    _license(out, "license", p.license)
    for name in _DEPENDENCY_FIELDS[PkgInfo]:
        _validate_dependencies(name, getattr(p, name), out)
    for i, trigger in enumerate(p.triggers):
        _match(out, f"triggers[{i}]", trigger, "TRIGGER_PATH")
    _match(out, "origin", p.origin, "PKGNAME")
    _match(out, "commit", p.commit, "SHA1")
    if p.builddate < 0:
        out.append(Violation("builddate", "must not be negative"))
    _email(out, "packager", p.packager)
    _match(out, "datahash", p.datahash, "SHA256")


def _validate_apkbuild(a: Apkbuild, out: list[Violation]) -> None:
    _email(out, "maintainer", a.maintainer)
    for i, contributor in enumerate(a.contributors):
        _email(out, f"contributors[{i}]", contributor)
    _match(out, "pkgname", a.pkgname, "PKGNAME")
    _match(out, "pkgver", a.pkgver, "PKGVER")
    _one_line_desc(out, "pkgdesc", a.pkgdesc)
    _http_url(out, "url", a.url)
    for i, arch in enumerate(a.arch):
        _match(out, f"arch[{i}]", arch, "WORD")
    _license(out, "license", a.license)
    for name in _DEPENDENCY_FIELDS[Apkbuild]:
        _validate_dependencies(name, getattr(a, name), out)
    for name in ("pkgusers", "pkggroups"):
        for i, user in enumerate(getattr(a, name)):
            _match(out, f"{name}[{i}]", user, "USER_NAME")
    _match(out, "pcprefix", a.pcprefix, "PROVIDER")
    _match(out, "sonameprefix", a.sonameprefix, "PROVIDER")
    for i, subpkg in enumerate(a.subpackages):
        _match(out, f"subpackages[{i}]", subpkg, "PKGNAME")
    for i, source in enumerate(a.source):
        _validate_source(f"sources[{i}]", source, out)
    for i, option in enumerate(a.options):
        _match(out, f"options[{i}]", option, "NEGATABLE_WORD")
    for i, secfix in enumerate(a.secfixes):
        _match(out, f"secfixes[{i}].version", secfix.version, "PKGVER_REL_OR_ZERO")
