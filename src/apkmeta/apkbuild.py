"""APKBUILD records decoded from the output of an evaluating shell.

Evaluating an APKBUILD means sourcing it in a shell and echoing the value of
every field; that part is left to the caller. :class:`ApkbuildReader` gives
the script to run and decodes its captured output together with the
APKBUILD text (maintainer, contributors and secfixes live in comments).
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .decoder import from_ordered_pairs
from .dependency import Dependency
from .errors import CoercionError, MissingChecksum, SecfixesSyntaxError
from .kvmap import KeyValueLike
from .pairs import Pair
from .typedef import PrimitiveKind

logger = logging.getLogger(__name__)

#: CPU architectures the ``all`` and ``noarch`` keywords expand to.
ARCH_ALL = (
    "aarch64", "armhf", "armv7", "ppc64le", "riscv64", "s390x", "x86", "x86_64",
)

FIELD_SEPARATOR = "\x1e"

# Fields taken from comments rather than from the evaluated shell variables.
_COMMENT_FIELDS = ("maintainer", "contributors", "secfixes")

# Fields whose value is kept whole instead of being split into words.
_VERBATIM_FIELDS = ("license", "pkgdesc", "pkgver", "url")

# Fields evaluated but post-processed outside the pair decoder.
_SPECIAL_FIELDS = ("arch", "source", "sha512sums")


# ---------------------------------------------------------------------------
# Sources and secfixes
# ---------------------------------------------------------------------------

@dataclass
class Source:
    """A source file: its name, where it comes from and its SHA-512."""

    name: str
    uri: str
    checksum: str


@dataclass
class Secfix(KeyValueLike):
    """Vulnerabilities fixed in ``version``.

    ``version`` is ``0`` for vulnerabilities that never affected the package.
    """

    version: str
    fixes: list[str] = field(default_factory=list)

    @classmethod
    def from_key_value(cls, key: str, value) -> Secfix:
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise CoercionError(f"invalid type: {type(value).__name__}, expected a sequence")
        return cls(version=key, fixes=list(value))

    def to_key_value(self) -> tuple[str, list[str]]:
        return self.version, list(self.fixes)

    @classmethod
    def from_element(cls, item) -> Secfix:
        if not isinstance(item, Mapping):
            raise CoercionError(f"invalid type: {type(item).__name__}, expected a map")
        if "version" not in item:
            raise CoercionError("missing field 'version'")
        return cls(version=item["version"], fixes=list(item.get("fixes", ())))


# ---------------------------------------------------------------------------
# Apkbuild
# ---------------------------------------------------------------------------

@dataclass(kw_only=True)
class Apkbuild:
    maintainer: str | None = None
    contributors: list[str] = field(default_factory=list)
    pkgname: str
    pkgver: str
    pkgrel: int = field(metadata={"kind": PrimitiveKind.UInt})
    pkgdesc: str
    url: str
    arch: list[str] = field(default_factory=list)
    license: str
    depends: list[Dependency] = field(default_factory=list)
    makedepends: list[Dependency] = field(default_factory=list)
    makedepends_build: list[Dependency] = field(default_factory=list)
    makedepends_host: list[Dependency] = field(default_factory=list)
    checkdepends: list[Dependency] = field(default_factory=list)
    install_if: list[Dependency] = field(default_factory=list)
    pkgusers: list[str] = field(default_factory=list)
    pkggroups: list[str] = field(default_factory=list)
    provides: list[Dependency] = field(default_factory=list)
    provider_priority: int | None = field(default=None, metadata={"kind": PrimitiveKind.UInt})
    pcprefix: str | None = None
    sonameprefix: str | None = None
    replaces: list[Dependency] = field(default_factory=list)
    replaces_priority: int | None = field(default=None, metadata={"kind": PrimitiveKind.UInt})
    install: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)
    subpackages: list[str] = field(default_factory=list)
    source: list[Source] = field(default_factory=list, metadata={"key": "sources"})
    options: list[str] = field(default_factory=list)
    secfixes: list[Secfix] = field(default_factory=list)


@dataclass
class ApkbuildReader:
    """Decodes an APKBUILD from its evaluated field values.

    Usage::

        reader = ApkbuildReader()
        script = reader.eval_script()   # run with APKBUILD=<file> in its dir
        apkbuild = reader.decode(apkbuild_text, captured_stdout)
    """

    arch_all: list[str] = field(default_factory=lambda: list(ARCH_ALL))

    def eval_fields(self) -> list[str]:
        """Names of the shell variables the evaluation script echoes, in order."""
        names = [f.name for f in dataclasses.fields(Apkbuild) if f.name not in _COMMENT_FIELDS]
        return names + ["sha512sums"]

    def eval_script(self) -> str:
        echoed = "".join(f"${name}{FIELD_SEPARATOR}" for name in self.eval_fields())
        return f'. ./"$APKBUILD" >/dev/null; echo "{echoed}"'

    def decode(self, apkbuild_text: str, evaluated: str) -> Apkbuild:
        """Build an :class:`Apkbuild` from the APKBUILD text and the captured
        output of :meth:`eval_script`."""
        values = evaluated.rstrip(" \t\r\n").split(FIELD_SEPARATOR)
        if values and values[-1] == "":
            values.pop()

        special: dict[str, str] = {}
        pairs: list[Pair] = []
        for key, val in zip(self.eval_fields(), values):
            if key in _SPECIAL_FIELDS:
                special[key] = val
            elif key in _VERBATIM_FIELDS:
                pairs.append(Pair(key, val))
            else:
                for word in val.split():
                    if key == "subpackages":
                        word = word.split(":")[0]
                    pairs.append(Pair(key, word))

        logger.debug("decoding APKBUILD from %d pairs", len(pairs))
        apkbuild = from_ordered_pairs(Apkbuild, pairs)

        if "arch" in special:
            apkbuild.arch = expand_arch(special["arch"], self.arch_all)
        if "source" in special:
            apkbuild.source = decode_sources(special["source"], special.get("sha512sums", ""))

        apkbuild.maintainer = parse_maintainer(apkbuild_text)
        apkbuild.contributors = parse_contributors(apkbuild_text)
        apkbuild.secfixes = parse_secfixes(apkbuild_text)

        return apkbuild


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def expand_arch(value: str, arch_all) -> list[str]:
    """Expand ``all``/``noarch``, drop ``!arch`` exclusions, sort and dedupe."""
    arches: list[str] = []
    for token in value.split():
        if token in ("all", "noarch"):
            arches.extend(arch_all)
        elif token.startswith("!"):
            arches = [a for a in arches if a != token[1:]]
        else:
            arches.append(token)
    return sorted(set(arches))


def _comment_attribute(name: str, line: str) -> str | None:
    line = line.strip()
    if not line.startswith("# "):
        return None
    rest = line[2:].lstrip()
    if not rest.startswith(name):
        return None
    return rest[len(name):].lstrip() or None


def parse_maintainer(text: str) -> str | None:
    for line in text.splitlines():
        value = _comment_attribute("Maintainer:", line)
        if value is not None:
            return value
    return None


def parse_contributors(text: str) -> list[str]:
    """Contributors listed in the first 10 lines."""
    found = (_comment_attribute("Contributor:", line) for line in text.splitlines()[:10])
    return [c for c in found if c is not None]


def parse_secfixes(text: str) -> list[Secfix]:
    """Parse the ``# secfixes:`` comment block.

    Example::

        # secfixes:
        #   1.1-r0:
        #     - CVE-2022-1236
    """
    lines = iter(enumerate(text.splitlines(), start=1))
    secfixes: list[Secfix] = []

    for _, line in lines:
        if line.startswith("# secfixes:"):
            break
    else:
        return secfixes

    for lno, raw in lines:
        if not raw.startswith("#   "):
            break
        body = raw[4:]
        line = body.split(" #")[0].strip()

        if line.startswith("- "):
            if not secfixes:
                raise SecfixesSyntaxError(lno, body)
            secfixes[-1].fixes.append(line[2:].lstrip())
        elif line.endswith(":"):
            secfixes.append(Secfix(version=line[:-1]))
        else:
            raise SecfixesSyntaxError(lno, body)

    return secfixes


def decode_sources(source: str, sha512sums: str) -> list[Source]:
    """Join ``source`` entries with their checksums from ``sha512sums``."""
    words = sha512sums.split()
    checksums = {name: checksum for checksum, name in zip(words[0::2], words[1::2])}

    sources: list[Source] = []
    for item in source.split():
        if "::" in item:
            name, _, uri = item.partition("::")
        elif "/" in item:
            name, uri = item.rsplit("/", 1)[1], item
        else:
            name, uri = item, item

        if name not in checksums:
            raise MissingChecksum(name)
        sources.append(Source(name=name, uri=uri, checksum=checksums.pop(name)))

    return sources
