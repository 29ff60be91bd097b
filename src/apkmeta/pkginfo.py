"""The ``.PKGINFO`` control record of an APK package."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from .decoder import from_pairs
from .dependency import Dependency
from .pairs import Pair
from .errors import PkgInfoSyntaxError
from .typedef import PrimitiveKind

logger = logging.getLogger(__name__)

# Fields whose value is a whitespace-separated list on a single line.
_WORD_LIST_KEYS = ("install_if", "triggers")


@dataclass(kw_only=True)
class PkgInfo:
    """The decoded ``.PKGINFO`` file.

    ``conflicts`` does not exist in the file itself: it holds the ``depend``
    entries prefixed with ``!``, so the ``conflict`` flag of every entry in
    both ``depends`` and ``conflicts`` is False.
    """

    maintainer: str | None = None
    pkgname: str
    pkgver: str
    pkgdesc: str
    url: str
    arch: str
    license: str
    depends: list[Dependency] = field(default_factory=list, metadata={"aliases": ("depend",)})
    conflicts: list[Dependency] = field(default_factory=list)
    install_if: list[Dependency] = field(default_factory=list)
    provides: list[Dependency] = field(default_factory=list)
    provider_priority: int | None = field(default=None, metadata={"kind": PrimitiveKind.UInt})
    replaces: list[Dependency] = field(default_factory=list)
    replaces_priority: int | None = field(default=None, metadata={"kind": PrimitiveKind.UInt})
    triggers: list[str] = field(default_factory=list)
    origin: str
    commit: str | None = None
    builddate: int
    packager: str
    size: int = field(metadata={"kind": PrimitiveKind.UInt})
    datahash: str

    @classmethod
    def parse(cls, text: str) -> PkgInfo:
        """Parse the contents of a ``.PKGINFO`` file."""
        pairs: list[Pair] = []
        for key, value in parse_key_value(text):
            if key in _WORD_LIST_KEYS:
                pairs.extend(Pair(key, word) for word in value.split())
            elif key == "depend":
                if value.startswith("!"):
                    pairs.append(Pair("conflicts", value[1:]))
                else:
                    pairs.append(Pair("depends", value))
            else:
                pairs.append(Pair(key, value))

        logger.debug("parsed %d pairs from PKGINFO", len(pairs))
        return from_pairs(cls, pairs)

    def to_text(self) -> str:
        """Render back into ``.PKGINFO`` syntax."""
        lines: list[tuple[str, object]] = [
            ("pkgname", self.pkgname),
            ("pkgver", self.pkgver),
            ("pkgdesc", self.pkgdesc),
            ("url", self.url),
            ("builddate", self.builddate),
            ("packager", self.packager),
            ("size", self.size),
            ("arch", self.arch),
            ("origin", self.origin),
            ("commit", self.commit),
            ("maintainer", self.maintainer),
            ("license", self.license),
        ]
        lines += [("replaces", d) for d in self.replaces]
        lines += [
            ("provider_priority", self.provider_priority),
            ("replaces_priority", self.replaces_priority),
        ]
        if self.triggers:
            lines.append(("triggers", " ".join(self.triggers)))
        lines += [("depend", d) for d in self.depends]
        lines += [("depend", f"!{d}") for d in self.conflicts]
        if self.install_if:
            lines.append(("install_if", " ".join(str(d) for d in self.install_if)))
        lines += [("provides", d) for d in self.provides]
        lines.append(("datahash", self.datahash))

        return "".join(f"{k} = {v}\n" for k, v in lines if v is not None)


def parse_key_value(text: str) -> Iterator[Pair]:
    """Yield pairs from ``key = value`` lines.

    Blank lines and ``#`` comments are skipped; a line without ``" = "``
    raises :class:`PkgInfoSyntaxError`.
    """
    for lno, line in enumerate(text.splitlines(), start=1):
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition(" = ")
        if not sep:
            raise PkgInfoSyntaxError(lno, line)
        yield Pair(key, value)
