"""File entries of a package archive and their extended attributes."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .errors import CoercionError
from .kvmap import KeyValueLike
from .typedef import PrimitiveKind


class FileType(Enum):
    Regular = "r"
    Link = "H"
    Symlink = "l"
    Char = "c"
    Block = "b"
    Directory = "d"
    Fifo = "p"


@dataclass(frozen=True)
class Xattr(KeyValueLike):
    """An extended file attribute.

    The mapping form holds the value in base64; the sequence form is a
    ``{name, value}`` map with the value as raw bytes or a list of ints.
    """

    name: str
    value: bytes

    @classmethod
    def from_key_value(cls, key: str, value) -> Xattr:
        if not isinstance(value, str):
            raise CoercionError(f"invalid type: {type(value).__name__}, expected a string")
        try:
            return cls(name=key, value=base64.b64decode(value, validate=True))
        except binascii.Error as e:
            raise CoercionError(f"invalid base64 value for xattr '{key}'") from e

    def to_key_value(self) -> tuple[str, str]:
        return self.name, base64.b64encode(self.value).decode("ascii")

    @classmethod
    def from_element(cls, item) -> Xattr:
        if not isinstance(item, Mapping):
            raise CoercionError(f"invalid type: {type(item).__name__}, expected a map")
        for key in ("name", "value"):
            if key not in item:
                raise CoercionError(f"missing field '{key}'")

        name, value = item["name"], item["value"]
        if not isinstance(name, str):
            raise CoercionError(f"invalid type: {type(name).__name__}, expected a string")
        if isinstance(value, (bytes, bytearray)):
            return cls(name=name, value=bytes(value))
        if not isinstance(value, (list, tuple)):
            raise CoercionError(
                f"invalid type: {type(value).__name__}, expected a sequence of bytes"
            )
        if not all(isinstance(b, int) and not isinstance(b, bool) for b in value):
            raise CoercionError(f"invalid value for xattr '{name}', expected integers")
        try:
            return cls(name=name, value=bytes(value))
        except ValueError as e:
            raise CoercionError(f"invalid value for xattr '{name}', expected bytes 0-255") from e


@dataclass(kw_only=True)
class FileInfo:
    """A file (in the general sense, directories included) in a package."""

    path: str
    file_type: FileType = field(metadata={"key": "type"})
    link_target: str | None = None
    uname: str = field(default="root", metadata={"skip_default": True})
    gname: str = field(default="root", metadata={"skip_default": True})
    size: int | None = field(default=None, metadata={"kind": PrimitiveKind.UInt})
    mode: int = field(metadata={"kind": PrimitiveKind.Octal})
    device: int = field(default=0, metadata={"kind": PrimitiveKind.UInt, "skip_default": True})
    digest: str | None = None
    xattrs: list[Xattr] = field(default_factory=list, metadata={"skip_default": True})
