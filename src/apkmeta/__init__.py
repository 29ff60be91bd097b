"""apkmeta — typed decoding of Alpine APKBUILD and PKGINFO metadata."""

from .apkbuild import Apkbuild, ApkbuildReader, Secfix, Source
from .decoder import from_mapping, from_ordered_pairs, from_pairs, to_mapping
from .dependency import Constraint, Dependency, Op
from .errors import (
    ApkMetaError,
    CoercionError,
    ConstraintParseError,
    DecodeError,
    InvalidField,
    MissingChecksum,
    MissingField,
    PkgInfoSyntaxError,
    SecfixesSyntaxError,
    ValidationError,
)
from .fileinfo import FileInfo, FileType, Xattr
from .kvmap import KeyValueLike, decode_entries, encode_entries
from .pairs import Pair, PairStream
from .pkginfo import PkgInfo

__all__ = [
    "from_pairs",
    "from_ordered_pairs",
    "from_mapping",
    "to_mapping",
    "Pair",
    "PairStream",
    "KeyValueLike",
    "decode_entries",
    "encode_entries",
    "Op",
    "Constraint",
    "Dependency",
    "PkgInfo",
    "Apkbuild",
    "ApkbuildReader",
    "Source",
    "Secfix",
    "FileInfo",
    "FileType",
    "Xattr",
    "ApkMetaError",
    "DecodeError",
    "MissingField",
    "InvalidField",
    "CoercionError",
    "ConstraintParseError",
    "PkgInfoSyntaxError",
    "SecfixesSyntaxError",
    "MissingChecksum",
    "ValidationError",
]
