"""Exception hierarchy for apkmeta."""

from __future__ import annotations


class ApkMetaError(Exception):
    """Base class for all errors raised by apkmeta."""


# ---------------------------------------------------------------------------
# Decode errors
# ---------------------------------------------------------------------------

class DecodeError(ApkMetaError):
    """Decoding of a pair stream or mapping into a record failed."""


class MissingField(DecodeError):
    def __init__(self, field: str) -> None:
        super().__init__(f"missing required field '{field}'")
        self.field = field


class InvalidField(DecodeError):
    """A field's raw value could not be coerced; the cause is chained."""

    def __init__(self, field: str, cause: BaseException) -> None:
        super().__init__(f"invalid field '{field}': {cause}")
        self.field = field
        self.cause = cause


class CoercionError(DecodeError):
    """Generic coercion failure, not yet attributed to a field."""


# ---------------------------------------------------------------------------
# Domain parse errors
# ---------------------------------------------------------------------------

class ConstraintParseError(ApkMetaError, ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f"invalid version constraint: '{text}'")
        self.text = text


class PkgInfoSyntaxError(ApkMetaError):
    def __init__(self, line_no: int, line: str) -> None:
        super().__init__(f"syntax error on line {line_no}: missing ' = ' in '{line}'")
        self.line_no = line_no
        self.line = line


class SecfixesSyntaxError(ApkMetaError):
    def __init__(self, line_no: int, line: str) -> None:
        super().__init__(f"syntax error in secfixes on line {line_no}: '{line}'")
        self.line_no = line_no
        self.line = line


class MissingChecksum(ApkMetaError):
    def __init__(self, name: str) -> None:
        super().__init__(f"missing sha512sum for: '{name}'")
        self.name = name


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationError(ApkMetaError):
    """Raised by :func:`apkmeta.validate.check` when a record has violations."""

    def __init__(self, violations: list) -> None:
        lines = "\n".join(str(v) for v in violations)
        super().__init__(f"{len(violations)} validation error(s):\n{lines}")
        self.violations = violations
