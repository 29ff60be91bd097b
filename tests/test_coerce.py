"""Tests for apkmeta.coerce."""

from enum import Enum

import pytest

from apkmeta.coerce import coerce_scalar, coerce_value
from apkmeta.dependency import Constraint, Dependency, Op
from apkmeta.errors import CoercionError, ConstraintParseError
from apkmeta.typedef import EntryKind, EnumKind, PrimitiveKind


class Size(Enum):
    Small = "small"
    Medium = "medium"
    Large = "large"


class TestCoerceScalar:
    def test_text(self):
        assert coerce_scalar("hello world", PrimitiveKind.Text) == "hello world"

    def test_bool(self):
        assert coerce_scalar("true", PrimitiveKind.Bool) is True
        assert coerce_scalar("false", PrimitiveKind.Bool) is False

    @pytest.mark.parametrize("raw", ["True", "1", "yes", ""])
    def test_bool_invalid(self, raw):
        with pytest.raises(CoercionError):
            coerce_scalar(raw, PrimitiveKind.Bool)

    def test_int(self):
        assert coerce_scalar("1672081283", PrimitiveKind.Int) == 1672081283
        assert coerce_scalar("-5", PrimitiveKind.Int) == -5

    @pytest.mark.parametrize("raw", ["wat", "1.5", " 1", "1_000", ""])
    def test_int_invalid(self, raw):
        with pytest.raises(CoercionError, match="invalid digit"):
            coerce_scalar(raw, PrimitiveKind.Int)

    def test_float(self):
        assert coerce_scalar("3.14", PrimitiveKind.Float) == 3.14

    @pytest.mark.parametrize("raw,expected", [
        ("1.", 1.0),
        (".5", 0.5),
        ("-2e3", -2000.0),
        ("+1E-2", 0.01),
        ("inf", float("inf")),
    ])
    def test_float_forms(self, raw, expected):
        assert coerce_scalar(raw, PrimitiveKind.Float) == expected

    @pytest.mark.parametrize("raw", ["pi", " 1.5", "1.5 ", "1_0", ".", "", "0x10", "1e"])
    def test_float_invalid(self, raw):
        with pytest.raises(CoercionError, match="invalid float literal"):
            coerce_scalar(raw, PrimitiveKind.Float)

    def test_uint(self):
        assert coerce_scalar("42", PrimitiveKind.UInt) == 42
        assert coerce_scalar("+7", PrimitiveKind.UInt) == 7

    @pytest.mark.parametrize("raw", ["-1", "-0", "1.0", ""])
    def test_uint_invalid(self, raw):
        with pytest.raises(CoercionError, match="invalid digit"):
            coerce_scalar(raw, PrimitiveKind.UInt)

    def test_octal(self):
        assert coerce_scalar("0644", PrimitiveKind.Octal) == 0o644
        assert coerce_scalar("755", PrimitiveKind.Octal) == 0o755

    def test_octal_invalid(self):
        with pytest.raises(CoercionError, match="expected octal number"):
            coerce_scalar("0999", PrimitiveKind.Octal)

    def test_enum(self):
        assert coerce_scalar("medium", EnumKind(Size)) is Size.Medium

    def test_enum_unknown_variant(self):
        with pytest.raises(CoercionError, match="unknown variant `huge`"):
            coerce_scalar("huge", EnumKind(Size))

    def test_entry(self):
        assert coerce_scalar("ruby>=3.0", EntryKind(Dependency)) == Dependency(
            "ruby", Constraint(Op.Greater | Op.Equal, "3.0")
        )

    def test_entry_invalid(self):
        with pytest.raises(ConstraintParseError):
            coerce_scalar("ruby>=", EntryKind(Dependency))


class TestCoerceValue:
    def test_string_goes_through_scalar_rules(self):
        assert coerce_value("10", PrimitiveKind.Int) == 10

    def test_native_int(self):
        assert coerce_value(10, PrimitiveKind.Int) == 10

    def test_bool_is_not_int(self):
        with pytest.raises(CoercionError):
            coerce_value(True, PrimitiveKind.Int)

    def test_native_bool(self):
        assert coerce_value(False, PrimitiveKind.Bool) is False

    def test_native_uint(self):
        assert coerce_value(0, PrimitiveKind.UInt) == 0
        with pytest.raises(CoercionError, match="non-negative"):
            coerce_value(-3, PrimitiveKind.UInt)

    def test_int_as_float(self):
        assert coerce_value(2, PrimitiveKind.Float) == 2.0

    def test_wrong_native_type(self):
        with pytest.raises(CoercionError, match="expected text"):
            coerce_value(42, PrimitiveKind.Text)

    def test_enum_member(self):
        assert coerce_value(Size.Large, EnumKind(Size)) is Size.Large
