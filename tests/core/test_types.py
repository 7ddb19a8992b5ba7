"""Tests for the column type registry."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from sqlbridge.core.errors import BindError, InvalidKeyTypeError, UnknownTypeError
from sqlbridge.core.types import (
    ColumnType,
    SqlType,
    TypeTag,
    infer_sql_type,
    lookup_by_sql_type_id,
)


class TestLookupBySqlTypeId:
    @pytest.mark.parametrize(
        "sql_type,expected",
        [
            (SqlType.BIGINT, ColumnType.LONG),
            (SqlType.INTEGER, ColumnType.INTEGER),
            (SqlType.SMALLINT, ColumnType.SHORT),
            (SqlType.TINYINT, ColumnType.BYTE),
            (SqlType.VARCHAR, ColumnType.STRING),
            (SqlType.DECIMAL, ColumnType.DECIMAL),
            (SqlType.NUMERIC, ColumnType.DECIMAL),
            (SqlType.BOOLEAN, ColumnType.BOOLEAN),
            (SqlType.TIMESTAMP, ColumnType.DATE),
        ],
    )
    def test_known_ids(self, sql_type: SqlType, expected: ColumnType) -> None:
        assert lookup_by_sql_type_id(int(sql_type)) is expected

    def test_accepts_enum_member(self) -> None:
        assert lookup_by_sql_type_id(SqlType.BIGINT) is ColumnType.LONG

    def test_unknown_id_raises(self) -> None:
        with pytest.raises(UnknownTypeError) as exc_info:
            lookup_by_sql_type_id(424242)
        assert exc_info.value.sql_type_id == 424242

    @pytest.mark.parametrize("sql_type", [SqlType.NULL, SqlType.TIME, SqlType.OTHER])
    def test_unmapped_ids_raise(self, sql_type: SqlType) -> None:
        with pytest.raises(UnknownTypeError, match=sql_type.name):
            lookup_by_sql_type_id(int(sql_type))

    def test_every_column_type_round_trips_through_its_sql_type(self) -> None:
        for column_type in ColumnType:
            if column_type is ColumnType.UUID:
                continue
            resolved = lookup_by_sql_type_id(column_type.sql_type)
            assert resolved.sql_type == column_type.sql_type


class TestColumnTypeFlags:
    def test_id_types(self) -> None:
        assert {t for t in ColumnType if t.is_id_type} == {
            ColumnType.SHORT,
            ColumnType.INTEGER,
            ColumnType.LONG,
        }

    def test_numeric_flag(self) -> None:
        assert ColumnType.DOUBLE.is_numeric
        assert not ColumnType.STRING.is_numeric

    def test_from_label(self) -> None:
        assert ColumnType.from_label("long") is ColumnType.LONG
        assert ColumnType.from_label("LONG_STRING") is ColumnType.LONG_STRING

    def test_from_label_unknown(self) -> None:
        with pytest.raises(UnknownTypeError):
            ColumnType.from_label("money")


class TestToNumericKey:
    @pytest.mark.parametrize(
        "column_type,raw,expected",
        [
            (ColumnType.LONG, 42, 42),
            (ColumnType.INTEGER, 7, 7),
            (ColumnType.SHORT, 3, 3),
            (ColumnType.BYTE, 1, 1),
            (ColumnType.DECIMAL, Decimal("15"), 15),
            (ColumnType.LONG, 2**62, 2**62),
            (ColumnType.LONG, 9.0, 9),
        ],
    )
    def test_integer_family(self, column_type: ColumnType, raw, expected: int) -> None:
        assert column_type.to_numeric_key(raw) == expected

    def test_text_key_rejected(self) -> None:
        with pytest.raises(InvalidKeyTypeError, match="not numeric"):
            ColumnType.STRING.to_numeric_key("abc")

    def test_fractional_decimal_rejected(self) -> None:
        with pytest.raises(InvalidKeyTypeError):
            ColumnType.DECIMAL.to_numeric_key(Decimal("1.5"))

    def test_null_key_rejected(self) -> None:
        with pytest.raises(InvalidKeyTypeError, match="NULL"):
            ColumnType.LONG.to_numeric_key(None)

    def test_double_is_not_a_key_type(self) -> None:
        with pytest.raises(InvalidKeyTypeError):
            ColumnType.DOUBLE.to_numeric_key(1.0)

    def test_convert_reads_from_cursor(self) -> None:
        cursor = MagicMock()
        cursor.get_object.return_value = Decimal("99")
        assert ColumnType.DECIMAL.convert_to_numeric_key(cursor, 0) == 99
        cursor.get_object.assert_called_once_with(0)


class TestCoerce:
    def test_boolean_from_int(self) -> None:
        assert ColumnType.BOOLEAN.coerce(1) is True
        assert ColumnType.BOOLEAN.coerce(0) is False

    def test_boolean_rejects_other_ints(self) -> None:
        with pytest.raises(BindError):
            ColumnType.BOOLEAN.coerce(2)

    def test_integer_range(self) -> None:
        assert ColumnType.SHORT.coerce(32767) == 32767
        with pytest.raises(BindError, match="out of range"):
            ColumnType.SHORT.coerce(32768)

    def test_integer_from_string(self) -> None:
        assert ColumnType.LONG.coerce(" 12 ") == 12

    def test_integer_rejects_fraction(self) -> None:
        with pytest.raises(BindError):
            ColumnType.INTEGER.coerce(1.5)

    def test_string_rejects_bytes(self) -> None:
        with pytest.raises(BindError):
            ColumnType.STRING.coerce(b"raw")

    def test_char_single_character(self) -> None:
        assert ColumnType.CHAR.coerce("x") == "x"
        with pytest.raises(BindError):
            ColumnType.CHAR.coerce("xy")

    def test_decimal_from_float_keeps_repr(self) -> None:
        assert ColumnType.DECIMAL.coerce(0.1) == Decimal("0.1")

    def test_date_from_date(self) -> None:
        assert ColumnType.DATE.coerce(date(2024, 1, 2)) == datetime(2024, 1, 2)

    def test_date_from_iso_string(self) -> None:
        assert ColumnType.DATE.coerce("2024-01-02 03:04:05") == datetime(2024, 1, 2, 3, 4, 5)

    def test_uuid_from_string(self) -> None:
        value = uuid.uuid4()
        assert ColumnType.UUID.coerce(str(value)) == value

    def test_bytes(self) -> None:
        assert ColumnType.BYTES.coerce(bytearray(b"ab")) == b"ab"
        with pytest.raises(BindError):
            ColumnType.BYTES.coerce("ab")


class TestInferSqlType:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, SqlType.NULL),
            (True, SqlType.BOOLEAN),
            (5, SqlType.BIGINT),
            (1.5, SqlType.DOUBLE),
            (Decimal("1"), SqlType.DECIMAL),
            ("a", SqlType.VARCHAR),
            (b"a", SqlType.VARBINARY),
            (datetime(2024, 1, 1), SqlType.TIMESTAMP),
            (date(2024, 1, 1), SqlType.DATE),
            (object(), SqlType.OTHER),
        ],
    )
    def test_infer(self, value, expected: SqlType) -> None:
        assert infer_sql_type(value) is expected


class TestTypeTag:
    def test_none_binds_null(self) -> None:
        assert TypeTag(ColumnType.LONG).bind(None) is None

    def test_binder_applied_after_coercion(self) -> None:
        tag = TypeTag(ColumnType.BOOLEAN, "sqlite", int)
        assert tag.bind(True) == 1

    def test_bind_error_carries_position(self) -> None:
        with pytest.raises(BindError) as exc_info:
            TypeTag(ColumnType.INTEGER).bind("nope", position=3)
        assert exc_info.value.position == 3

    def test_sql_type(self) -> None:
        assert TypeTag(ColumnType.STRING).sql_type is SqlType.VARCHAR

    def test_is_frozen(self) -> None:
        tag = TypeTag(ColumnType.STRING)
        with pytest.raises(AttributeError):
            tag.column_type = ColumnType.LONG  # type: ignore[misc]
