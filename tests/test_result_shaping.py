from datetime import date, timedelta
from decimal import Decimal

from models.query import Mutation, Rows
from services import result_shaping
from services.result_shaping import (
    NO_DATA_MESSAGE,
    encode_value,
    shape_insert_id,
    shape_rows,
    shape_rows_or_message,
    shape_scalar,
)

ROWS = Rows(rows=[{"id": 1, "val": "a"}, {"id": 2, "val": "b"}])
EMPTY = Rows(rows=[])
UPDATE = Mutation(affected_rows=3, insert_id=0)
INSERT = Mutation(affected_rows=1, insert_id=42)


def test_shape_rows_returns_everything():
    assert shape_rows(ROWS) == [{"id": 1, "val": "a"}, {"id": 2, "val": "b"}]
    assert shape_rows(EMPTY) == []
    # Writes report the driver header instead of rows
    assert shape_rows(INSERT) == {"affectedRows": 1, "insertId": 42}


def test_shape_insert_id_defaults_to_zero():
    assert shape_insert_id(INSERT) == {"insertId": 42}
    assert shape_insert_id(UPDATE) == {"insertId": 0}
    assert shape_insert_id(ROWS) == {"insertId": 0}


def test_shape_rows_or_message():
    assert shape_rows_or_message(UPDATE) == {"affectedRows": 3}
    assert shape_rows_or_message(Mutation(affected_rows=0)) == {"affectedRows": 0}
    assert shape_rows_or_message(ROWS) == ROWS.rows
    assert shape_rows_or_message(EMPTY) == {"message": NO_DATA_MESSAGE}


def test_shape_scalar():
    assert shape_scalar(UPDATE) == {"affectedRows": 3}
    assert shape_scalar(ROWS) == {"scalar": 1}
    assert shape_scalar(Rows(rows=[{"val": None}])) == {"scalar": None}
    assert shape_scalar(EMPTY) == {"message": "No data available"}
    assert shape_scalar(Rows(rows=[{}])) == {"message": "No data available"}


def test_encode_value_big_numbers():
    big = result_shaping.MAX_SAFE_INTEGER + 1
    assert encode_value(big) == str(big)
    assert encode_value(-big) == str(-big)
    assert encode_value(result_shaping.MAX_SAFE_INTEGER) == result_shaping.MAX_SAFE_INTEGER
    assert encode_value(Decimal("12.50")) == "12.50"

    assert encode_value(big, support_big_numbers=False) == big
    assert encode_value(Decimal("12.50"), support_big_numbers=False) == 12.5
    assert encode_value(Decimal("NaN"), support_big_numbers=False) is None


def test_encode_value_nested_and_special_types():
    body = [
        {
            "id": 1,
            "blob": b"\x01\xff",
            "day": date(2024, 1, 31),
            "at": timedelta(hours=1, minutes=2, seconds=3),
            "ok": True,
            "none": None,
        }
    ]
    assert encode_value(body) == [
        {
            "id": 1,
            "blob": {"type": "Buffer", "data": [1, 255]},
            "day": "2024-01-31",
            "at": "01:02:03",
            "ok": True,
            "none": None,
        }
    ]


def test_encode_value_time_columns():
    assert encode_value(timedelta(hours=1, minutes=2, seconds=3)) == "01:02:03"
    assert encode_value(timedelta(hours=838, minutes=59, seconds=59)) == "838:59:59"
    assert encode_value(-timedelta(minutes=30)) == "-00:30:00"
    assert encode_value(timedelta(seconds=5, microseconds=250)) == "00:00:05.000250"


def test_encode_value_non_finite_floats():
    assert encode_value(float("inf")) is None
    assert encode_value(float("-inf")) is None
    assert encode_value(float("nan")) is None
    assert encode_value(1.5) == 1.5
