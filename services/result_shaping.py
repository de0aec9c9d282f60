"""
Result shaping

Pure functions turning a `Rows | Mutation` query result into the JSON body
an endpoint answers with, plus the value encoding applied to row data.
"""
from __future__ import annotations

import math
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, Dict

from fastapi.encoders import jsonable_encoder

from models.query import Mutation, QueryResult

NO_DATA_MESSAGE = "No data available"

# Largest integer a JSON consumer can hold exactly in a double.
MAX_SAFE_INTEGER = 2**53 - 1

ResultShaper = Callable[[QueryResult], Any]


def _no_data() -> Dict[str, str]:
    return {"message": NO_DATA_MESSAGE}


def shape_rows(result: QueryResult) -> Any:
    """Full result: the row list, or the mutation header for writes."""
    if isinstance(result, Mutation):
        return {"affectedRows": result.affected_rows, "insertId": result.insert_id}
    return result.rows


def shape_insert_id(result: QueryResult) -> Dict[str, Any]:
    if isinstance(result, Mutation):
        return {"insertId": result.insert_id or 0}
    return {"insertId": 0}


def shape_rows_or_message(result: QueryResult) -> Any:
    if isinstance(result, Mutation):
        return {"affectedRows": result.affected_rows}
    if result.rows:
        return result.rows
    return _no_data()


def shape_scalar(result: QueryResult) -> Dict[str, Any]:
    if isinstance(result, Mutation):
        return {"affectedRows": result.affected_rows}
    if result.rows:
        first_row = result.rows[0]
        # A row with no columns has no scalar to report.
        for value in first_row.values():
            return {"scalar": value}
    return _no_data()


def format_time(value: timedelta) -> str:
    """Render a TIME column value as [-]HH:MM:SS[.ffffff]; hours may exceed 24."""
    sign = "-" if value < timedelta(0) else ""
    value = abs(value)
    total_seconds = value.days * 86400 + value.seconds
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if value.microseconds:
        text += f".{value.microseconds:06d}"
    return text


def encode_value(value: Any, support_big_numbers: bool = True) -> Any:
    """
    Make a single driver value JSON-safe.

    Mirrors the big-number convention test harnesses already expect:
    - DECIMAL values travel as strings (exact), or floats when disabled
    - integers beyond the safe double range travel as strings
    - binary values become {"type": "Buffer", "data": [...]}
    - TIME values become "HH:MM:SS" strings
    - non-finite floats become null
    """
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, Decimal):
        if support_big_numbers:
            return str(value)
        value = float(value)
    if isinstance(value, int):
        if support_big_numbers and abs(value) > MAX_SAFE_INTEGER:
            return str(value)
        return value
    if isinstance(value, float):
        # JSON has no NaN or Infinity; they travel as null.
        return value if math.isfinite(value) else None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {"type": "Buffer", "data": list(bytes(value))}
    if isinstance(value, timedelta):
        return format_time(value)
    if isinstance(value, dict):
        return {k: encode_value(v, support_big_numbers) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v, support_big_numbers) for v in value]
    return jsonable_encoder(value)
