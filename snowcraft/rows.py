"""
Helpers for decoding SHOW and DESCRIBE result rows.

The connector returns dict rows whose keys follow the column casing Snowflake
reports, so every decoder starts with `normalize_row`.
"""

import datetime
import json
from typing import Any, Optional

import pytz

from .identifiers import AccountObjectIdentifier, DatabaseObjectIdentifier, SchemaObjectIdentifier

NULL = "null"


def normalize_row(row: dict) -> dict:
    return {key.lower(): value for key, value in row.items()}


def optional_string(value: Any) -> Optional[str]:
    if value is None or value == NULL:
        return None
    return str(value)


def to_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def to_int(value: Any) -> int:
    if value is None or value == "" or value == NULL:
        return 0
    return int(value)


def optional_int(value: Any) -> Optional[int]:
    if value is None or value == "" or value == NULL:
        return None
    return int(value)


def to_float(value: Any) -> float:
    if value is None or value == "" or value == NULL:
        return 0.0
    return float(value)


def optional_float(value: Any) -> Optional[float]:
    if value is None or value == "" or value == NULL:
        return None
    return float(value)


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("true", "y", "yes", "on")


def optional_bool(value: Any) -> Optional[bool]:
    if value is None or value == "" or value == NULL:
        return None
    return to_bool(value)


def optional_enum(enum, value):
    """None, "" and "null" stay None, anything else goes through the enum's lookup."""
    value = optional_string(value)
    if not value:
        return None
    return enum(value)


def parse_list(value: Any) -> list[str]:
    """
    '1.1.1.1,2.2.2.2'  ->  ['1.1.1.1', '2.2.2.2']
    '[a, b]'           ->  ['a', 'b']
    """
    if value is None or value == "" or value == NULL:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    value = str(value).strip("[]")
    return [item.strip(" ") for item in value.split(",") if item.strip(" ")]


def to_utc(dt: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """
    datetime.datetime(2049, 1, 6, 12, 0, tzinfo=<DstTzInfo 'America/Los_Angeles' PST-1 day, 16:00:00 STD>)

    =>

    datetime.datetime(2049, 1, 6, 20, 0, tzinfo=<UTC>)
    """
    if not isinstance(dt, datetime.datetime):
        return None
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def properties_to_dict(rows: list[dict], key: str = "property", value: str = "value") -> dict:
    """Turn DESCRIBE key/value rows into one dict keyed by lowercased property name."""
    result = {}
    for row in rows:
        row = normalize_row(row)
        result[str(row[key]).lower()] = row.get(value)
    return result


def account_object_id(row: dict, name_key: str = "name") -> AccountObjectIdentifier:
    return AccountObjectIdentifier(row[name_key])


def database_object_id(row: dict, name_key: str = "name") -> DatabaseObjectIdentifier:
    return DatabaseObjectIdentifier(row["database_name"], row[name_key])


def schema_object_id(row: dict, name_key: str = "name") -> SchemaObjectIdentifier:
    return SchemaObjectIdentifier(row["database_name"], row["schema_name"], row[name_key])


def route_properties(rows: list[dict], record, converters: dict, key: str = "property", value: str = "value"):
    """
    Fill `record` from DESCRIBE key/value rows. Each property whose lowercased name
    appears in `converters` is converted and set on the attribute of the same name,
    other properties are ignored.
    """
    for row in rows:
        row = normalize_row(row)
        name = str(row.get(key, "")).lower()
        convert = converters.get(name)
        if convert is not None:
            setattr(record, name, convert(row.get(value)))
    return record


def parse_signature(value: Optional[str]) -> dict:
    """
    DESCRIBE reports the signature as text.

    '(VAL VARCHAR, LEN NUMBER(38,0))'  ->  {'VAL': 'VARCHAR', 'LEN': 'NUMBER(38,0)'}
    """
    if not value:
        return {}
    value = value.strip()
    if value.startswith("(") and value.endswith(")"):
        value = value[1:-1]
    args = []
    depth = 0
    current = ""
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            args.append(current)
            current = ""
            continue
        current += char
    if current.strip():
        args.append(current)

    signature = {}
    for arg in args:
        name, _, data_type = arg.strip().partition(" ")
        signature[name.strip('"')] = data_type.strip()
    return signature


def parse_json_list(value: Any) -> list[str]:
    """
    '["A", "B"]'  ->  ['A', 'B']

    Falls back to parse_list for values that are not valid JSON.
    """
    if value is None or value == "" or value == NULL:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    try:
        items = json.loads(value)
    except json.JSONDecodeError:
        return parse_list(value)
    if not isinstance(items, list):
        return parse_list(value)
    return [str(item) for item in items]
