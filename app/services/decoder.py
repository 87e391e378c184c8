from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Sequence


class FieldType(str, Enum):
    STRING = "stringValue"
    LONG = "longValue"
    DOUBLE = "doubleValue"
    BOOLEAN = "booleanValue"
    NULL = "isNull"


# First present tag wins when a field carries more than one
FIELD_PRIORITY = (
    FieldType.STRING,
    FieldType.LONG,
    FieldType.DOUBLE,
    FieldType.BOOLEAN,
    FieldType.NULL,
)


class TypedField(NamedTuple):
    type: FieldType
    value: Any


def parse_field(field: Dict[str, Any]) -> TypedField:
    """Turn a Data API field union into a single tagged value"""
    for field_type in FIELD_PRIORITY:
        if field.get(field_type.value) is None:
            continue
        if field_type is FieldType.NULL:
            if field[field_type.value]:
                return TypedField(FieldType.NULL, None)
            continue
        return TypedField(field_type, field[field_type.value])
    return TypedField(FieldType.NULL, None)


def decode_field(field: Dict[str, Any]) -> Any:
    """Decode a Data API field union into a plain JSON value"""
    typed = parse_field(field)
    if typed.type is FieldType.STRING:
        return str(typed.value)
    if typed.type is FieldType.LONG:
        return int(typed.value)
    if typed.type is FieldType.DOUBLE:
        return float(typed.value)
    if typed.type is FieldType.BOOLEAN:
        return bool(typed.value)
    return None


def decode_records(
    columns: Sequence[str],
    records: Optional[List[List[Dict[str, Any]]]],
) -> List[Dict[str, Any]]:
    """Decode every record into a row mapping keyed by column name"""
    rows = []
    for record in records or []:
        row = {name: None for name in columns}
        for name, field in zip(columns, record):
            row[name] = decode_field(field)
        rows.append(row)
    return rows
