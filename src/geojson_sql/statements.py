"""
SQL statement shapes for feature inserts, updates and deletes.

Property keys become column names in the generated SQL text. Callers must
only hand in features whose keys come from known schema information; every
identifier is still checked against a plain-identifier pattern before it is
placed in a statement.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidIdentifierError

PLACEHOLDER = "?"
GEOMETRY_PLACEHOLDER = "ST_GeomFromText(?, ?)"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_TABLE_NAME = re.compile(r"(?:[A-Za-z_][A-Za-z0-9_]*\.)?[A-Za-z_][A-Za-z0-9_]*")


def check_identifier(name: Any) -> str:
    """Return ``name`` if it is a plain column identifier, raise otherwise"""
    if not isinstance(name, str) or not _IDENTIFIER.fullmatch(name):
        raise InvalidIdentifierError(f"Invalid column name: {name!r}")
    return name


def check_table_name(name: Any) -> str:
    """Return ``name`` if it is a table identifier, optionally schema-qualified"""
    if not isinstance(name, str) or not _TABLE_NAME.fullmatch(name):
        raise InvalidIdentifierError(f"Invalid table name: {name!r}")
    return name


@dataclass(frozen=True)
class StatementShape:
    """
    Column and placeholder lists for one INSERT or UPDATE statement.

    Attributes:
        columns: Property keys in iteration order, then the geometry column
        placeholders: One ``?`` per property, then the geometry constructor
    """

    columns: tuple[str, ...]
    placeholders: tuple[str, ...]

    @property
    def column_list(self) -> str:
        return ", ".join(self.columns)

    @property
    def placeholder_list(self) -> str:
        return ", ".join(self.placeholders)


def build_shape(properties: Mapping[str, Any], geometry_column: str) -> StatementShape:
    """
    Build the column and placeholder lists for a feature.

    The iteration order of ``properties`` is the order the parameters must
    be bound in.

    Args:
        properties: Feature properties
        geometry_column: Name of the geometry column

    Returns:
        A new StatementShape

    Example:
        >>> shape = build_shape({"gid": 1, "name": "Foo"}, "geom")
        >>> shape.columns
        ('gid', 'name', 'geom')
        >>> shape.placeholders
        ('?', '?', 'ST_GeomFromText(?, ?)')
    """
    columns = [check_identifier(key) for key in properties]
    placeholders = [PLACEHOLDER] * len(columns)

    columns.append(check_identifier(geometry_column))
    placeholders.append(GEOMETRY_PLACEHOLDER)
    return StatementShape(columns=tuple(columns), placeholders=tuple(placeholders))


def insert_sql(table: str, shape: StatementShape) -> str:
    return f"INSERT INTO {table} ({shape.column_list}) VALUES ({shape.placeholder_list})"


def update_sql(table: str, shape: StatementShape, id_column: str) -> str:
    return (
        f"UPDATE {table} SET ({shape.column_list}) = ({shape.placeholder_list}) "
        f"WHERE {id_column} = {PLACEHOLDER}"
    )


def delete_sql(table: str, id_column: str) -> str:
    return f"DELETE FROM {table} WHERE {id_column} = {PLACEHOLDER}"


def count_placeholders(sql: str) -> int:
    """Number of positional parameters in a generated statement"""
    return sql.count(PLACEHOLDER)
