"""
Insert, update and delete table rows from GeoJSON features.

A helper works on a single table with a single-column primary key and a
single geometry column. Statements use the DB-API ``qmark`` parameter style,
so any driver accepting ``?`` placeholders can run them.

Example:
    >>> import sqlite3
    >>> conn = sqlite3.connect("points.sqlite")
    >>> conn.enable_load_extension(True)
    >>> conn.load_extension("mod_spatialite")
    >>> helper = GeoJSONHelper(TableMapping("points", "gid", "geom", 4326), conn)
    >>> helper.insert({
    ...     "type": "Feature",
    ...     "properties": {"gid": 1, "name": "Foo"},
    ...     "geometry": {"type": "Point", "coordinates": [10, 10]},
    ... })
    1
"""

import contextlib
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .binder import BoundStatement, bind_parameters
from .coercion import PropertyCoercer
from .exceptions import InvalidFeatureError, MissingIdError, PreconditionError
from .geometry import GeometryInput
from .statements import (
    build_shape,
    check_identifier,
    check_table_name,
    delete_sql,
    insert_sql,
    update_sql,
)

logger = logging.getLogger(__name__)

GEOJSON_PROPS = "properties"
GEOJSON_GEOM = "geometry"

OPERATIONS = ("insert", "update", "delete")


@dataclass(frozen=True)
class TableMapping:
    """
    The table a helper writes to.

    Attributes:
        table: Table name, optionally schema-qualified (``schema.table``)
        id_column: Name of the primary key column
        geometry_column: Name of the geometry column
        srid: Spatial reference ID bound with every geometry
    """

    table: str
    id_column: str
    geometry_column: str
    srid: int

    def __post_init__(self):
        check_table_name(self.table)
        check_identifier(self.id_column)
        check_identifier(self.geometry_column)
        if isinstance(self.srid, bool) or not isinstance(self.srid, int):
            raise TypeError(f"SRID must be an integer, got {self.srid!r}")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "TableMapping":
        """
        Build a mapping from a plain configuration dictionary.

        Args:
            config: Dictionary with ``table``, ``id_column``,
                ``geometry_column`` and ``srid`` keys

        Raises:
            KeyError: If a key is missing
        """
        return cls(
            table=config["table"],
            id_column=config["id_column"],
            geometry_column=config["geometry_column"],
            srid=int(config["srid"]),
        )


def feature_parts(
    feature: str | bytes | Mapping[str, Any],
) -> tuple[Mapping[str, Any], GeometryInput | None]:
    """
    Split a GeoJSON feature into its properties and geometry members.

    Raises:
        InvalidFeatureError: If the document is not an object or its
            properties member is not an object
    """
    if isinstance(feature, str | bytes):
        try:
            feature = json.loads(feature)
        except ValueError as e:
            raise InvalidFeatureError(f"Invalid GeoJSON feature: {e}") from e

    if not isinstance(feature, Mapping):
        raise InvalidFeatureError(
            f"Invalid GeoJSON feature: expected an object, got {type(feature).__name__}"
        )

    properties = feature.get(GEOJSON_PROPS)
    if not isinstance(properties, Mapping):
        raise InvalidFeatureError("GeoJSON feature has no properties object")
    return properties, feature.get(GEOJSON_GEOM)


class GeoJSONHelper:
    """
    Writes GeoJSON features to one table.

    The table mapping is fixed at construction. The connection can be given
    at construction or bound later with :meth:`bind_connection`, so that one
    configured helper can be reused with connections taken from a pool. The
    helper never opens, commits or closes the connection.

    Statements are built from call-local values only; the helper keeps no
    per-call state.

    Attributes:
        mapping: Table configuration
        coercer: Coercion applied to property values on insert and update
    """

    def __init__(
        self,
        mapping: TableMapping,
        connection: Any = None,
        coercer: PropertyCoercer | None = None,
    ):
        self.mapping = mapping
        self.coercer = coercer or PropertyCoercer()
        self._connection = connection

    @property
    def connection(self) -> Any:
        """The bound DB-API connection"""
        if self._connection is None:
            raise PreconditionError(
                f"No database connection configured for table '{self.mapping.table}'"
            )
        return self._connection

    @connection.setter
    def connection(self, connection: Any) -> None:
        self._connection = connection

    @property
    def has_connection(self) -> bool:
        """Whether a connection is currently bound"""
        return self._connection is not None

    def bind_connection(self, connection: Any) -> "GeoJSONHelper":
        """Bind the connection used by later operations and return the helper"""
        self._connection = connection
        return self

    def _id_value(self, properties: Mapping[str, Any]) -> Any:
        value = properties.get(self.mapping.id_column)
        if value is None:
            raise MissingIdError(self.mapping.id_column)
        return value

    def prepare_insert(self, feature: str | bytes | Mapping[str, Any]) -> BoundStatement:
        """
        Build the INSERT statement for a feature without executing it.

        Raises:
            InvalidFeatureError: If the feature has no properties object
            InvalidGeometryError: If the geometry cannot be converted to WKT
        """
        properties, geometry = feature_parts(feature)
        shape = build_shape(properties, self.mapping.geometry_column)
        params = bind_parameters(properties, geometry, self.mapping.srid, self.coercer)
        return BoundStatement(insert_sql(self.mapping.table, shape), params)

    def prepare_update(self, feature: str | bytes | Mapping[str, Any]) -> BoundStatement:
        """
        Build the UPDATE statement for a feature without executing it.

        The row is selected by the feature's id property, bound as the last
        parameter.

        Raises:
            InvalidFeatureError: If the feature has no properties object
            MissingIdError: If the properties lack the id column
            InvalidGeometryError: If the geometry cannot be converted to WKT
        """
        properties, geometry = feature_parts(feature)
        id_value = self._id_value(properties)
        shape = build_shape(properties, self.mapping.geometry_column)
        # id goes last: position len(properties) + 3, after geometry and srid
        params = bind_parameters(
            properties, geometry, self.mapping.srid, self.coercer, id_value
        )
        sql = update_sql(self.mapping.table, shape, self.mapping.id_column)
        return BoundStatement(sql, params)

    def prepare_delete(self, feature: str | bytes | Mapping[str, Any]) -> BoundStatement:
        """
        Build the DELETE statement for a feature without executing it.

        Only the id property is used and it is bound without coercion.

        Raises:
            InvalidFeatureError: If the feature has no properties object
            MissingIdError: If the properties lack the id column
        """
        properties, _ = feature_parts(feature)
        id_value = self._id_value(properties)
        return BoundStatement(
            delete_sql(self.mapping.table, self.mapping.id_column), (id_value,)
        )

    def execute(self, statement: BoundStatement) -> int:
        """
        Execute a prepared statement once on the bound connection.

        Returns:
            Number of affected rows as reported by the driver

        Raises:
            PreconditionError: If no connection is bound
        """
        return self._run(self.connection, statement)

    def _run(self, conn: Any, statement: BoundStatement) -> int:
        logger.debug("Executing %s with parameters %r", statement.sql, statement.params)
        with contextlib.closing(conn.cursor()) as cursor:
            cursor.execute(statement.sql, statement.params)
            return cursor.rowcount

    def insert(self, feature: str | bytes | Mapping[str, Any]) -> int:
        """
        Insert a feature as a new row.

        Args:
            feature: GeoJSON feature, as mapping or JSON text

        Returns:
            Number of affected rows as reported by the driver

        Raises:
            PreconditionError: If no connection is bound
            InvalidGeometryError: If the geometry cannot be converted to WKT
        """
        conn = self.connection
        return self._run(conn, self.prepare_insert(feature))

    def update(self, feature: str | bytes | Mapping[str, Any]) -> int:
        """
        Update the row whose id matches the feature's id property.

        Returns:
            Number of affected rows as reported by the driver

        Raises:
            PreconditionError: If no connection is bound
            MissingIdError: If the properties lack the id column
            InvalidGeometryError: If the geometry cannot be converted to WKT
        """
        conn = self.connection
        return self._run(conn, self.prepare_update(feature))

    def delete(self, feature: str | bytes | Mapping[str, Any]) -> int:
        """
        Delete the row whose id matches the feature's id property.

        Returns:
            Number of affected rows as reported by the driver

        Raises:
            PreconditionError: If no connection is bound
            MissingIdError: If the properties lack the id column
        """
        conn = self.connection
        return self._run(conn, self.prepare_delete(feature))

    def apply(self, operation: str, feature: str | bytes | Mapping[str, Any]) -> int:
        """
        Run ``insert``, ``update`` or ``delete`` by name.

        Raises:
            ValueError: If the operation is not one of ``OPERATIONS``
        """
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")
        return getattr(self, operation)(feature)

    def prepare(self, operation: str, feature: str | bytes | Mapping[str, Any]) -> BoundStatement:
        """
        Build the statement for ``insert``, ``update`` or ``delete`` by name.

        Raises:
            ValueError: If the operation is not one of ``OPERATIONS``
        """
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")
        return getattr(self, f"prepare_{operation}")(feature)