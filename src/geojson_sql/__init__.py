"""
GeoJSON to SQL

Insert, update and delete rows of a geometry table from GeoJSON features.

Each feature's properties are mapped to columns and its geometry is bound as
Well-Known Text through ``ST_GeomFromText(?, ?)`` together with the table's
SRID. Statements use positional ``?`` parameters and run on any DB-API
connection supplied by the caller.

Example:
    >>> from geojson_sql import GeoJSONHelper, TableMapping
    >>>
    >>> helper = GeoJSONHelper(TableMapping("points", "gid", "geom", 4326))
    >>> statement = helper.prepare_insert({
    ...     "properties": {"gid": 1, "name": "Foo"},
    ...     "geometry": {"type": "Point", "coordinates": [10, 10]},
    ... })
    >>> statement.sql
    'INSERT INTO points (gid, name, geom) VALUES (?, ?, ST_GeomFromText(?, ?))'
    >>> statement.params
    (1, 'Foo', 'POINT (10 10)', 4326)
    >>>
    >>> helper.bind_connection(conn).update(feature)

CLI Example:
    $ geojson-sql sql insert points.geojson -t points --id-column gid \\
        --geometry-column geom --srid 4326
"""

__version__ = "0.1.0"

from .exceptions import (
    GeoJSONSQLError,
    InvalidGeometryError,
    MissingIdError,
    PreconditionError,
    InvalidFeatureError,
    InvalidIdentifierError,
)

from .geometry import (
    parse_geometry,
    to_wkt,
    reproject,
)

from .coercion import (
    DEFAULT_DATE_FORMATS,
    BoundType,
    CoercedValue,
    PropertyCoercer,
)

from .statements import (
    StatementShape,
    build_shape,
    insert_sql,
    update_sql,
    delete_sql,
)

from .binder import (
    BoundStatement,
    bind_parameters,
)

from .helper import (
    GeoJSONHelper,
    TableMapping,
)

from .sources import (
    iter_features,
    read_features,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "GeoJSONSQLError",
    "InvalidGeometryError",
    "MissingIdError",
    "PreconditionError",
    "InvalidFeatureError",
    "InvalidIdentifierError",
    # Geometry
    "parse_geometry",
    "to_wkt",
    "reproject",
    # Coercion
    "DEFAULT_DATE_FORMATS",
    "BoundType",
    "CoercedValue",
    "PropertyCoercer",
    # Statements
    "StatementShape",
    "build_shape",
    "insert_sql",
    "update_sql",
    "delete_sql",
    "BoundStatement",
    "bind_parameters",
    # Helper
    "GeoJSONHelper",
    "TableMapping",
    # Sources
    "iter_features",
    "read_features",
]
