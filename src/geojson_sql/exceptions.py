"""
Exceptions raised while translating GeoJSON features into SQL statements.

Errors coming from the database driver itself are not wrapped: they reach
the caller as the driver's own DB-API exceptions.
"""


class GeoJSONSQLError(Exception):
    """Base class for all errors raised by this package"""


class InvalidGeometryError(GeoJSONSQLError, ValueError):
    """The geometry member could not be parsed into a non-empty geometry"""


class MissingIdError(GeoJSONSQLError, KeyError):
    """The feature properties lack the configured id column"""

    def __init__(self, id_column: str):
        super().__init__(id_column)
        self.id_column = id_column

    def __str__(self) -> str:
        return f"GeoJSON missing id('{self.id_column}') property"


class PreconditionError(GeoJSONSQLError, RuntimeError):
    """An operation was invoked before a connection was bound"""


class InvalidFeatureError(GeoJSONSQLError, ValueError):
    """The document is not a GeoJSON feature with an object of properties"""


class InvalidIdentifierError(GeoJSONSQLError, ValueError):
    """A table or column name is not a plain SQL identifier"""
