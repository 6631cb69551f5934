"""
Positional parameter binding for generated statements.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .coercion import PropertyCoercer
from .geometry import GeometryInput, to_wkt
from .statements import count_placeholders


@dataclass(frozen=True)
class BoundStatement:
    """
    SQL text together with its positional parameters.

    Attributes:
        sql: Statement text using ``?`` placeholders
        params: Parameter values, in placeholder order
    """

    sql: str
    params: tuple[Any, ...]

    def __post_init__(self):
        expected = count_placeholders(self.sql)
        if expected != len(self.params):
            raise ValueError(
                f"Statement expects {expected} parameters, got {len(self.params)}"
            )

    def param(self, position: int) -> Any:
        """Parameter at a 1-based position, as numbered by the database"""
        if position < 1:
            raise IndexError(f"Parameter positions start at 1, got {position}")
        return self.params[position - 1]


def bind_parameters(
    properties: Mapping[str, Any],
    geometry: GeometryInput | None,
    srid: int,
    coercer: PropertyCoercer,
    *trailing: Any,
) -> tuple[Any, ...]:
    """
    Build the positional parameters for an INSERT or UPDATE statement.

    Properties are bound in their iteration order (coerced), followed by the
    geometry WKT, the SRID, and any trailing values such as the id of the
    row to update.

    Args:
        properties: Feature properties, in the order used to build the statement
        geometry: GeoJSON geometry of the feature
        srid: SRID bound after the WKT
        coercer: Coercion applied to every property value
        *trailing: Values bound after the SRID

    Returns:
        Tuple of parameter values

    Raises:
        InvalidGeometryError: If the geometry cannot be converted to WKT
    """
    params = [coercer.coerce(value).value for value in properties.values()]
    params.append(to_wkt(geometry))
    params.append(srid)
    params.extend(trailing)
    return tuple(params)
