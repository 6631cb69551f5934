"""
GeoJSON geometry translation.

Turns the ``geometry`` member of a GeoJSON feature into Well-Known Text
suitable for ``ST_GeomFromText(wkt, srid)``, and reprojects geometries
between coordinate reference systems.
"""

import json
from collections.abc import Mapping
from typing import Any

import shapely
from pyproj import CRS, Transformer
from shapely.errors import ShapelyError
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

from .exceptions import InvalidGeometryError

GeometryInput = str | bytes | Mapping[str, Any]

GEOMETRY_TYPES = frozenset(
    {
        "Point",
        "MultiPoint",
        "LineString",
        "MultiLineString",
        "Polygon",
        "MultiPolygon",
        "GeometryCollection",
    }
)


def parse_geometry(geometry: GeometryInput | None) -> BaseGeometry:
    """
    Parse a GeoJSON geometry object into a Shapely geometry.

    Args:
        geometry: GeoJSON geometry as JSON text or as an already decoded mapping

    Returns:
        The parsed, non-empty Shapely geometry

    Raises:
        InvalidGeometryError: If the input is malformed, of an unsupported
            type, or parses to an empty geometry
    """
    if geometry is None:
        raise InvalidGeometryError("Invalid GeoJSON geometry: geometry is null")

    if isinstance(geometry, str | bytes):
        try:
            geometry = json.loads(geometry)
        except ValueError as e:
            raise InvalidGeometryError(f"Invalid GeoJSON geometry: {e}") from e

    if not isinstance(geometry, Mapping):
        raise InvalidGeometryError(
            f"Invalid GeoJSON geometry: expected an object, got {type(geometry).__name__}"
        )

    if geometry.get("type") not in GEOMETRY_TYPES:
        raise InvalidGeometryError(
            f"Invalid GeoJSON geometry: unsupported type {geometry.get('type')!r}"
        )

    try:
        geom = shape(geometry)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError, ShapelyError) as e:
        raise InvalidGeometryError(f"Invalid GeoJSON geometry: {e!r}") from e

    if geom is None or geom.is_empty:
        raise InvalidGeometryError("Invalid GeoJSON geometry: empty geometry")
    return geom


def to_wkt(geometry: GeometryInput | None) -> str:
    """
    Convert a GeoJSON geometry to Well-Known Text (WKT).

    Args:
        geometry: GeoJSON geometry as JSON text or mapping

    Returns:
        WKT string representation

    Raises:
        InvalidGeometryError: If no geometry can be read from the input

    Example:
        >>> to_wkt('{"type": "Point", "coordinates": [10, 10]}')
        'POINT (10 10)'
    """
    return parse_geometry(geometry).wkt


def reproject(
    geometry: GeometryInput,
    source_crs: str | int | CRS,
    target_crs: str | int | CRS,
) -> dict[str, Any]:
    """
    Reproject a GeoJSON geometry from one coordinate reference system to another.

    Args:
        geometry: GeoJSON geometry as JSON text or mapping
        source_crs: Source CRS (EPSG code like "EPSG:3857", integer SRID, or CRS object)
        target_crs: Target CRS (EPSG code like "EPSG:4326", integer SRID, or CRS object)

    Returns:
        GeoJSON geometry mapping with transformed coordinates

    Example:
        >>> geom = reproject(
        ...     {"type": "Point", "coordinates": [-13410713.258, 5894992.591]},
        ...     3857,
        ...     4326,
        ... )
        >>> round(geom["coordinates"][0], 4)
        -120.4705
    """
    geom = parse_geometry(geometry)
    transformer = Transformer.from_crs(source_crs, target_crs, always_xy=True)
    return dict(mapping(shapely.transform(geom, transformer.transform, interleaved=False)))


def same_crs(source_crs: str | int | CRS, srid: int) -> bool:
    """Check whether a CRS definition denotes the given EPSG SRID"""
    return CRS.from_user_input(source_crs) == CRS.from_epsg(srid)
