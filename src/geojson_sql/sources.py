"""
Readers that turn feature files into GeoJSON feature dictionaries.

GeoJSON documents are read with the json module so that property values and
their order are kept exactly as written. Every other format is read through
fiona/GDAL (GeoPackage, Shapefile, FlatGeobuf, ...).
"""

import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, TextIO

import fiona
from fiona.model import to_dict

from .exceptions import InvalidFeatureError

GEOJSON_SUFFIXES = {".geojson", ".json"}


def iter_features(document: Any) -> Iterator[Mapping[str, Any]]:
    """
    Yield the features contained in a decoded GeoJSON document.

    Accepts a FeatureCollection, a single Feature, or a list of Features.

    Raises:
        InvalidFeatureError: If the document holds no features
    """
    if isinstance(document, list):
        yield from document
        return

    if not isinstance(document, Mapping):
        raise InvalidFeatureError(
            f"Expected a GeoJSON object, got {type(document).__name__}"
        )

    doc_type = document.get("type")
    if doc_type == "FeatureCollection":
        yield from document.get("features") or []
    elif doc_type == "Feature" or "properties" in document:
        yield document
    else:
        raise InvalidFeatureError(f"Not a GeoJSON Feature or FeatureCollection: {doc_type}")


def load_geojson(stream: TextIO) -> list[Mapping[str, Any]]:
    """Read every feature of a GeoJSON document from an open text stream"""
    try:
        document = json.load(stream)
    except ValueError as e:
        raise InvalidFeatureError(f"Invalid GeoJSON document: {e}") from e
    return list(iter_features(document))


def read_features(path: str | Path, layer: str | None = None) -> Iterator[dict[str, Any]]:
    """
    Read features from a file.

    Args:
        path: Path to a GeoJSON document or any fiona-readable dataset
        layer: Layer name for multi-layer datasets such as GeoPackage

    Yields:
        GeoJSON feature dictionaries with properties in schema order

    Example:
        >>> for feature in read_features("points.gpkg", layer="points"):
        ...     print(feature["properties"])
    """
    path = Path(path)
    if path.suffix.lower() in GEOJSON_SUFFIXES:
        with path.open() as f:
            yield from (dict(feature) for feature in load_geojson(f))
        return

    with fiona.open(str(path), layer=layer) as src:
        for record in src:
            yield to_dict(record)


def source_crs(path: str | Path, layer: str | None = None) -> str | None:
    """
    Coordinate reference system of a dataset as WKT, if it declares one.

    GeoJSON documents are taken to be in their declared ``crs`` member or,
    failing that, WGS84 (RFC 7946).
    """
    path = Path(path)
    if path.suffix.lower() in GEOJSON_SUFFIXES:
        with path.open() as f:
            document = json.load(f)
        crs = document.get("crs") if isinstance(document, Mapping) else None
        if isinstance(crs, Mapping):
            name = (crs.get("properties") or {}).get("name")
            if name:
                return name
        return "EPSG:4326"

    with fiona.open(str(path), layer=layer) as src:
        return src.crs_wkt or None
