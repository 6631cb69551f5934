"""Tests for GeoJSON geometry translation."""

import json

import pytest
from shapely.geometry import Point as ShapelyPoint

from geojson_sql import InvalidGeometryError, parse_geometry, reproject, to_wkt
from geojson_sql.geometry import same_crs


class TestToWkt:
    def test_point_wkt(self):
        assert to_wkt({"type": "Point", "coordinates": [10, 10]}) == "POINT (10 10)"

    def test_point_from_json_text(self):
        geometry = json.dumps({"type": "Point", "coordinates": [-122.5, 47.25]})
        assert to_wkt(geometry) == "POINT (-122.5 47.25)"

    def test_linestring_wkt(self):
        line = {"type": "LineString", "coordinates": [[0, 0], [1, 1], [2, 2]]}
        assert to_wkt(line) == "LINESTRING (0 0, 1 1, 2 2)"

    def test_polygon_wkt(self):
        poly = {"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 0]]]}
        assert to_wkt(poly) == "POLYGON ((0 0, 10 0, 10 10, 0 0))"

    def test_multipolygon_wkt(self):
        mpoly = {
            "type": "MultiPolygon",
            "coordinates": [[[[0, 0], [1, 0], [1, 1], [0, 0]]]],
        }
        assert to_wkt(mpoly).startswith("MULTIPOLYGON")

    def test_point_z_wkt(self):
        assert to_wkt({"type": "Point", "coordinates": [1, 2, 3]}) == "POINT Z (1 2 3)"


class TestInvalidGeometry:
    @pytest.mark.parametrize(
        "geometry",
        [
            "{}",
            {},
            None,
            "not json",
            "[1, 2]",
            42,
            {"type": "Point"},
            {"type": "Circle", "coordinates": [0, 0]},
            {"type": "MultiPoint", "coordinates": []},
            {"type": "GeometryCollection", "geometries": []},
            {"type": "point", "coordinates": [1, 1]},
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [1, 1]},
                "properties": {},
            },
            {"type": "FeatureCollection", "features": []},
        ],
    )
    def test_invalid_geometry_raises(self, geometry):
        with pytest.raises(InvalidGeometryError):
            to_wkt(geometry)

    def test_invalid_geometry_is_value_error(self):
        with pytest.raises(ValueError):
            to_wkt("{}")


class TestParseGeometry:
    def test_returns_shapely_geometry(self):
        geom = parse_geometry({"type": "Point", "coordinates": [1, 2]})
        assert isinstance(geom, ShapelyPoint)
        assert geom.x == 1
        assert geom.y == 2


class TestReproject:
    @pytest.mark.filterwarnings("error::DeprecationWarning")
    def test_web_mercator_to_wgs84(self):
        geom = reproject(
            {"type": "Point", "coordinates": [-13410713.258, 5894992.591]},
            "EPSG:3857",
            "EPSG:4326",
        )
        assert geom["type"] == "Point"
        lon, lat = geom["coordinates"][:2]
        assert lon == pytest.approx(-120.4705, abs=1e-4)
        assert lat == pytest.approx(46.7108, abs=1e-4)

    def test_integer_srids(self):
        geom = reproject({"type": "Point", "coordinates": [10, 0]}, 4326, 3857)
        x, y = geom["coordinates"][:2]
        assert x == pytest.approx(1113194.9079, abs=1e-3)
        assert y == pytest.approx(0, abs=1e-6)

    def test_result_is_valid_input_for_wkt(self):
        geom = reproject({"type": "Point", "coordinates": [0, 0]}, 4326, 3857)
        assert to_wkt(geom).startswith("POINT")

    def test_invalid_geometry(self):
        with pytest.raises(InvalidGeometryError):
            reproject({}, 4326, 3857)


class TestSameCrs:
    def test_same(self):
        assert same_crs("EPSG:4326", 4326)

    def test_different(self):
        assert not same_crs("EPSG:3857", 4326)
