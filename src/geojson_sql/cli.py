"""
Command-line interface for geojson-sql.

Usage:
    geojson-sql sql <insert|update|delete> <features.geojson> --table T ...
    geojson-sql apply <insert|update|delete> <database.sqlite> <features> --table T ...
"""

import json
import logging
import sqlite3
import sys
from collections.abc import Callable, Iterator, Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

import click
from fiona.errors import FionaError

from . import __version__
from .coercion import DEFAULT_DATE_FORMATS, PropertyCoercer
from .exceptions import GeoJSONSQLError
from .geometry import reproject, same_crs
from .helper import OPERATIONS, GeoJSONHelper, TableMapping
from .sources import load_geojson, read_features, source_crs

logger = logging.getLogger(__name__)

ENV_PREFIX = "GEOJSON_SQL_"


def mapping_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options describing the target table, shared by all commands"""
    options = [
        click.option(
            "--table", "-t", required=True, envvar=f"{ENV_PREFIX}TABLE",
            help="Target table, optionally schema-qualified",
        ),
        click.option(
            "--id-column", required=True, envvar=f"{ENV_PREFIX}ID_COLUMN",
            help="Primary key column",
        ),
        click.option(
            "--geometry-column", required=True, envvar=f"{ENV_PREFIX}GEOMETRY_COLUMN",
            help="Geometry column",
        ),
        click.option(
            "--srid", type=int, required=True, envvar=f"{ENV_PREFIX}SRID",
            help="SRID of the geometry column",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def source_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options controlling how features are read and coerced"""
    options = [
        click.option("--layer", "-l", help="Layer to read from multi-layer datasets"),
        click.option(
            "--reproject", "do_reproject", is_flag=True,
            help="Reproject geometries from the source CRS to --srid",
        ),
        click.option(
            "--date-format", "date_formats", multiple=True,
            help="strptime format treated as a date (repeatable, replaces defaults)",
        ),
        click.option(
            "--no-dates", is_flag=True, help="Bind all property values unchanged",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _coercer(date_formats: tuple[str, ...], no_dates: bool) -> PropertyCoercer:
    if no_dates:
        return PropertyCoercer(formats=())
    return PropertyCoercer(formats=date_formats or DEFAULT_DATE_FORMATS)


def _features(
    source: str,
    layer: str | None,
    srid: int,
    reproject_geometries: bool,
) -> Iterator[Mapping[str, Any]]:
    """Read the features of ``source`` ("-" for stdin), reprojecting on request"""
    if source == "-":
        features: Iterator[Mapping[str, Any]] = iter(load_geojson(sys.stdin))
        crs: str | None = "EPSG:4326"
    else:
        features = read_features(source, layer=layer)
        crs = source_crs(source, layer=layer) if reproject_geometries else None

    if not reproject_geometries or crs is None or same_crs(crs, srid):
        yield from features
        return

    logger.debug("Reprojecting features from %s to EPSG:%s", crs, srid)
    for feature in features:
        if feature.get("geometry") is None:
            yield feature
        else:
            yield {**feature, "geometry": reproject(feature["geometry"], crs, srid)}


@click.group()
@click.version_option(version=__version__, prog_name="geojson-sql")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """
    Translate GeoJSON features into INSERT, UPDATE and DELETE statements.

    Each feature's properties become columns of the target table and its
    geometry is bound as WKT through ST_GeomFromText(?, ?).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("sql")
@click.argument("operation", type=click.Choice(OPERATIONS))
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@mapping_options
@source_options
def sql_command(
    operation: str,
    source: str,
    table: str,
    id_column: str,
    geometry_column: str,
    srid: int,
    layer: str | None,
    do_reproject: bool,
    date_formats: tuple[str, ...],
    no_dates: bool,
):
    """
    Print the statements for every feature of SOURCE.

    One JSON object per line with the SQL text and its parameters. No
    database is needed.

    Example:
        geojson-sql sql insert points.geojson -t points --id-column gid
            --geometry-column geom --srid 4326
    """
    try:
        mapping = TableMapping(table, id_column, geometry_column, srid)
        helper = GeoJSONHelper(mapping, coercer=_coercer(date_formats, no_dates))
        reproject_geometries = do_reproject and operation != "delete"
        for feature in _features(source, layer, srid, reproject_geometries):
            statement = helper.prepare(operation, feature)
            line = {"sql": statement.sql, "params": list(statement.params)}
            click.echo(json.dumps(line, default=_json_default))
    except (GeoJSONSQLError, FionaError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("operation", type=click.Choice(OPERATIONS))
@click.argument("database", type=click.Path(dir_okay=False))
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@mapping_options
@source_options
@click.option(
    "--spatialite", is_flag=True,
    help="Load mod_spatialite so ST_GeomFromText is available",
)
def apply(
    operation: str,
    database: str,
    source: str,
    table: str,
    id_column: str,
    geometry_column: str,
    srid: int,
    layer: str | None,
    do_reproject: bool,
    date_formats: tuple[str, ...],
    no_dates: bool,
    spatialite: bool,
):
    """
    Run the statements for every feature of SOURCE against an SQLite DATABASE.

    Statements run in autocommit mode, one per feature. Processing stops at
    the first error; rows written before it are kept.

    Example:
        geojson-sql apply insert points.sqlite points.geojson --spatialite
            -t points --id-column gid --geometry-column geom --srid 4326
    """
    try:
        mapping = TableMapping(table, id_column, geometry_column, srid)
    except GeoJSONSQLError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    conn = sqlite3.connect(database, isolation_level=None)
    try:
        if spatialite:
            conn.enable_load_extension(True)
            conn.load_extension("mod_spatialite")

        helper = GeoJSONHelper(mapping, conn, coercer=_coercer(date_formats, no_dates))
        reproject_geometries = do_reproject and operation != "delete"
        count = 0
        rows = 0
        for feature in _features(source, layer, srid, reproject_geometries):
            rows += helper.apply(operation, feature)
            count += 1

        click.echo(
            f"{operation}: {count:,} features processed, "
            f"{rows:,} rows affected in {Path(database).name}"
        )
    except (GeoJSONSQLError, sqlite3.Error, FionaError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
