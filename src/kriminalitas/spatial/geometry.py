"""GeoJSON and point helpers shared by the repository, reporters and importer.

PostGIS does the actual geometry work; these helpers only build the SQL
expressions and decode what PostGIS returns.
"""
import json
from typing import Any, Dict, Mapping, Optional, Union

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from kriminalitas.utils.config import settings

DEFAULT_SRID = settings.spatial.srid

# Projection fragments for raw SQL, point columns only
POINT_LAT_SQL = "ST_Y({column}::geometry)"
POINT_LNG_SQL = "ST_X({column}::geometry)"
GEOJSON_SQL = "ST_AsGeoJSON({column})"


def make_point(lng: float, lat: float, srid: int = DEFAULT_SRID) -> ColumnElement:
    """Build ``ST_SetSRID(ST_MakePoint(lng, lat), srid)``.

    Longitude comes first, as in every GeoJSON/WKT point.
    """
    return func.ST_SetSRID(func.ST_MakePoint(lng, lat), srid)


def geometry_from_geojson(
    geometry: Union[Mapping[str, Any], str], srid: int = DEFAULT_SRID
) -> ColumnElement:
    """Build ``ST_SetSRID(ST_GeomFromGeoJSON(<json>), srid)`` for any geometry."""
    geom_json = geometry if isinstance(geometry, str) else json.dumps(geometry)
    return func.ST_SetSRID(func.ST_GeomFromGeoJSON(geom_json), srid)


def point_lat_sql(column: str) -> str:
    return POINT_LAT_SQL.format(column=column)


def point_lng_sql(column: str) -> str:
    return POINT_LNG_SQL.format(column=column)


def geojson_sql(column: str) -> str:
    return GEOJSON_SQL.format(column=column)


def parse_geojson(value: Optional[Union[str, Mapping[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Decode an ``ST_AsGeoJSON`` column value into a geometry dict."""
    if value is None or value == "":
        return None
    if isinstance(value, Mapping):
        return dict(value)
    return json.loads(value)

