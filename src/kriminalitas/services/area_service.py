"""Choropleth data for the area polygons on the dashboard map."""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from kriminalitas.models.base import Store
from kriminalitas.services.exceptions import StoreFailureError
from kriminalitas.spatial.geometry import geojson_sql, parse_geojson
from kriminalitas.utils.config import SpatialSettings, settings
from kriminalitas.utils.logging import get_logger

logger = get_logger(__name__)

AREA_FEATURES_SQL = f"""
    SELECT
        a.id,
        a.name,
        a.crime_count,
        a.crime_rate,
        a.color,
        {geojson_sql("a.geom")} AS geometry
    FROM areas a
    WHERE a.geom IS NOT NULL
    ORDER BY a.name
"""

AREA_COUNTS_SQL = """
    SELECT a.id, COUNT(ci.id) AS crime_count
    FROM areas a
    LEFT JOIN crime_incidents ci ON a.id = ci.area_id
    GROUP BY a.id
"""

UPDATE_AREA_STATS_SQL = """
    UPDATE areas
    SET crime_count = :crime_count,
        crime_rate = :crime_rate,
        color = :color,
        updated_at = CURRENT_TIMESTAMP
    WHERE id = :id
"""


def classify_crime_level(count: int, spatial: SpatialSettings) -> Tuple[str, str]:
    """Map an incident count to the map legend's ``(label, color)``."""
    if count >= spatial.high_threshold:
        return spatial.high_label, spatial.high_color
    if count >= spatial.medium_threshold:
        return spatial.medium_label, spatial.medium_color
    return spatial.low_label, spatial.low_color


class AreaService:
    """Maintains and serves the per-area crime display fields."""

    def __init__(self, store: Store, spatial_settings: Optional[SpatialSettings] = None):
        self.store = store
        self.spatial = spatial_settings or settings.spatial

    def feature_collection(self) -> Dict[str, Any]:
        try:
            with self.store.transaction() as session:
                rows = session.execute(text(AREA_FEATURES_SQL)).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to fetch area polygons", error=str(exc))
            raise StoreFailureError("Failed to fetch area polygons", details=str(exc)) from exc

        features: List[Dict[str, Any]] = []
        for row in rows:
            count = row["crime_count"] or 0
            label, color = classify_crime_level(count, self.spatial)
            features.append(
                {
                    "type": "Feature",
                    "geometry": parse_geojson(row["geometry"]),
                    "properties": {
                        "id": row["id"],
                        "name": row["name"],
                        "crimeCount": count,
                        "crimeRate": row["crime_rate"] or label,
                        "color": row["color"] or color,
                    },
                }
            )

        return {"type": "FeatureCollection", "features": features}

    def refresh_statistics(self) -> int:
        """Recount incidents per area and store the legend class.

        Returns:
            Number of areas updated
        """
        try:
            with self.store.transaction() as session:
                counts = session.execute(text(AREA_COUNTS_SQL)).mappings().all()
                updates = []
                for row in counts:
                    count = int(row["crime_count"] or 0)
                    label, color = classify_crime_level(count, self.spatial)
                    updates.append(
                        {"id": row["id"], "crime_count": count, "crime_rate": label, "color": color}
                    )
                if updates:
                    session.execute(text(UPDATE_AREA_STATS_SQL), updates)
        except SQLAlchemyError as exc:
            logger.error("Failed to refresh area statistics", error=str(exc))
            raise StoreFailureError("Failed to refresh area statistics", details=str(exc)) from exc

        logger.info("Refreshed area statistics", areas=len(updates))
        return len(updates)
