"""Read-only aggregate reports behind the dashboard cards and charts."""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from kriminalitas.models.base import Store
from kriminalitas.models.crime import SEVERITY_SCORES
from kriminalitas.services.exceptions import StoreFailureError
from kriminalitas.spatial.geometry import geojson_sql, parse_geojson
from kriminalitas.utils.config import ReportSettings, settings
from kriminalitas.utils.logging import get_logger

logger = get_logger(__name__)

TREND_UP = "up"
TREND_DOWN = "down"
TREND_STABLE = "stable"

# Unknown or NULL severities score as LOW
SEVERITY_SCORE_SQL = (
    "CASE ci.severity_level "
    + " ".join(
        f"WHEN '{severity.value}' THEN {score}"
        for severity, score in SEVERITY_SCORES.items()
    )
    + " ELSE 1 END"
)

DISTRICT_STATS_SQL = f"""
    WITH district_stats AS (
        SELECT
            a.id,
            a.name AS district_name,
            COUNT(ci.id) AS total_crimes,
            COUNT(CASE WHEN ci.severity_level = 'CRITICAL' THEN ci.id END) AS critical_cases,
            COUNT(CASE WHEN ci.severity_level = 'HIGH' THEN ci.id END) AS high_cases,
            COUNT(CASE WHEN ci.severity_level = 'MEDIUM' THEN ci.id END) AS medium_cases,
            COUNT(CASE WHEN ci.severity_level = 'LOW' THEN ci.id END) AS low_cases,
            COUNT(CASE WHEN ci.incident_date >= CURRENT_DATE - :window_days THEN ci.id END) AS last_30_days,
            ROUND(AVG({SEVERITY_SCORE_SQL}), 2) AS avg_severity
        FROM areas a
        LEFT JOIN crime_incidents ci ON a.id = ci.area_id
        GROUP BY a.id, a.name
        ORDER BY total_crimes DESC
        LIMIT :limit
    )
    SELECT
        district_name AS name,
        total_crimes AS total,
        critical_cases,
        high_cases,
        medium_cases,
        low_cases,
        last_30_days,
        avg_severity
    FROM district_stats
    WHERE total_crimes > 0
    ORDER BY total_crimes DESC
"""

HOTSPOTS_SQL = f"""
    WITH area_stats AS (
        SELECT
            a.id,
            a.name AS area,
            COUNT(ci.id) AS cases,
            ROUND(AVG({SEVERITY_SCORE_SQL}), 1) AS avg_severity,
            COUNT(CASE WHEN ci.incident_date >= CURRENT_DATE - :window_days
                       THEN ci.id END) AS recent_cases,
            COUNT(CASE WHEN ci.incident_date >= CURRENT_DATE - (2 * :window_days)
                        AND ci.incident_date < CURRENT_DATE - :window_days
                       THEN ci.id END) AS previous_cases
        FROM areas a
        LEFT JOIN crime_incidents ci ON a.id = ci.area_id
        GROUP BY a.id, a.name
        HAVING COUNT(ci.id) > 0
    )
    SELECT area, cases, avg_severity, recent_cases, previous_cases
    FROM area_stats
    ORDER BY cases DESC, avg_severity DESC
    LIMIT :limit
"""

TOP_CRIME_TYPES_SQL = """
    WITH type_counts AS (
        SELECT
            t.name AS type,
            COUNT(ci.id) AS count,
            COUNT(ci.id) * 100.0 / SUM(COUNT(ci.id)) OVER () AS percentage
        FROM crime_incidents ci
        JOIN types t ON ci.type_id = t.id
        GROUP BY t.name
        ORDER BY COUNT(ci.id) DESC
        LIMIT :limit
    )
    SELECT type, count, ROUND(CAST(percentage AS numeric), 1) AS percentage
    FROM type_counts
    ORDER BY count DESC
"""

RECENT_INCIDENTS_SQL = """
    SELECT
        ci.id,
        ci.incident_code AS title,
        ci.address AS location,
        ci.incident_date,
        t.name AS type,
        ci.severity_level AS severity
    FROM crime_incidents ci
    JOIN types t ON ci.type_id = t.id
    ORDER BY ci.incident_date DESC, ci.incident_time DESC NULLS LAST
    LIMIT :limit
"""

INCIDENT_FEATURES_SQL = f"""
    SELECT
        ci.id,
        ci.incident_code,
        ci.area_id,
        {geojson_sql("ci.location")} AS location,
        ci.address,
        ci.incident_date,
        ci.incident_time,
        ci.severity_level,
        ci.description,
        t.name AS type_name,
        a.name AS area_name
    FROM crime_incidents ci
    JOIN types t ON ci.type_id = t.id
    JOIN areas a ON ci.area_id = a.id
    WHERE ci.location IS NOT NULL
    ORDER BY ci.incident_date DESC
"""


def to_int(value: Any) -> int:
    """Coerce an aggregate to int; NULL or garbage becomes 0."""
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def to_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def classify_trend(recent: Any, previous: Any) -> str:
    """Compare the trailing window with the one before it."""
    recent, previous = to_int(recent), to_int(previous)
    if recent > previous:
        return TREND_UP
    if recent < previous:
        return TREND_DOWN
    return TREND_STABLE


def shape_district_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    counts = {
        "total": to_int(row.get("total")),
        "critical": to_int(row.get("critical_cases")),
        "high": to_int(row.get("high_cases")),
        "medium": to_int(row.get("medium_cases")),
        "low": to_int(row.get("low_cases")),
    }
    return {
        "name": row.get("name"),
        **counts,
        "last_30_days": to_int(row.get("last_30_days")),
        "avg_severity": to_float(row.get("avg_severity")),
        "details": dict(counts),
    }


def summarize_districts(districts: List[Dict[str, Any]]) -> Dict[str, Any]:
    total_crimes = sum(d["total"] for d in districts)
    return {
        "total_districts": len(districts),
        "total_crimes": total_crimes,
        "total_critical": sum(d["critical"] for d in districts),
        "total_last_30_days": sum(d["last_30_days"] for d in districts),
        "avg_crime_per_district": total_crimes / (len(districts) or 1),
    }


def build_district_report(rows: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Shape district rows and drop any area without incidents."""
    districts = [shape_district_row(row) for row in rows]
    districts = [d for d in districts if d["total"] > 0]
    return {"districts": districts, "summary": summarize_districts(districts)}


def shape_hotspot_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "area": row.get("area"),
        "cases": to_int(row.get("cases")),
        "trend": classify_trend(row.get("recent_cases"), row.get("previous_cases")),
        "avg_severity": to_float(row.get("avg_severity")),
    }


def shape_crime_type_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "type": row.get("type"),
        "count": to_int(row.get("count")),
        "percentage": to_float(row.get("percentage")),
    }


def shape_incident_feature(row: Mapping[str, Any]) -> Dict[str, Any]:
    shaped = dict(row)
    shaped["location"] = parse_geojson(row.get("location"))
    return shaped


class ReportService:
    """Runs one aggregate query per report and reshapes the rows."""

    def __init__(self, store: Store, report_settings: Optional[ReportSettings] = None):
        self.store = store
        self.report_settings = report_settings or settings.reports

    def district_stats(self) -> Dict[str, Any]:
        rows = self._fetch(
            DISTRICT_STATS_SQL,
            {
                "window_days": self.report_settings.trend_window_days,
                "limit": self.report_settings.district_limit,
            },
            "Failed to fetch district statistics",
        )
        return build_district_report(rows)

    def hotspots(self) -> List[Dict[str, Any]]:
        rows = self._fetch(
            HOTSPOTS_SQL,
            {
                "window_days": self.report_settings.trend_window_days,
                "limit": self.report_settings.hotspot_limit,
            },
            "Failed to fetch hotspots",
        )
        return [shape_hotspot_row(row) for row in rows]

    def top_crime_types(self) -> List[Dict[str, Any]]:
        rows = self._fetch(
            TOP_CRIME_TYPES_SQL,
            {"limit": self.report_settings.top_types_limit},
            "Failed to fetch top crime types",
        )
        return [shape_crime_type_row(row) for row in rows]

    def recent_incidents(self) -> List[Dict[str, Any]]:
        rows = self._fetch(
            RECENT_INCIDENTS_SQL,
            {"limit": self.report_settings.recent_limit},
            "Failed to fetch recent incidents",
        )
        return [dict(row) for row in rows]

    def incident_features(self) -> List[Dict[str, Any]]:
        """Every located incident with its point as a GeoJSON geometry."""
        rows = self._fetch(INCIDENT_FEATURES_SQL, {}, "Failed to fetch incidents")
        return [shape_incident_feature(row) for row in rows]

    def _fetch(self, sql: str, params: Dict[str, Any], failure_message: str) -> List[Mapping[str, Any]]:
        try:
            with self.store.transaction() as session:
                return session.execute(text(sql), params).mappings().all()
        except SQLAlchemyError as exc:
            logger.error(failure_message, error=str(exc))
            raise StoreFailureError(failure_message, details=str(exc)) from exc
