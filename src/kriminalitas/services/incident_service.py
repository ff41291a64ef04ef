"""CRUD operations over crime incidents."""
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import delete, insert, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from kriminalitas.models.base import Store
from kriminalitas.models.crime import DEFAULT_SEVERITY, CrimeIncident, Severity
from kriminalitas.services.exceptions import (CrimeDataError, DuplicateCodeError,
                                              NotFoundError, StoreFailureError,
                                              ValidationFailedError)
from kriminalitas.services.query_builder import (LIST_SEARCH_COLUMNS, Predicate,
                                                 build_search_query,
                                                 compile_query, search_predicate)
from kriminalitas.spatial.geometry import make_point, point_lat_sql, point_lng_sql
from kriminalitas.utils.config import settings
from kriminalitas.utils.logging import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"

REQUIRED_FIELDS = (
    "incident_code",
    "area_id",
    "location",
    "address",
    "incident_date",
    "type_id",
)

INCIDENT_SELECT_SQL = f"""
    SELECT
        ci.id,
        ci.incident_code,
        ci.area_id,
        ci.type_id,
        ci.address,
        ci.incident_date,
        ci.incident_time,
        ci.severity_level,
        ci.description,
        ci.reported_at,
        ci.created_at,
        ci.updated_at,
        a.name AS area_name,
        t.name AS type_name,
        {point_lat_sql("ci.location")} AS lat,
        {point_lng_sql("ci.location")} AS lng
    FROM crime_incidents ci
    LEFT JOIN areas a ON ci.area_id = a.id
    LEFT JOIN types t ON ci.type_id = t.id
    WHERE 1=1
"""


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return code == UNIQUE_VIOLATION


def validate_incident_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Check required fields and apply defaults.

    Returns the column values for an insert or full update, with the
    location split into ``lat``/``lng``.

    Raises:
        ValidationFailedError: If a required field is missing or malformed
    """
    missing = [name for name in REQUIRED_FIELDS if _is_missing(payload.get(name))]
    if missing:
        raise ValidationFailedError(
            "Missing required fields", details=f"Missing: {', '.join(missing)}"
        )

    location = payload["location"]
    if not isinstance(location, Mapping):
        raise ValidationFailedError("Location must be an object with lat and lng")
    lat, lng = location.get("lat"), location.get("lng")
    if not (_is_number(lat) and _is_number(lng)):
        raise ValidationFailedError("Location lat and lng must be numbers")

    severity = payload.get("severity_level")
    if _is_missing(severity):
        severity = DEFAULT_SEVERITY.value
    else:
        try:
            severity = Severity(severity).value
        except ValueError:
            raise ValidationFailedError(
                "Invalid severity level",
                details=f"Expected one of: {', '.join(s.value for s in Severity)}",
            ) from None

    incident_time = payload.get("incident_time")
    description = payload.get("description")

    return {
        "incident_code": payload["incident_code"],
        "area_id": payload["area_id"],
        "type_id": payload["type_id"],
        "address": payload["address"],
        "incident_date": payload["incident_date"],
        "incident_time": None if _is_missing(incident_time) else incident_time,
        "severity_level": severity,
        "description": None if _is_missing(description) else description,
        "lat": float(lat),
        "lng": float(lng),
    }


class IncidentService:
    """Business logic for crime incident records.

    Every operation runs in one store transaction, so write-then-read and
    check-then-mutate sequences are atomic.
    """

    def __init__(self, store: Store, srid: int = settings.spatial.srid):
        self.store = store
        self.srid = srid

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def search_incidents(self, filters: Mapping[str, Any]) -> Dict[str, Any]:
        """Filtered search for the dashboard crime table."""
        query = build_search_query(filters, limit=settings.reports.search_limit)
        logger.debug("Executing incident search", sql=query.sql, params=query.params)
        try:
            with self.store.transaction() as session:
                rows = session.execute(text(query.sql), query.bind_params).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to fetch crime data", error=str(exc))
            raise StoreFailureError("Failed to fetch crime data", details=str(exc)) from exc

        data = [dict(row) for row in rows]
        logger.debug("Incident search complete", rows=len(data))
        return {"data": data, "total": len(data)}

    def list_incidents(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        predicates = []
        predicate = search_predicate(search, LIST_SEARCH_COLUMNS)
        if predicate:
            predicates.append(predicate)
        query = compile_query(
            INCIDENT_SELECT_SQL,
            predicates,
            order_by=("ci.incident_date DESC", "ci.incident_time DESC"),
        )
        try:
            with self.store.transaction() as session:
                rows = session.execute(text(query.sql), query.bind_params).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to fetch incidents", error=str(exc))
            raise StoreFailureError("Failed to fetch incidents", details=str(exc)) from exc
        return [dict(row) for row in rows]

    def get_incident(self, incident_id: int) -> Dict[str, Any]:
        try:
            with self.store.transaction() as session:
                return self._fetch_incident(session, incident_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to fetch incident", incident_id=incident_id, error=str(exc))
            raise StoreFailureError("Failed to fetch incident", details=str(exc)) from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_incident(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        values = validate_incident_payload(payload)
        try:
            with self.store.transaction() as session:
                stmt = (
                    insert(CrimeIncident)
                    .values(**self._column_values(values), reported_at=func.now())
                    .returning(CrimeIncident.id)
                )
                incident_id = session.execute(stmt).scalar_one()
                incident = self._fetch_incident(session, incident_id)
        except CrimeDataError:
            raise
        except IntegrityError as exc:
            self._raise_integrity_error("create", exc)
        except SQLAlchemyError as exc:
            logger.error("Failed to create incident", error=str(exc))
            raise StoreFailureError(f"Failed to create incident: {exc}", details=str(exc)) from exc

        logger.info(
            "Created crime incident",
            incident_id=incident["id"],
            incident_code=incident["incident_code"],
        )
        return incident

    def update_incident(self, incident_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            with self.store.transaction() as session:
                self._lock_existing(session, incident_id)
                values = validate_incident_payload(payload)
                stmt = (
                    update(CrimeIncident)
                    .where(CrimeIncident.id == incident_id)
                    .values(**self._column_values(values), updated_at=func.now())
                )
                session.execute(stmt)
                incident = self._fetch_incident(session, incident_id)
        except CrimeDataError:
            raise
        except IntegrityError as exc:
            self._raise_integrity_error("update", exc, incident_id=incident_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to update incident", incident_id=incident_id, error=str(exc))
            raise StoreFailureError(f"Failed to update incident: {exc}", details=str(exc)) from exc

        logger.info("Updated crime incident", incident_id=incident_id)
        return incident

    def delete_incident(self, incident_id: int) -> Dict[str, str]:
        try:
            with self.store.transaction() as session:
                self._lock_existing(session, incident_id)
                session.execute(delete(CrimeIncident).where(CrimeIncident.id == incident_id))
        except CrimeDataError:
            raise
        except SQLAlchemyError as exc:
            logger.error("Failed to delete incident", incident_id=incident_id, error=str(exc))
            raise StoreFailureError("Failed to delete incident", details=str(exc)) from exc

        logger.info("Deleted crime incident", incident_id=incident_id)
        return {"message": "Incident deleted successfully"}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _column_values(self, values: Dict[str, Any]) -> Dict[str, Any]:
        columns = {key: value for key, value in values.items() if key not in ("lat", "lng")}
        columns["location"] = make_point(values["lng"], values["lat"], self.srid)
        return columns

    def _lock_existing(self, session: Session, incident_id: int) -> None:
        stmt = (
            select(CrimeIncident.id)
            .where(CrimeIncident.id == incident_id)
            .with_for_update()
        )
        if session.execute(stmt).scalar_one_or_none() is None:
            raise NotFoundError("Incident not found")

    def _fetch_incident(self, session: Session, incident_id: int) -> Dict[str, Any]:
        query = compile_query(
            INCIDENT_SELECT_SQL, [Predicate(("ci.id",), "=", incident_id)]
        )
        row = session.execute(text(query.sql), query.bind_params).mappings().first()
        if row is None:
            raise NotFoundError("Incident not found")
        return dict(row)

    def _raise_integrity_error(self, action: str, exc: IntegrityError, **context: Any) -> None:
        if _is_unique_violation(exc):
            logger.warning(f"Duplicate incident code on {action}", **context)
            raise DuplicateCodeError() from exc
        logger.error(f"Failed to {action} incident", error=str(exc), **context)
        raise StoreFailureError(f"Failed to {action} incident: {exc.orig}", details=str(exc.orig)) from exc
