"""Lookup lists feeding the dashboard dropdowns."""
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from kriminalitas.models.base import Store
from kriminalitas.models.crime import CrimeType
from kriminalitas.models.spatial import Area
from kriminalitas.services.exceptions import StoreFailureError
from kriminalitas.utils.logging import get_logger

logger = get_logger(__name__)


class ReferenceService:
    """Read-only access to crime types and area names."""

    def __init__(self, store: Store):
        self.store = store

    def crime_type_names(self) -> List[str]:
        stmt = select(CrimeType.name).order_by(CrimeType.name)
        return [row["name"] for row in self._fetch(stmt, "Failed to fetch crime types")]

    def list_types(self) -> List[Dict[str, Any]]:
        stmt = select(CrimeType.id, CrimeType.name, CrimeType.description).order_by(
            CrimeType.name
        )
        return self._fetch(stmt, "Failed to fetch types")

    def district_names(self) -> List[Dict[str, str]]:
        stmt = (
            select(Area.name.label("district"))
            .distinct()
            .where(Area.name.is_not(None), Area.name != "")
            .order_by(Area.name.label("district"))
        )
        districts = self._fetch(stmt, "Failed to fetch districts")
        logger.debug("Fetched districts", count=len(districts))
        return districts

    def list_areas(self) -> List[Dict[str, Any]]:
        stmt = select(Area.id, Area.name).order_by(Area.name)
        return self._fetch(stmt, "Failed to fetch areas")

    def _fetch(self, stmt: Select, failure_message: str) -> List[Dict[str, Any]]:
        try:
            with self.store.transaction() as session:
                return [dict(row) for row in session.execute(stmt).mappings().all()]
        except SQLAlchemyError as exc:
            logger.error(failure_message, error=str(exc))
            raise StoreFailureError(failure_message, details=str(exc)) from exc
