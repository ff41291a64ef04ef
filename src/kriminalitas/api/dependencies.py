"""FastAPI dependencies for the crime reporting API."""
from fastapi import Request

from kriminalitas.models.base import Store
from kriminalitas.services.area_service import AreaService
from kriminalitas.services.incident_service import IncidentService
from kriminalitas.services.reference_service import ReferenceService
from kriminalitas.services.report_service import ReportService
from kriminalitas.utils.config import settings


def get_store(request: Request) -> Store:
    """Dependency to provide the store opened by the application lifespan."""
    return request.app.state.store


def get_incident_service(request: Request) -> IncidentService:
    return IncidentService(get_store(request), srid=settings.spatial.srid)


def get_report_service(request: Request) -> ReportService:
    return ReportService(get_store(request), settings.reports)


def get_reference_service(request: Request) -> ReferenceService:
    return ReferenceService(get_store(request))


def get_area_service(request: Request) -> AreaService:
    return AreaService(get_store(request), settings.spatial)
