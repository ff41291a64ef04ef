"""Incident search and CRUD endpoints used by the dashboard and admin forms."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from kriminalitas.api.dependencies import get_incident_service
from kriminalitas.api.models import (IncidentPayload, IncidentResponse,
                                     MessageResponse, SearchResponse)
from kriminalitas.services.incident_service import IncidentService

router = APIRouter(tags=["incidents"])


@router.get("/crime-data", response_model=SearchResponse)
def search_crime_data(
    search: Optional[str] = Query(None, description="Matches address or report number"),
    district: Optional[str] = Query(None, description="District name or 'all'"),
    type: Optional[str] = Query(None, description="Crime type name or 'all'"),
    severity: Optional[str] = Query(None, description="Severity level or 'all'"),
    service: IncidentService = Depends(get_incident_service),
):
    return service.search_incidents(
        {"search": search, "district": district, "type": type, "severity": severity}
    )


@router.get("/crime-incidents", response_model=List[IncidentResponse])
def list_incidents(
    search: Optional[str] = Query(None, description="Matches code, address or area name"),
    service: IncidentService = Depends(get_incident_service),
):
    return service.list_incidents(search)


@router.post(
    "/crime-incidents",
    response_model=IncidentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_incident(
    payload: IncidentPayload,
    service: IncidentService = Depends(get_incident_service),
):
    return service.create_incident(payload.model_dump())


@router.get("/crime-incidents/{incident_id}", response_model=IncidentResponse)
def get_incident(incident_id: int, service: IncidentService = Depends(get_incident_service)):
    return service.get_incident(incident_id)


@router.put("/crime-incidents/{incident_id}", response_model=IncidentResponse)
def update_incident(
    incident_id: int,
    payload: IncidentPayload,
    service: IncidentService = Depends(get_incident_service),
):
    return service.update_incident(incident_id, payload.model_dump())


@router.delete("/crime-incidents/{incident_id}", response_model=MessageResponse)
def delete_incident(incident_id: int, service: IncidentService = Depends(get_incident_service)):
    return service.delete_incident(incident_id)
