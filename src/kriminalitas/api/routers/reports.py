"""Aggregate report endpoints behind the dashboard cards, charts and map."""
from typing import List

from fastapi import APIRouter, Depends

from kriminalitas.api.dependencies import get_report_service
from kriminalitas.api.models import (CrimeTypeShare, DistrictReport, Hotspot,
                                     IncidentFeature, RecentIncident)
from kriminalitas.services.report_service import ReportService

router = APIRouter(tags=["reports"])


@router.get("/district-stats", response_model=DistrictReport)
def district_stats(service: ReportService = Depends(get_report_service)):
    """Top districts by incident count with a severity breakdown."""
    return service.district_stats()


@router.get("/hotspots", response_model=List[Hotspot])
def hotspots(service: ReportService = Depends(get_report_service)):
    return service.hotspots()


@router.get("/top-crime-types", response_model=List[CrimeTypeShare])
def top_crime_types(service: ReportService = Depends(get_report_service)):
    return service.top_crime_types()


@router.get("/recent-incidents", response_model=List[RecentIncident])
def recent_incidents(service: ReportService = Depends(get_report_service)):
    return service.recent_incidents()


@router.get("/incidents", response_model=List[IncidentFeature])
def incident_features(service: ReportService = Depends(get_report_service)):
    """All located incidents for the map, with GeoJSON point geometries."""
    return service.incident_features()
