"""Lookup lists for dashboard filters and form dropdowns."""
from typing import List

from fastapi import APIRouter, Depends

from kriminalitas.api.dependencies import get_reference_service
from kriminalitas.api.models import AreaResponse, DistrictResponse, TypeResponse
from kriminalitas.services.reference_service import ReferenceService

router = APIRouter(tags=["reference"])


@router.get("/crime-types", response_model=List[str])
def crime_types(service: ReferenceService = Depends(get_reference_service)):
    return service.crime_type_names()


@router.get("/types", response_model=List[TypeResponse])
def types(service: ReferenceService = Depends(get_reference_service)):
    return service.list_types()


@router.get("/districts", response_model=List[DistrictResponse])
def districts(service: ReferenceService = Depends(get_reference_service)):
    return service.district_names()


@router.get("/areas", response_model=List[AreaResponse])
def areas(service: ReferenceService = Depends(get_reference_service)):
    return service.list_areas()
