"""Area polygon endpoints for the choropleth map."""
from fastapi import APIRouter, Depends

from kriminalitas.api.dependencies import get_area_service
from kriminalitas.api.models import AreaFeatureCollection
from kriminalitas.services.area_service import AreaService

router = APIRouter(prefix="/areas", tags=["areas"])


@router.get("/geojson", response_model=AreaFeatureCollection)
def area_geojson(service: AreaService = Depends(get_area_service)):
    """Area polygons colored by their stored crime level."""
    return service.feature_collection()
