"""Pydantic models for API requests and responses.

Field names stay snake_case in Python; the JSON names the dashboard expects
(``reportNumber``, ``last30Days``, ...) are declared as serialization aliases.
"""

from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IncidentPayload(BaseModel):
    """Request body for creating or fully replacing an incident.

    Every field is optional at this layer so that missing values are
    reported together by the incident service.
    """

    model_config = ConfigDict(extra="ignore")

    incident_code: str | None = None
    area_id: int | None = None
    type_id: int | None = None
    location: dict[str, Any] | None = Field(
        None, description="Object with numeric lat and lng"
    )
    address: str | None = None
    incident_date: date | None = None
    incident_time: time | None = None
    severity_level: str | None = Field(
        None, description="LOW, MEDIUM, HIGH or CRITICAL (default MEDIUM)"
    )
    description: str | None = None

    @field_validator(
        "area_id", "type_id", "incident_date", "incident_time", mode="before"
    )
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        # HTML forms submit untouched inputs as empty strings
        if isinstance(value, str) and not value.strip():
            return None
        return value


class IncidentResponse(BaseModel):
    """Incident joined with its area and type names."""

    id: int
    incident_code: str
    area_id: int | None = None
    type_id: int | None = None
    address: str | None = None
    incident_date: date | None = None
    incident_time: time | None = None
    severity_level: str | None = None
    description: str | None = None
    reported_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    area_name: str | None = None
    type_name: str | None = None
    lat: float | None = None
    lng: float | None = None


class SearchRow(BaseModel):
    """One row of the dashboard crime table."""

    id: int
    district: str | None = None
    type: str | None = None
    location: str | None = None
    incident_date: date | None = Field(None, serialization_alias="date")
    severity: str | None = None
    report_number: str | None = Field(None, serialization_alias="reportNumber")


class SearchResponse(BaseModel):
    data: list[SearchRow]
    total: int


class DistrictBreakdown(BaseModel):
    total: int
    critical: int
    high: int
    medium: int
    low: int


class DistrictStat(BaseModel):
    name: str | None = None
    total: int
    critical: int
    high: int
    medium: int
    low: int
    last_30_days: int = Field(serialization_alias="last30Days")
    avg_severity: float = Field(serialization_alias="avgSeverity")
    details: DistrictBreakdown


class DistrictSummary(BaseModel):
    total_districts: int = Field(serialization_alias="totalDistricts")
    total_crimes: int = Field(serialization_alias="totalCrimes")
    total_critical: int = Field(serialization_alias="totalCritical")
    total_last_30_days: int = Field(serialization_alias="totalLast30Days")
    avg_crime_per_district: float = Field(serialization_alias="avgCrimePerDistrict")


class DistrictReport(BaseModel):
    districts: list[DistrictStat]
    summary: DistrictSummary


class Hotspot(BaseModel):
    area: str | None = None
    cases: int
    trend: str = Field(description="up, down or stable against the previous window")
    avg_severity: float = Field(serialization_alias="avgSeverity")


class CrimeTypeShare(BaseModel):
    type: str | None = None
    count: int
    percentage: float


class RecentIncident(BaseModel):
    id: int
    title: str | None = None
    location: str | None = None
    incident_date: date | None = Field(None, serialization_alias="date")
    type: str | None = None
    severity: str | None = None


class IncidentFeature(BaseModel):
    """Incident with its location as a GeoJSON geometry object."""

    id: int
    incident_code: str | None = None
    area_id: int | None = None
    location: dict[str, Any] | None = None
    address: str | None = None
    incident_date: date | None = None
    incident_time: time | None = None
    severity_level: str | None = None
    description: str | None = None
    type_name: str | None = None
    area_name: str | None = None


class TypeResponse(BaseModel):
    id: int
    name: str
    description: str | None = None


class DistrictResponse(BaseModel):
    district: str


class AreaResponse(BaseModel):
    id: int
    name: str | None = None


class AreaFeatureCollection(BaseModel):
    type: str = "FeatureCollection"
    features: list[dict[str, Any]]


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Response model for health checks."""

    status: str
    timestamp: datetime
    services: dict[str, str]
