"""Crime incident and crime type models."""
from enum import Enum

from geoalchemy2 import Geometry
from sqlalchemy import (CheckConstraint, Column, Date, DateTime, ForeignKey,
                        Integer, String, Text, Time)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base, TimestampMixin


class Severity(str, Enum):
    """Incident severity, ordered from least to most severe."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


SEVERITY_SCORES = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}

DEFAULT_SEVERITY = Severity.MEDIUM


class CrimeType(Base):
    """Crime category."""

    __tablename__ = "types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), unique=True, nullable=False)
    description = Column(Text)


class CrimeIncident(Base, TimestampMixin):
    """A single reported crime incident."""

    __tablename__ = "crime_incidents"
    __table_args__ = (
        CheckConstraint(
            "severity_level IN ('LOW', 'MEDIUM', 'HIGH', 'CRITICAL')",
            name="severity_level",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    incident_code = Column(String(50), unique=True, nullable=False)
    area_id = Column(Integer, ForeignKey("areas.id"), nullable=False, index=True)
    type_id = Column(Integer, ForeignKey("types.id"), nullable=False, index=True)
    address = Column(Text, nullable=False)
    location = Column(Geometry("POINT", srid=4326))
    incident_date = Column(Date, nullable=False, index=True)
    incident_time = Column(Time)
    severity_level = Column(
        String(16),
        nullable=False,
        default=DEFAULT_SEVERITY.value,
        server_default=DEFAULT_SEVERITY.value,
    )
    description = Column(Text)
    reported_at = Column(DateTime, server_default=func.now())

    area = relationship("Area")
    crime_type = relationship("CrimeType")
