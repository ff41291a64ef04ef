"""Database models for the crime reporting API."""

from .base import Base, Store
from .crime import (DEFAULT_SEVERITY, SEVERITY_SCORES, CrimeIncident,
                    CrimeType, Severity)
from .spatial import Area

__all__ = [
    "Base",
    "Store",
    "Area",
    "CrimeType",
    "CrimeIncident",
    "Severity",
    "SEVERITY_SCORES",
    "DEFAULT_SEVERITY",
]
