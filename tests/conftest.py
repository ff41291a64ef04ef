"""Pytest configuration and fixtures for the crime reporting API tests."""
import sys
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class FakeStore:
    """Store stand-in whose transactions hand out one MagicMock session."""

    def __init__(self):
        self.session = MagicMock(name="session")
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self):
        try:
            yield self.session
            self.commits += 1
        except Exception:
            self.rollbacks += 1
            raise


def mapping_result(rows):
    """Mimic ``session.execute(...)`` for code that calls ``.mappings()``."""
    result = MagicMock(name="result")
    result.mappings.return_value.all.return_value = rows
    result.mappings.return_value.first.return_value = rows[0] if rows else None
    return result


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def rows_result():
    return mapping_result


@pytest.fixture
def sample_incident_payload():
    """Valid create/update body as sent by the admin incident form."""
    return {
        "incident_code": "KRM-2024-001",
        "area_id": 3,
        "type_id": 2,
        "location": {"lat": -6.2, "lng": 106.8},
        "address": "Jl. Merdeka No. 10",
        "incident_date": "2024-03-01",
        "incident_time": "21:15:00",
        "severity_level": "HIGH",
        "description": "Pencurian sepeda motor",
    }


@pytest.fixture
def sample_incident_row():
    """Incident as returned by the joined projection."""
    return {
        "id": 7,
        "incident_code": "KRM-2024-001",
        "area_id": 3,
        "type_id": 2,
        "address": "Jl. Merdeka No. 10",
        "incident_date": "2024-03-01",
        "incident_time": "21:15:00",
        "severity_level": "HIGH",
        "description": "Pencurian sepeda motor",
        "reported_at": "2024-03-01T21:30:00",
        "created_at": "2024-03-01T21:30:00",
        "updated_at": "2024-03-01T21:30:00",
        "area_name": "Bandung Wetan",
        "type_name": "Pencurian",
        "lat": -6.2,
        "lng": 106.8,
    }


@pytest.fixture
def sample_area_feature():
    """One kecamatan feature in the shape the boundary GeoJSON uses."""
    return {
        "type": "Feature",
        "properties": {
            "id": 12,
            "METADATA": "BIG 2020",
            "SRS_ID": "4326",
            "WADMPR": "Jawa Barat",
            "WADMKK": "Kota Bandung",
            "WADMKC": "Coblong",
            "WADMKD": "Dago",
            "UUPP": "",
            "LUAS": "7.35",
            "Jumlah_Penduduk": "131,257",
            "LAKI_LAKI": "65000",
            "PEREMPUAN": None,
        },
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [[107.60, -6.89], [107.63, -6.89], [107.63, -6.86], [107.60, -6.86], [107.60, -6.89]]
            ],
        },
    }
