"""Tests for the table definitions emitted by ``create_all``."""
import pytest
from sqlalchemy import create_mock_engine

from kriminalitas.models import Base


@pytest.fixture(scope="module")
def create_all_ddl():
    statements = []

    def record(sql, *multiparams, **params):
        statements.append(str(sql.compile(dialect=engine.dialect)))

    engine = create_mock_engine("postgresql+psycopg2://", record)
    Base.metadata.create_all(engine, checkfirst=False)
    return "\n".join(statements)


def test_geometry_columns_get_gist_indexes_only(create_all_ddl):
    assert "ix_areas_geom" not in create_all_ddl
    assert "ix_crime_incidents_location" not in create_all_ddl
    assert "idx_areas_geom ON areas USING gist (geom)" in create_all_ddl
    assert "idx_crime_incidents_location ON crime_incidents USING gist (location)" in create_all_ddl


def test_lookup_columns_keep_btree_indexes(create_all_ddl):
    assert "ix_crime_incidents_area_id ON crime_incidents (area_id)" in create_all_ddl
    assert "ix_crime_incidents_incident_date ON crime_incidents (incident_date)" in create_all_ddl
