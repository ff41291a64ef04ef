"""Tests for the dropdown lookup lists."""
import pytest
from sqlalchemy.exc import OperationalError

from kriminalitas.services.exceptions import StoreFailureError
from kriminalitas.services.reference_service import ReferenceService


def test_crime_type_names(fake_store, rows_result):
    fake_store.session.execute.return_value = rows_result([{"name": "Begal"}, {"name": "Pencurian"}])

    assert ReferenceService(fake_store).crime_type_names() == ["Begal", "Pencurian"]
    statement = str(fake_store.session.execute.call_args.args[0])
    assert "ORDER BY types.name" in statement


def test_list_types(fake_store, rows_result):
    rows = [{"id": 1, "name": "Begal", "description": None}]
    fake_store.session.execute.return_value = rows_result(rows)

    assert ReferenceService(fake_store).list_types() == rows


def test_district_names_are_distinct_and_non_empty(fake_store, rows_result):
    fake_store.session.execute.return_value = rows_result([{"district": "Coblong"}])

    assert ReferenceService(fake_store).district_names() == [{"district": "Coblong"}]
    statement = str(fake_store.session.execute.call_args.args[0])
    assert statement.startswith("SELECT DISTINCT areas.name AS district")
    assert "areas.name IS NOT NULL" in statement


def test_list_areas(fake_store, rows_result):
    fake_store.session.execute.return_value = rows_result([{"id": 12, "name": "Coblong"}])

    assert ReferenceService(fake_store).list_areas() == [{"id": 12, "name": "Coblong"}]


def test_store_failure(fake_store):
    fake_store.session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

    with pytest.raises(StoreFailureError) as exc_info:
        ReferenceService(fake_store).district_names()

    assert exc_info.value.message == "Failed to fetch districts"
    assert exc_info.value.details
