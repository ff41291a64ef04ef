"""Tests for the dashboard aggregate reports."""
from decimal import Decimal

import pytest
from sqlalchemy.exc import ProgrammingError

from kriminalitas.services.exceptions import StoreFailureError
from kriminalitas.services.report_service import (DISTRICT_STATS_SQL,
                                                  HOTSPOTS_SQL,
                                                  SEVERITY_SCORE_SQL,
                                                  TOP_CRIME_TYPES_SQL,
                                                  ReportService,
                                                  build_district_report,
                                                  classify_trend,
                                                  shape_hotspot_row, to_int)
from kriminalitas.utils.config import ReportSettings


def _district(name, total, critical=0, last_30_days=0, **extra):
    row = {
        "name": name,
        "total": total,
        "critical_cases": critical,
        "high_cases": None,
        "medium_cases": None,
        "low_cases": None,
        "last_30_days": last_30_days,
        "avg_severity": Decimal("2.50"),
    }
    row.update(extra)
    return row


class TestTrend:
    @pytest.mark.parametrize(
        "recent,previous,expected",
        [(5, 2, "up"), (1, 4, "down"), (3, 3, "stable"), (0, 0, "stable"), (None, None, "stable")],
    )
    def test_classify_trend(self, recent, previous, expected):
        assert classify_trend(recent, previous) == expected

    def test_hotspot_row_shape(self):
        row = {
            "area": "Coblong",
            "cases": 12,
            "avg_severity": Decimal("2.8"),
            "recent_cases": 0,
            "previous_cases": 0,
        }

        assert shape_hotspot_row(row) == {
            "area": "Coblong",
            "cases": 12,
            "trend": "stable",
            "avg_severity": 2.8,
        }


class TestDistrictReport:
    def test_zero_incident_districts_are_dropped(self):
        report = build_district_report([_district("Coblong", 10), _district("Sukajadi", 0)])

        assert [d["name"] for d in report["districts"]] == ["Coblong"]
        assert report["summary"]["total_districts"] == 1

    def test_null_buckets_become_zero(self):
        district = build_district_report([_district("Coblong", 3)])["districts"][0]

        assert district["high"] == 0
        assert district["medium"] == 0
        assert district["low"] == 0
        assert district["avg_severity"] == 2.5
        assert district["details"] == {
            "total": 3,
            "critical": 0,
            "high": 0,
            "medium": 0,
            "low": 0,
        }

    def test_summary_totals(self):
        report = build_district_report(
            [
                _district("Coblong", 10, critical=2, last_30_days=4),
                _district("Cidadap", 5, critical=1, last_30_days=1),
            ]
        )

        assert report["summary"] == {
            "total_districts": 2,
            "total_crimes": 15,
            "total_critical": 3,
            "total_last_30_days": 5,
            "avg_crime_per_district": 7.5,
        }

    def test_empty_report_divides_by_one(self):
        report = build_district_report([])

        assert report["districts"] == []
        assert report["summary"]["avg_crime_per_district"] == 0


class TestSql:
    def test_unknown_severity_scores_as_low(self):
        assert "WHEN 'CRITICAL' THEN 4" in SEVERITY_SCORE_SQL
        assert SEVERITY_SCORE_SQL.endswith("ELSE 1 END")

    def test_district_stats_includes_empty_areas_before_filtering(self):
        assert "LEFT JOIN crime_incidents ci" in DISTRICT_STATS_SQL
        assert "WHERE total_crimes > 0" in DISTRICT_STATS_SQL
        assert "ROUND(AVG(" in DISTRICT_STATS_SQL

    def test_hotspots_order_and_windows(self):
        assert "ORDER BY cases DESC, avg_severity DESC" in HOTSPOTS_SQL
        assert "CURRENT_DATE - (2 * :window_days)" in HOTSPOTS_SQL

    def test_top_types_use_window_share(self):
        assert "SUM(COUNT(ci.id)) OVER ()" in TOP_CRIME_TYPES_SQL


class TestReportService:
    def test_district_stats_binds_settings(self, fake_store, rows_result):
        fake_store.session.execute.return_value = rows_result([_district("Coblong", 4)])
        settings = ReportSettings(trend_window_days=14, district_limit=3)

        report = ReportService(fake_store, settings).district_stats()

        assert report["districts"][0]["total"] == 4
        _, params = fake_store.session.execute.call_args.args
        assert params == {"window_days": 14, "limit": 3}

    def test_hotspots_default_limit(self, fake_store, rows_result):
        fake_store.session.execute.return_value = rows_result([])

        assert ReportService(fake_store, ReportSettings()).hotspots() == []
        _, params = fake_store.session.execute.call_args.args
        assert params == {"window_days": 30, "limit": 6}

    def test_top_crime_types_coerced(self, fake_store, rows_result):
        fake_store.session.execute.return_value = rows_result(
            [
                {"type": "Pencurian", "count": 6, "percentage": Decimal("60.0")},
                {"type": "Begal", "count": 4, "percentage": Decimal("40.0")},
            ]
        )

        types = ReportService(fake_store, ReportSettings()).top_crime_types()

        assert types[0] == {"type": "Pencurian", "count": 6, "percentage": 60.0}
        assert sum(t["percentage"] for t in types) <= 100

    def test_recent_incidents_limit(self, fake_store, rows_result):
        fake_store.session.execute.return_value = rows_result([{"id": 1, "title": "KRM-1"}])

        recent = ReportService(fake_store, ReportSettings()).recent_incidents()

        assert recent == [{"id": 1, "title": "KRM-1"}]
        _, params = fake_store.session.execute.call_args.args
        assert params == {"limit": 5}

    def test_incident_features_decode_geojson(self, fake_store, rows_result):
        fake_store.session.execute.return_value = rows_result(
            [{"id": 3, "location": '{"type":"Point","coordinates":[106.8,-6.2]}'}]
        )

        features = ReportService(fake_store, ReportSettings()).incident_features()

        assert features[0]["location"] == {"type": "Point", "coordinates": [106.8, -6.2]}

    def test_store_failure(self, fake_store):
        fake_store.session.execute.side_effect = ProgrammingError("SELECT", {}, Exception("boom"))

        with pytest.raises(StoreFailureError) as exc_info:
            ReportService(fake_store, ReportSettings()).hotspots()

        assert exc_info.value.message == "Failed to fetch hotspots"


def test_to_int_handles_garbage():
    assert to_int("n/a") == 0
    assert to_int(Decimal("3")) == 3
