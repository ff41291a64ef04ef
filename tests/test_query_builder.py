"""Tests for incident search SQL assembly."""
import pytest

from kriminalitas.services.query_builder import (LIST_SEARCH_COLUMNS,
                                                 SEARCH_BASE_SQL, Predicate,
                                                 build_filter_predicates,
                                                 build_search_query,
                                                 compile_query,
                                                 search_predicate)


class TestBuildSearchQuery:
    """Filter mapping -> SQL text and bound parameters."""

    @pytest.mark.parametrize(
        "filters",
        [
            {},
            {"search": "", "district": "all", "type": "all", "severity": "all"},
            {"search": None, "district": None, "type": None, "severity": None},
        ],
    )
    def test_unset_filters_leave_base_clause(self, filters):
        query = build_search_query(filters)

        assert query.params == []
        assert " AND " not in query.sql
        assert query.sql.startswith(SEARCH_BASE_SQL.rstrip())
        assert query.sql.endswith("ORDER BY ci.incident_date DESC LIMIT 100")

    def test_search_shares_one_placeholder(self):
        query = build_search_query({"search": "curi"})

        assert query.params == ["%curi%"]
        assert query.sql.count(":p1") == 2
        assert ":p2" not in query.sql
        assert "(ci.address ILIKE :p1 OR ci.incident_code ILIKE :p1)" in query.sql

    def test_placeholders_follow_evaluation_order(self):
        # Mapping order differs from evaluation order on purpose
        query = build_search_query(
            {"severity": "HIGH", "type": "Pencurian", "district": "Coblong", "search": "jl"}
        )

        assert query.params == ["%jl%", "Coblong", "Pencurian", "HIGH"]
        assert "a.name = :p2" in query.sql
        assert "t.name = :p3" in query.sql
        assert "ci.severity_level = :p4" in query.sql
        assert query.bind_params == {
            "p1": "%jl%",
            "p2": "Coblong",
            "p3": "Pencurian",
            "p4": "HIGH",
        }

    def test_skipped_filter_does_not_consume_index(self):
        query = build_search_query({"district": "all", "type": "Begal"})

        assert query.params == ["Begal"]
        assert "t.name = :p1" in query.sql
        assert "a.name" not in query.sql.split("WHERE 1=1")[1]

    def test_same_filters_give_same_query(self):
        filters = {"search": "x", "severity": "LOW"}
        assert build_search_query(filters) == build_search_query(dict(filters))

    def test_limit_is_configurable(self):
        assert build_search_query({}, limit=25).sql.endswith("LIMIT 25")

    def test_unknown_filters_are_ignored(self):
        assert build_search_query({"village": "Dago"}).params == []


class TestCompileQuery:
    def test_list_search_covers_area_name(self):
        predicate = search_predicate("dago", LIST_SEARCH_COLUMNS)

        query = compile_query("SELECT 1 FROM t WHERE 1=1", [predicate])

        assert query.sql == (
            "SELECT 1 FROM t WHERE 1=1 AND "
            "(ci.incident_code ILIKE :p1 OR ci.address ILIKE :p1 OR a.name ILIKE :p1)"
        )

    def test_order_by_without_limit(self):
        query = compile_query(
            "SELECT 1 WHERE 1=1",
            [Predicate(("ci.id",), "=", 5)],
            order_by=("ci.incident_date DESC", "ci.incident_time DESC"),
        )

        assert query.sql == (
            "SELECT 1 WHERE 1=1 AND ci.id = :p1 "
            "ORDER BY ci.incident_date DESC, ci.incident_time DESC"
        )
        assert query.params == [5]

    def test_no_predicates_for_empty_mapping(self):
        assert build_filter_predicates({}) == []
