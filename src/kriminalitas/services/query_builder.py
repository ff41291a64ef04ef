"""Parameterized SQL assembly for the incident search and list queries.

Filters become a list of :class:`Predicate` values which :func:`compile_query`
folds into ``text()``-ready SQL. Placeholders are named ``:p1``, ``:p2``, …
and the number always equals the 1-based position of the value in
``CompiledQuery.params``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

ALL = "all"

# Filter name -> column, in evaluation order
EXACT_FILTER_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("district", "a.name"),
    ("type", "t.name"),
    ("severity", "ci.severity_level"),
)

SEARCH_COLUMNS = ("ci.address", "ci.incident_code")
LIST_SEARCH_COLUMNS = ("ci.incident_code", "ci.address", "a.name")


@dataclass(frozen=True)
class Predicate:
    """One ``AND`` clause: ``columns`` compared with ``operator`` to one value.

    Several columns are OR-ed together and share a single placeholder.
    """

    columns: Tuple[str, ...]
    operator: str
    value: Any


@dataclass(frozen=True)
class CompiledQuery:
    sql: str
    params: List[Any] = field(default_factory=list)

    @property
    def bind_params(self) -> Dict[str, Any]:
        return {f"p{index}": value for index, value in enumerate(self.params, start=1)}


def _is_unset(value: Any) -> bool:
    return value is None or value == "" or value == ALL


def search_predicate(value: Any, columns: Sequence[str] = SEARCH_COLUMNS) -> Optional[Predicate]:
    """Case-insensitive containment match over ``columns``, or None when unset."""
    if _is_unset(value):
        return None
    return Predicate(tuple(columns), "ILIKE", f"%{value}%")


def equals_predicate(column: str, value: Any) -> Optional[Predicate]:
    if _is_unset(value):
        return None
    return Predicate((column,), "=", value)


def build_filter_predicates(
    filters: Mapping[str, Any],
    search_columns: Sequence[str] = SEARCH_COLUMNS,
) -> List[Predicate]:
    """Translate a filter mapping into predicates.

    Order is fixed (search, district, type, severity) regardless of the
    mapping's own ordering. Unknown keys are ignored.
    """
    predicates: List[Predicate] = []

    search = search_predicate(filters.get("search"), search_columns)
    if search:
        predicates.append(search)

    for name, column in EXACT_FILTER_COLUMNS:
        predicate = equals_predicate(column, filters.get(name))
        if predicate:
            predicates.append(predicate)

    return predicates


def _render_predicate(predicate: Predicate, placeholder: str) -> str:
    comparisons = [
        f"{column} {predicate.operator} {placeholder}" for column in predicate.columns
    ]
    if len(comparisons) == 1:
        return comparisons[0]
    return "(" + " OR ".join(comparisons) + ")"


def compile_query(
    base_sql: str,
    predicates: Sequence[Predicate],
    order_by: Sequence[str] = (),
    limit: Optional[int] = None,
) -> CompiledQuery:
    """Fold predicates into ``base_sql``.

    ``base_sql`` must end with a ``WHERE`` clause (normally ``WHERE 1=1``);
    each predicate is appended as ``AND …`` with the next placeholder index.
    """
    sql = base_sql.rstrip()
    params: List[Any] = []

    for predicate in predicates:
        params.append(predicate.value)
        sql += f" AND {_render_predicate(predicate, f':p{len(params)}')}"

    if order_by:
        sql += " ORDER BY " + ", ".join(order_by)
    if limit is not None:
        sql += f" LIMIT {int(limit)}"

    return CompiledQuery(sql=sql, params=params)


SEARCH_BASE_SQL = """
    SELECT
        ci.id,
        a.name AS district,
        t.name AS type,
        ci.address AS location,
        ci.incident_date,
        ci.severity_level AS severity,
        ci.incident_code AS report_number
    FROM crime_incidents ci
    JOIN areas a ON ci.area_id = a.id
    JOIN types t ON ci.type_id = t.id
    WHERE 1=1
"""


def build_search_query(filters: Mapping[str, Any], limit: int = 100) -> CompiledQuery:
    """Query behind the dashboard crime table search."""
    return compile_query(
        SEARCH_BASE_SQL,
        build_filter_predicates(filters, SEARCH_COLUMNS),
        order_by=("ci.incident_date DESC",),
        limit=limit,
    )
