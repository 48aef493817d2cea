"""
Backend-neutral query description.

Screens build a Query out of equality, range and OR/AND clauses plus a sort
order; each backend translates it to its native form (SQLAlchemy criteria or
PostgREST query parameters).
"""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, List, Optional, Tuple, Union

import sqlalchemy as sa

from ..core.errors import QueryError


@dataclass(frozen=True)
class Condition:
    column: str
    op: str  # "eq", "gte", "lte"
    value: Any


@dataclass(frozen=True)
class Group:
    kind: str  # "and", "or"
    clauses: Tuple["Clause", ...]


Clause = Union[Condition, Group]


def eq(column: str, value: Any) -> Condition:
    return Condition(column, "eq", value)


def gte(column: str, value: Any) -> Condition:
    return Condition(column, "gte", value)


def lte(column: str, value: Any) -> Condition:
    return Condition(column, "lte", value)


def and_(*clauses: Clause) -> Group:
    return Group("and", tuple(clauses))


def or_(*clauses: Clause) -> Group:
    return Group("or", tuple(clauses))


class Query:
    """Chainable filter/sort description. All top-level clauses are ANDed."""

    def __init__(self):
        self.clauses: List[Clause] = []
        self.ordering: List[Tuple[str, bool]] = []

    def where(self, clause: Clause) -> "Query":
        self.clauses.append(clause)
        return self

    def eq(self, column: str, value: Any) -> "Query":
        return self.where(eq(column, value))

    def gte(self, column: str, value: Any) -> "Query":
        return self.where(gte(column, value))

    def lte(self, column: str, value: Any) -> "Query":
        return self.where(lte(column, value))

    def range(self, column: str, lower: Optional[Any] = None, upper: Optional[Any] = None) -> "Query":
        """Inclusive range; either bound may be omitted."""
        if lower is not None:
            self.gte(column, lower)
        if upper is not None:
            self.lte(column, upper)
        return self

    def or_(self, *clauses: Clause) -> "Query":
        return self.where(or_(*clauses))

    def order_by(self, column: str, descending: bool = True) -> "Query":
        self.ordering.append((column, descending))
        return self

    def columns(self) -> List[str]:
        """Every column the query touches, filters and ordering included."""
        found: List[str] = []

        def walk(clause: Clause) -> None:
            if isinstance(clause, Condition):
                found.append(clause.column)
            else:
                for child in clause.clauses:
                    walk(child)

        for clause in self.clauses:
            walk(clause)
        found.extend(column for column, _ in self.ordering)
        return found


# ── SQLAlchemy ──────────────────────────────────────────────────────────────

_SA_OPS = {
    "eq": lambda col, value: col == value,
    "gte": lambda col, value: col >= value,
    "lte": lambda col, value: col <= value,
}


def _sa_column(model, name: str):
    column = model.__table__.columns.get(name)
    if column is None:
        raise QueryError(f"{model.__tablename__} has no column {name!r}")
    return getattr(model, column.key)


def _sa_clause(clause: Clause, model):
    if isinstance(clause, Condition):
        op = _SA_OPS.get(clause.op)
        if op is None:
            raise QueryError(f"Unsupported operator {clause.op!r}")
        return op(_sa_column(model, clause.column), clause.value)
    children = [_sa_clause(child, model) for child in clause.clauses]
    return sa.or_(*children) if clause.kind == "or" else sa.and_(*children)


def to_sqlalchemy(query: Query, model):
    """Return (criteria, order_by) lists for ``session.query(model)``."""
    criteria = [_sa_clause(clause, model) for clause in query.clauses]
    ordering = [
        _sa_column(model, column).desc() if descending else _sa_column(model, column).asc()
        for column, descending in query.ordering
    ]
    return criteria, ordering


# ── PostgREST ───────────────────────────────────────────────────────────────

_RESERVED = set(',()"\\')


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if value is None:
        return "null"
    return str(value)


def _quoted(value: Any) -> str:
    text = _format_value(value)
    if any(ch in _RESERVED for ch in text):
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


def _pg_inner(clause: Clause) -> str:
    if isinstance(clause, Condition):
        return f"{clause.column}.{clause.op}.{_quoted(clause.value)}"
    return f"{clause.kind}({','.join(_pg_inner(child) for child in clause.clauses)})"


def to_postgrest(query: Query) -> List[Tuple[str, str]]:
    """Translate to PostgREST query parameters, in clause order."""
    params: List[Tuple[str, str]] = []
    for clause in query.clauses:
        if isinstance(clause, Condition):
            params.append((clause.column, f"{clause.op}.{_format_value(clause.value)}"))
        else:
            inner = ",".join(_pg_inner(child) for child in clause.clauses)
            params.append((clause.kind, f"({inner})"))
    if query.ordering:
        params.append((
            "order",
            ",".join(f"{column}.{'desc' if descending else 'asc'}" for column, descending in query.ordering),
        ))
    return params
