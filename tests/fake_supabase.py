"""
In-memory stand-in for the Supabase table API used in unit tests.

Supports the PostgREST builder calls the Binder stores make:
select / upsert / insert / delete, eq / in_ / not_.in_ / contains,
order / limit, and ``count="exact"``. ``max_rows`` mimics the PostgREST
db max-rows cap so truncation handling can be exercised.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple


class FakeAPIError(Exception):
    """Raised by execute() when a failure was injected."""


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]
    count: Optional[int] = None


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self._db = db
        self._table = table
        self._op = "select"
        self._columns: Optional[List[str]] = None
        self._count: Optional[str] = None
        self._filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._negate_next = False
        self._order: Optional[Tuple[str, bool]] = None
        self._limit: Optional[int] = None
        self._payload: Any = None
        self._on_conflict: Optional[str] = None

    # -- operations ---------------------------------------------------------

    def select(self, columns: str = "*", count: Optional[str] = None) -> "FakeQuery":
        self._op = "select"
        self._columns = None if columns.strip() == "*" else [c.strip() for c in columns.split(",")]
        self._count = count
        return self

    def upsert(self, payload: Any, on_conflict: Optional[str] = None) -> "FakeQuery":
        self._op = "upsert"
        self._payload = payload
        self._on_conflict = on_conflict
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self._op = "insert"
        self._payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    # -- filters ------------------------------------------------------------

    @property
    def not_(self) -> "FakeQuery":
        self._negate_next = True
        self._db.negations += 1
        return self

    def _add(self, predicate: Callable[[Dict[str, Any]], bool]) -> "FakeQuery":
        if self._negate_next:
            self._negate_next = False
            self._filters.append(lambda row: not predicate(row))
        else:
            self._filters.append(predicate)
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        return self._add(lambda row: row.get(column) == value)

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        allowed = set(values)
        return self._add(lambda row: row.get(column) in allowed)

    def contains(self, column: str, values: List[Any]) -> "FakeQuery":
        wanted = set(values)
        return self._add(lambda row: wanted <= set(row.get(column) or []))

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, size: int) -> "FakeQuery":
        self._limit = size
        return self

    # -- execution ----------------------------------------------------------

    def execute(self) -> FakeResponse:
        self._db.calls.append((self._table, self._op))
        if (self._table, self._op) in self._db.failures:
            raise FakeAPIError(f"injected failure on {self._op} {self._table}")

        rows = self._db.tables.setdefault(self._table, [])
        if self._op == "select":
            return self._select(rows)
        if self._op == "upsert":
            return self._upsert(rows)
        if self._op == "insert":
            payloads = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = [dict(p) for p in payloads]
            rows.extend(inserted)
            return FakeResponse(data=copy.deepcopy(inserted))
        if self._op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self._db.tables[self._table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(data=copy.deepcopy(removed))
        raise AssertionError(f"unsupported op {self._op}")

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(predicate(row) for predicate in self._filters)

    def _select(self, rows: List[Dict[str, Any]]) -> FakeResponse:
        matched = [r for r in rows if self._matches(r)]
        if self._order:
            column, desc = self._order
            matched.sort(key=lambda r: r.get(column) or "", reverse=desc)
        total = len(matched)
        if self._limit is not None:
            matched = matched[:self._limit]
        if self._db.max_rows is not None:
            matched = matched[:self._db.max_rows]
        if self._columns is not None:
            matched = [{c: r.get(c) for c in self._columns} for r in matched]
        return FakeResponse(
            data=copy.deepcopy(matched),
            count=total if self._count == "exact" else None,
        )

    def _upsert(self, rows: List[Dict[str, Any]]) -> FakeResponse:
        keys = [k.strip() for k in (self._on_conflict or "id").split(",")]
        payload = dict(self._payload)
        for row in rows:
            if all(row.get(k) == payload.get(k) for k in keys):
                row.update(payload)
                return FakeResponse(data=[copy.deepcopy(row)])
        rows.append(payload)
        return FakeResponse(data=[copy.deepcopy(payload)])


@dataclass
class FakeSupabase:
    tables: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    failures: Set[Tuple[str, str]] = field(default_factory=set)
    calls: List[Tuple[str, str]] = field(default_factory=list)
    max_rows: Optional[int] = None
    negations: int = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, op: str) -> None:
        self.failures.add((table, op))

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])

    def writes(self) -> List[Tuple[str, str]]:
        return [call for call in self.calls if call[1] != "select"]
