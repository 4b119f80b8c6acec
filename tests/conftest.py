import re
from collections import defaultdict

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from datbolt.errors import SourceQueryError
from datbolt.etl.context import MigrationContext

INSERT_RE = re.compile(r'INSERT INTO "(?P<table>[^"]+)" \((?P<columns>[^)]*)\)')


class FakeSource:
    """In-memory stand-in for SourceClient."""

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables = defaultdict(list, tables or {})
        self.select_calls: list[dict] = []
        self.count_calls: list[str] = []
        self.failing: dict[str, str] = {}
        self.closed = False

    def fail(self, table: str, message: str = "relation does not exist") -> None:
        self.failing[table] = message

    def count(self, table: str) -> int:
        self.count_calls.append(table)
        if table in self.failing:
            raise SourceQueryError(table, self.failing[table])
        return len(self.tables[table])

    def select(self, table, columns="*", order_by=None, offset=None, limit=None, not_null=None):
        self.select_calls.append({"table": table, "offset": offset, "limit": limit, "columns": columns})
        if table in self.failing:
            raise SourceQueryError(table, self.failing[table])
        rows = [r for r in self.tables[table] if all(r.get(c) is not None for c in not_null or [])]
        start = offset or 0
        end = start + limit if limit is not None else None
        page = rows[start:end]
        if columns != "*":
            wanted = columns.split(",")
            page = [{c: r.get(c) for c in wanted} for r in page]
        return page

    def close(self) -> None:
        self.closed = True


class FakeTarget:
    """In-memory stand-in for TargetDatabase with conflict-skip on the first column."""

    def __init__(self):
        self.rows = defaultdict(dict)
        self.statements: list[tuple[str, list]] = []
        self.failing: dict[str, str] = {}
        self.failing_emails: set[str] = set()
        self.closed = False

    def fail(self, table: str, message: str = 'invalid input value for enum incident_severity: "urgent"') -> None:
        self.failing[table] = message

    def execute(self, sql, params=()):
        self.statements.append((sql, list(params)))
        match = INSERT_RE.search(sql)
        table = match.group("table")
        if table in self.failing:
            raise OperationalError(sql, params, Exception(self.failing[table]))
        columns = [c.strip().strip('"') for c in match.group("columns").split(",")]
        params = list(params)
        inserted = 0
        for i in range(0, len(params), len(columns)):
            record = dict(zip(columns, params[i:i + len(columns)]))
            key = record[columns[0]]
            if key not in self.rows[table]:
                self.rows[table][key] = record
                inserted += 1
        return inserted

    def execute_statement(self, statement):
        values = statement.compile(dialect=postgresql.dialect()).params
        if values["email"] in self.failing_emails:
            raise OperationalError("INSERT INTO users", values, Exception("connection reset"))
        if values["email"] in self.rows["users"]:
            return 0
        self.rows["users"][values["email"]] = values
        return 1

    def count(self, table) -> int:
        name = getattr(table, "name", table)
        if name in self.failing:
            raise OperationalError("SELECT count(*)", {}, Exception(self.failing[name]))
        return len(self.rows[name])

    @property
    def insert_statements(self):
        return [s for s in self.statements if s[0].startswith("INSERT")]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def target():
    return FakeTarget()


@pytest.fixture
def ctx(source, target):
    return MigrationContext(source=source, target=target, batch_size=1000)


@pytest.fixture
def dry_ctx(source, target):
    return MigrationContext(source=source, target=target, dry_run=True, batch_size=1000)
