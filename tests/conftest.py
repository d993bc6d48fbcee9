# tests/conftest.py

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from order_recon.database import ArchiveError, ReportArchive, SQLiteReportArchive
from order_recon.dependencies import get_as_of_date, get_report_archive
from order_recon.main import app


AS_OF = date(2024, 1, 6)


# ============================================
# Archive doubles
# ============================================

class FailingArchive(ReportArchive):
    """Archive whose storage is down."""

    def create(self, summary, created_at=None):
        raise ArchiveError("disk full")

    def get_by_id(self, report_id):
        raise ArchiveError("disk full")

    def list_all(self):
        raise ArchiveError("disk full")


class FakeSupabaseQuery:
    """Just enough of the postgrest query builder for the archive."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.orders = []

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def select(self, *columns):
        self.op = "select"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def execute(self):
        rows = self.client.tables.setdefault(self.table, [])
        if self.op == "insert":
            row = dict(self.payload, id=len(rows) + 1)
            rows.append(row)
            return SimpleNamespace(data=[row])

        found = [r for r in rows if all(r[c] == v for c, v in self.filters)]
        for column, desc in reversed(self.orders):
            found.sort(key=lambda r: r[column], reverse=desc)
        return SimpleNamespace(data=found)


class FakeSupabaseClient:
    def __init__(self):
        self.tables = {}

    def table(self, name):
        return FakeSupabaseQuery(self, name)


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def failing_archive():
    return FailingArchive()


@pytest.fixture
def supabase_client():
    return FakeSupabaseClient()


@pytest.fixture
def archive(tmp_path):
    return SQLiteReportArchive(tmp_path / "archive.db")


@pytest.fixture
def client(archive):
    app.dependency_overrides[get_report_archive] = lambda: archive
    app.dependency_overrides[get_as_of_date] = lambda: AS_OF
    yield TestClient(app)
    app.dependency_overrides.clear()
