# order_recon/database.py

"""
Report archive.

Stores each reconciliation summary under an auto-assigned integer id so it
can be fetched again or listed most-recent-first.
"""

from abc import ABC, abstractmethod
from contextlib import closing
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
import logging
import re
import sqlite3

from supabase import create_client, Client

from order_recon.config import get_settings
from order_recon.models import ArchivedReport, ReconciliationSummary

logger = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ArchiveError(Exception):
    """Raised when the archive cannot store or read reports."""


def _check_table_name(table: str) -> str:
    if not _TABLE_NAME.match(table):
        raise ValueError(f"Invalid archive table name: {table!r}")
    return table


def _utc(moment: datetime | None) -> datetime:
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _load_summary(raw) -> ReconciliationSummary:
    if isinstance(raw, (str, bytes)):
        return ReconciliationSummary.model_validate_json(raw)
    return ReconciliationSummary.model_validate(raw)


class ReportArchive(ABC):
    """Storage contract shared by the archive backends."""

    @abstractmethod
    def create(self, summary: ReconciliationSummary, created_at: datetime | None = None) -> int:
        """Persist a summary and return its new id."""
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, report_id: int) -> ArchivedReport | None:
        """Fetch one report, or None if the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[ArchivedReport]:
        """All reports, most recently created first."""
        raise NotImplementedError


# ============================================
# SQLite backend
# ============================================

class SQLiteReportArchive(ReportArchive):
    """Archive in a local SQLite file. One connection per call."""

    def __init__(self, path: str | Path, table: str = "archive"):
        self.path = str(path)
        self.table = _check_table_name(table)
        self._ensure_table()

    def _connect(self) -> sqlite3.Connection:
        con = sqlite3.connect(self.path)
        con.row_factory = sqlite3.Row
        return con

    def _ensure_table(self) -> None:
        try:
            with closing(self._connect()) as con, con:
                con.execute(
                    f"""CREATE TABLE IF NOT EXISTS {self.table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        created_at TEXT NOT NULL,
                        response TEXT NOT NULL,
                        missing_orders_count INTEGER NOT NULL
                    )"""
                )
        except sqlite3.Error as e:
            raise ArchiveError(f"Failed to open archive at {self.path}: {e}") from e

    def create(self, summary: ReconciliationSummary, created_at: datetime | None = None) -> int:
        created = _utc(created_at)
        try:
            with closing(self._connect()) as con, con:
                cursor = con.execute(
                    f"INSERT INTO {self.table} (created_at, response, missing_orders_count) VALUES (?, ?, ?)",
                    (created.isoformat(timespec="microseconds"), summary.model_dump_json(), summary.total_missing_count),
                )
                report_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise ArchiveError(f"Failed to store report: {e}") from e

        logger.info("Archived report %d (%d missing orders)", report_id, summary.total_missing_count)
        return report_id

    def get_by_id(self, report_id: int) -> ArchivedReport | None:
        try:
            with closing(self._connect()) as con:
                row = con.execute(
                    f"SELECT id, created_at, response FROM {self.table} WHERE id = ?",
                    (report_id,),
                ).fetchone()
        except OverflowError:
            # Outside SQLite's integer range, so no such row can exist
            return None
        except sqlite3.Error as e:
            raise ArchiveError(f"Failed to read report {report_id}: {e}") from e

        return self._to_report(row) if row else None

    def list_all(self) -> list[ArchivedReport]:
        try:
            with closing(self._connect()) as con:
                rows = con.execute(
                    f"SELECT id, created_at, response FROM {self.table} ORDER BY created_at DESC, id DESC"
                ).fetchall()
        except sqlite3.Error as e:
            raise ArchiveError(f"Failed to list reports: {e}") from e

        return [self._to_report(row) for row in rows]

    @staticmethod
    def _to_report(row: sqlite3.Row) -> ArchivedReport:
        return ArchivedReport(
            id=row["id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            summary=_load_summary(row["response"]),
        )


# ============================================
# Supabase backend
# ============================================

class SupabaseReportArchive(ReportArchive):
    """
    Archive in a Supabase table.

    Expects `id` to be a generated identity column and `response` a jsonb
    column.
    """

    def __init__(self, client: Client, table: str = "archive"):
        self.client = client
        self.table = _check_table_name(table)

    def create(self, summary: ReconciliationSummary, created_at: datetime | None = None) -> int:
        data = {
            "created_at": _utc(created_at).isoformat(timespec="microseconds"),
            "response": summary.model_dump(mode="json"),
            "missing_orders_count": summary.total_missing_count,
        }

        try:
            response = self.client.table(self.table).insert(data).execute()
        except Exception as e:
            raise ArchiveError(f"Failed to store report: {e}") from e

        if not response.data:
            raise ArchiveError("Archive did not return the stored report")

        report_id = int(response.data[0]["id"])
        logger.info("Archived report %d (%d missing orders)", report_id, summary.total_missing_count)
        return report_id

    def get_by_id(self, report_id: int) -> ArchivedReport | None:
        try:
            response = self.client.table(self.table).select("*").eq("id", report_id).execute()
        except Exception as e:
            raise ArchiveError(f"Failed to read report {report_id}: {e}") from e

        return self._to_report(response.data[0]) if response.data else None

    def list_all(self) -> list[ArchivedReport]:
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .order("created_at", desc=True)
                .order("id", desc=True)
                .execute()
            )
        except Exception as e:
            raise ArchiveError(f"Failed to list reports: {e}") from e

        return [self._to_report(row) for row in response.data or []]

    @staticmethod
    def _to_report(row: dict) -> ArchivedReport:
        return ArchivedReport(
            id=int(row["id"]),
            created_at=row["created_at"],
            summary=_load_summary(row["response"]),
        )


@lru_cache()
def get_archive() -> ReportArchive:
    """Archive backend selected by settings, built once per process."""
    settings = get_settings()

    if settings.archive_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise ArchiveError("Supabase archive requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
        client: Client = create_client(settings.supabase_url, settings.supabase_service_role_key)
        return SupabaseReportArchive(client, settings.archive_table)

    return SQLiteReportArchive(settings.archive_db_path, settings.archive_table)
