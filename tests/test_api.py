# tests/test_api.py

"""
Tests for the HTTP routes.
"""

from datetime import date

from fastapi.testclient import TestClient

from order_recon import dependencies
from order_recon.database import ArchiveError
from order_recon.dependencies import get_report_archive
from order_recon.main import app
from order_recon.routers import reconcile as reconcile_routes


EOM_CSV = (
    "EOM Order Export\n"
    "Generated 1/6/2024\n"
    "Order Date,Order Number,Upc,Product Option Value\n"
    "1/5/2024,777,999,Size M\n"
    "1/4/2024,778,111,Size L\n"
    "1/6/2024,779,222,Size S\n"
)

RADIAL_CSV = (
    "Client Web Order Number (Alternative),Item UPC\n"
    "XXXXX778,111\n"
)


def upload(client, eom=EOM_CSV, radial=RADIAL_CSV):
    files = {}
    if eom is not None:
        files["eomData"] = ("eom.csv", eom, "text/csv")
    if radial is not None:
        files["RadialData"] = ("radial.csv", radial, "text/csv")
    return client.post("/upload", files=files)


# ============================================
# Upload
# ============================================

class TestUpload:
    """Test running a reconciliation through the API."""

    def test_upload_reconciles_and_archives(self, client, archive):
        response = upload(client)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["report_id"] == 1
        assert body["summary"] == {
            "missing_orders_by_date": {
                "2024-01-05": [{"order_number": "777", "product_option_value": "Size M"}],
            },
            "total_missing_count": 1,
        }
        assert archive.get_by_id(1).summary.total_missing_count == 1

    def test_utf8_bom_is_accepted(self, client):
        response = upload(client, radial="\ufeff" + RADIAL_CSV)

        assert response.status_code == 201
        assert response.json()["summary"]["total_missing_count"] == 1

    def test_missing_upload_is_rejected(self, client, archive):
        response = upload(client, radial=None)

        assert response.status_code == 400
        assert "RadialData" in response.json()["detail"]
        assert archive.list_all() == []

    def test_undecodable_upload_is_rejected(self, client):
        response = client.post(
            "/upload",
            files={
                "eomData": ("eom.csv", b"\xff\xfe\x00bad", "text/csv"),
                "RadialData": ("radial.csv", RADIAL_CSV, "text/csv"),
            },
        )

        assert response.status_code == 400

    def test_matching_runs_in_threadpool(self, client, monkeypatch):
        calls = []
        original = reconcile_routes.run_in_threadpool

        async def recording_threadpool(func, *args, **kwargs):
            calls.append(func)
            return await original(func, *args, **kwargs)

        monkeypatch.setattr(reconcile_routes, "run_in_threadpool", recording_threadpool)

        assert upload(client).status_code == 201
        assert calls[0] is reconcile_routes.reconcile_exports

    def test_reconcile_exports(self):
        summary = reconcile_routes.reconcile_exports(EOM_CSV, RADIAL_CSV, date(2024, 1, 6))

        assert list(summary.missing_orders_by_date) == ["2024-01-05"]
        assert summary.total_missing_count == 1

    def test_archive_failure_keeps_summary(self, client, failing_archive):
        app.dependency_overrides[get_report_archive] = lambda: failing_archive

        response = upload(client)

        assert response.status_code == 503
        body = response.json()
        assert body["detail"] == "Error storing report data"
        assert body["summary"]["total_missing_count"] == 1


# ============================================
# Reports
# ============================================

class TestReports:
    """Test reading archived reports."""

    def test_get_report(self, client):
        report_id = upload(client).json()["report_id"]

        response = client.get(f"/report/{report_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == report_id
        assert body["dates"] == ["2024-01-05"]
        assert body["summary"]["total_missing_count"] == 1
        assert body["created_at_display"]

    def test_unknown_report(self, client):
        response = client.get("/report/99")

        assert response.status_code == 404
        assert response.json()["detail"] == "Report not found"

    def test_report_id_beyond_integer_range(self, client):
        upload(client)

        response = client.get("/report/99999999999999999999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Report not found"

    def test_list_reports_most_recent_first(self, client):
        upload(client)
        upload(client, radial=RADIAL_CSV + "XXXXX777,999\n")

        response = client.get("/report")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [r["id"] for r in body["reports"]] == [2, 1]
        assert [r["total_missing_count"] for r in body["reports"]] == [0, 1]

    def test_archive_errors_on_read(self, client, failing_archive):
        app.dependency_overrides[get_report_archive] = lambda: failing_archive

        assert client.get("/report/1").status_code == 500
        assert client.get("/report").status_code == 500


# ============================================
# Health
# ============================================

class TestHealth:
    """Test monitoring endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["archive"] == "ok"

    def test_not_ready_when_archive_fails(self, client, failing_archive):
        app.dependency_overrides[get_report_archive] = lambda: failing_archive

        assert client.get("/ready").status_code == 503

    def test_unavailable_archive_is_503(self, monkeypatch):
        def broken_archive():
            raise ArchiveError("cannot open archive")

        monkeypatch.setattr(dependencies, "get_archive", broken_archive)

        response = TestClient(app).get("/report")

        assert response.status_code == 503
