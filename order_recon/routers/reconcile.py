# order_recon/routers/reconcile.py

"""
Reconciliation routes.

Upload the two exports, run the matching engine, archive the result and
read archived reports back.
"""

from datetime import date
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from order_recon.config import get_settings
from order_recon.core.dates import format_report_timestamp
from order_recon.core.matching import reconcile
from order_recon.core.normalizers import (
    MissingDatasetError,
    load_eom_records,
    load_radial_records,
)
from order_recon.database import ArchiveError, ReportArchive
from order_recon.dependencies import get_as_of_date, get_report_archive
from order_recon.models import (
    ReconcileResponse,
    ReconciliationSummary,
    ReportListItem,
    ReportListResponse,
    ReportResponse,
)

logger = logging.getLogger(__name__)

settings = get_settings()
router = APIRouter()


async def _read_upload(upload: UploadFile | None, field: str) -> str:
    if upload is None:
        raise HTTPException(status_code=400, detail=f"Missing upload: {field}")

    raw = await upload.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail=f"{field} is not valid UTF-8 text")


def reconcile_exports(eom_text: str, radial_text: str, as_of: date) -> ReconciliationSummary:
    """Parse both exports and run the matching engine (blocking)."""
    eom_records = load_eom_records(eom_text, settings.eom_skip_lines)
    radial_records = load_radial_records(radial_text, settings.radial_skip_lines)

    return reconcile(
        eom_records,
        radial_records,
        as_of,
        prefix_length=settings.order_prefix_length,
    )


# ============================================
# Main Reconciliation Endpoint
# ============================================

@router.post("/upload", response_model=ReconcileResponse, status_code=status.HTTP_201_CREATED)
async def upload_exports(
    eom_data: UploadFile | None = File(None, alias="eomData"),
    radial_data: UploadFile | None = File(None, alias="RadialData"),
    as_of: date = Depends(get_as_of_date),
    archive: ReportArchive = Depends(get_report_archive),
):
    """
    Reconcile an EOM export against a Radial export.

    1. Parses both uploads (the EOM banner lines are dropped)
    2. Runs the matching engine as of today in the report time zone
    3. Archives the summary and returns its report id
    """
    eom_text = await _read_upload(eom_data, "eomData")
    radial_text = await _read_upload(radial_data, "RadialData")

    # Parsing and matching are CPU bound, keep them off the event loop
    try:
        summary = await run_in_threadpool(reconcile_exports, eom_text, radial_text, as_of)
    except MissingDatasetError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        report_id = await run_in_threadpool(archive.create, summary)
    except ArchiveError as e:
        logger.error("Failed to archive reconciliation: %s", e)
        # The summary is still returned so the caller can keep or resubmit it
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": "Error storing report data",
                "summary": summary.model_dump(mode="json"),
            },
        )

    return ReconcileResponse(success=True, report_id=report_id, summary=summary)


# ============================================
# Archived Reports
# ============================================

@router.get("/report/{report_id}", response_model=ReportResponse)
def get_report(report_id: int, archive: ReportArchive = Depends(get_report_archive)):
    """Get a single archived report."""
    try:
        report = archive.get_by_id(report_id)
    except ArchiveError as e:
        logger.error("Failed to read report %d: %s", report_id, e)
        raise HTTPException(status_code=500, detail="Error retrieving report")

    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")

    return ReportResponse(
        id=report.id,
        created_at=report.created_at,
        created_at_display=format_report_timestamp(report.created_at, settings.report_timezone),
        dates=report.summary.sorted_dates(),
        summary=report.summary,
    )


@router.get("/report", response_model=ReportListResponse)
def list_reports(archive: ReportArchive = Depends(get_report_archive)):
    """Overview of all archived reports, most recent first."""
    try:
        reports = archive.list_all()
    except ArchiveError as e:
        logger.error("Failed to list reports: %s", e)
        raise HTTPException(status_code=500, detail="Error retrieving reports")

    items = [
        ReportListItem(
            id=report.id,
            created_at=report.created_at,
            created_at_display=format_report_timestamp(report.created_at, settings.report_timezone),
            total_missing_count=report.summary.total_missing_count,
        )
        for report in reports
    ]

    return ReportListResponse(reports=items, count=len(items))
