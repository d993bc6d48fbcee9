# order_recon/routers/health.py

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from order_recon.database import ArchiveError, ReportArchive
from order_recon.dependencies import get_report_archive

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "order-recon",
    }


@router.get("/ready")
def readiness_check(archive: ReportArchive = Depends(get_report_archive)):
    """Readiness check - the archive must answer a listing."""
    try:
        archive.list_all()
    except ArchiveError:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "checks": {"archive": "error"}},
        )

    return {
        "status": "ready",
        "checks": {
            "archive": "ok",
        }
    }
