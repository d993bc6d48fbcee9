# order_recon/dependencies.py

"""
Request dependencies for FastAPI.

The archive and the as-of date are injected so tests can override them
with `app.dependency_overrides`.
"""

from datetime import date

from fastapi import Depends, HTTPException, status

from order_recon.config import Settings, get_settings
from order_recon.core.dates import today_in_zone
from order_recon.database import ArchiveError, ReportArchive, get_archive


def get_report_archive() -> ReportArchive:
    """Return the configured archive, or 503 if it cannot be opened."""
    try:
        return get_archive()
    except ArchiveError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )


def get_as_of_date(settings: Settings = Depends(get_settings)) -> date:
    """Today in the reference time zone."""
    return today_in_zone(settings.report_timezone)
