# order_recon/models/report.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, computed_field


# ============================================
# Reconciliation Summary
# ============================================

class MissingOrderEntry(BaseModel):
    """An EOM order line with no Radial counterpart."""

    order_number: Optional[str] = None
    product_option_value: Optional[str] = None


class ReconciliationSummary(BaseModel):
    """
    Missing orders grouped by ISO order date.

    Groups keep the order in which their dates first appeared in the EOM
    export. The total is always derived from the groups.
    """

    missing_orders_by_date: dict[str, list[MissingOrderEntry]] = Field(default_factory=dict)

    @computed_field
    @property
    def total_missing_count(self) -> int:
        return sum(len(entries) for entries in self.missing_orders_by_date.values())

    def sorted_dates(self) -> list[str]:
        """Dates in ascending order (ISO strings sort chronologically)."""
        return sorted(self.missing_orders_by_date)


# ============================================
# Archived Report
# ============================================

class ArchivedReport(BaseModel):
    """A reconciliation summary as stored in the archive."""

    id: int
    created_at: datetime
    summary: ReconciliationSummary

    class Config:
        from_attributes = True


# ============================================
# API Response Models
# ============================================

class ReconcileResponse(BaseModel):
    """Response after running and archiving a reconciliation."""

    success: bool
    report_id: int
    summary: ReconciliationSummary


class ReportResponse(BaseModel):
    """Single archived report."""

    id: int
    created_at: datetime
    created_at_display: str
    dates: list[str]
    summary: ReconciliationSummary


class ReportListItem(BaseModel):
    """Archived report as shown in the overview."""

    id: int
    created_at: datetime
    created_at_display: str
    total_missing_count: int


class ReportListResponse(BaseModel):
    """All archived reports, most recent first."""

    reports: list[ReportListItem]
    count: int
