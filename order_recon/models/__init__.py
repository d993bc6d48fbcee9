# order_recon/models/__init__.py

from order_recon.models.records import (
    MatchKey,
    EomRecord,
    RadialRecord,
    DEFAULT_ORDER_PREFIX_LENGTH,
)
from order_recon.models.report import (
    MissingOrderEntry,
    ReconciliationSummary,
    ArchivedReport,
    ReconcileResponse,
    ReportResponse,
    ReportListItem,
    ReportListResponse,
)

__all__ = [
    # Records
    "MatchKey",
    "EomRecord",
    "RadialRecord",
    "DEFAULT_ORDER_PREFIX_LENGTH",
    # Report
    "MissingOrderEntry",
    "ReconciliationSummary",
    "ArchivedReport",
    "ReconcileResponse",
    "ReportResponse",
    "ReportListItem",
    "ReportListResponse",
]
