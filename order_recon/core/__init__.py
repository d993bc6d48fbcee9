# order_recon/core/__init__.py

from order_recon.core.matching import reconcile, index_radial_records
from order_recon.core.dates import today_in_zone, format_report_timestamp
from order_recon.core.normalizers import (
    MissingDatasetError,
    parse_table,
    parse_order_date,
    load_eom_records,
    load_radial_records,
)

__all__ = [
    "reconcile",
    "index_radial_records",
    "today_in_zone",
    "format_report_timestamp",
    "MissingDatasetError",
    "parse_table",
    "parse_order_date",
    "load_eom_records",
    "load_radial_records",
]
