# order_recon/core/matching.py

"""
Core order matching engine.

Checks every EOM order line against the Radial export and reports the
lines Radial never received, grouped by order date.
"""

from datetime import date
from typing import Iterable
import logging

from order_recon.models import (
    EomRecord,
    RadialRecord,
    MatchKey,
    MissingOrderEntry,
    ReconciliationSummary,
    DEFAULT_ORDER_PREFIX_LENGTH,
)
from order_recon.core.normalizers import parse_order_date

logger = logging.getLogger(__name__)


def index_radial_records(
    radial_records: Iterable[RadialRecord],
    prefix_length: int = DEFAULT_ORDER_PREFIX_LENGTH,
) -> dict[MatchKey, RadialRecord]:
    """
    Index Radial rows by their match key.

    When several rows share a key the first one in export order is kept,
    which is the row a front-to-back scan would have found.
    """
    index: dict[MatchKey, RadialRecord] = {}
    for record in radial_records:
        key = record.match_key(prefix_length)
        if key is not None:
            index.setdefault(key, record)
    return index


def reconcile(
    eom_records: list[EomRecord],
    radial_records: list[RadialRecord],
    as_of: date,
    prefix_length: int = DEFAULT_ORDER_PREFIX_LENGTH,
) -> ReconciliationSummary:
    """
    Main reconciliation function.

    For each EOM line:
    1. Parse the order date (lines without a valid M/D/YYYY date are skipped)
    2. Look up (order number, UPC) among the Radial rows
    3. Unmatched lines dated `as_of` are still in flight and not reported
    4. Everything else unmatched is reported under its order date
    """
    index = index_radial_records(radial_records, prefix_length)

    missing_orders_by_date: dict[str, list[MissingOrderEntry]] = {}
    matched = 0
    pending = 0
    invalid_date = 0

    for eom in eom_records:
        order_date = parse_order_date(eom.order_date)
        if order_date is None:
            invalid_date += 1
            logger.debug("Skipping order %s with unparseable date %r", eom.order_number, eom.order_date)
            continue

        key = eom.match_key()
        if key is not None and key in index:
            matched += 1
            continue

        if order_date == as_of:
            pending += 1
            continue

        missing_orders_by_date.setdefault(order_date.isoformat(), []).append(
            MissingOrderEntry(
                order_number=eom.order_number,
                product_option_value=eom.product_option_value,
            )
        )

    summary = ReconciliationSummary(missing_orders_by_date=missing_orders_by_date)

    logger.info(
        "Reconciled %d EOM rows against %d Radial rows as of %s: "
        "%d matched, %d missing, %d pending, %d invalid date",
        len(eom_records), len(radial_records), as_of.isoformat(),
        matched, summary.total_missing_count, pending, invalid_date,
    )

    return summary
