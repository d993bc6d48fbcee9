# order_recon/core/normalizers.py

"""
Data normalization utilities for the order exports.

Turns raw delimited text into rows keyed by header name, and rows into
typed EOM / Radial records.
"""

from datetime import date, datetime
from typing import Any, Optional
import csv
import io
import logging
import re

from order_recon.models import EomRecord, RadialRecord

logger = logging.getLogger(__name__)

EOM_BANNER_LINES = 2
ORDER_DATE_FORMAT = "%m/%d/%Y"
ORDER_DATE_PATTERN = re.compile(r"\d{1,2}/\d{1,2}/\d{4}")


class MissingDatasetError(ValueError):
    """Raised when a dataset was not provided at all."""


def parse_table(raw_text: Optional[str], skip_leading_lines: int = 0) -> list[dict[str, Optional[str]]]:
    """
    Parse comma-delimited text into rows keyed by header name.

    The first `skip_leading_lines` lines are dropped, the next row is the
    header. Quoted fields may contain commas and newlines.

    Handles:
    - Short rows (trailing fields come back as None)
    - Long rows (fields past the header are ignored)
    - Empty lines (skipped)
    - Rows the csv module rejects (skipped with a warning)
    """
    if raw_text is None:
        raise MissingDatasetError("No data provided")
    if skip_leading_lines < 0:
        raise ValueError(f"skip_leading_lines must be non-negative, got {skip_leading_lines}")

    text = "\n".join(raw_text.split("\n")[skip_leading_lines:])
    reader = csv.reader(io.StringIO(text))

    header: Optional[list[str]] = None
    rows: list[dict[str, Optional[str]]] = []

    while True:
        try:
            values = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            logger.warning("Skipping malformed row at line %d: %s", reader.line_num, e)
            continue

        if not values:
            continue

        if header is None:
            header = [name.lstrip("\ufeff") for name in values]
            continue

        if len(values) > len(header):
            logger.debug(
                "Row at line %d has %d fields, header has %d; ignoring the extra fields",
                reader.line_num, len(values), len(header),
            )

        row: dict[str, Optional[str]] = {}
        for index, name in enumerate(header):
            if name in row:
                continue
            row[name] = values[index] if index < len(values) else None
        rows.append(row)

    return rows


def parse_order_date(value: Any) -> date | None:
    """
    Parse an EOM order date written as M/D/YYYY.

    Returns None for anything else, including impossible calendar dates.
    """
    if not isinstance(value, str):
        return None

    # strptime alone lets "1/ 5/2024" through
    value = value.strip()
    if not ORDER_DATE_PATTERN.fullmatch(value):
        return None

    try:
        return datetime.strptime(value, ORDER_DATE_FORMAT).date()
    except ValueError:
        return None


def load_eom_records(raw_text: Optional[str], skip_leading_lines: int = EOM_BANNER_LINES) -> list[EomRecord]:
    """Parse an EOM export into typed records."""
    return [EomRecord.from_row(row) for row in parse_table(raw_text, skip_leading_lines)]


def load_radial_records(raw_text: Optional[str], skip_leading_lines: int = 0) -> list[RadialRecord]:
    """Parse a Radial export into typed records."""
    return [RadialRecord.from_row(row) for row in parse_table(raw_text, skip_leading_lines)]
