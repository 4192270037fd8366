"""
CSV export service for spin records.

Generates the CSV report of all spins (one row per participant) used by the
export endpoint and the offline export script.

Security:
- CSV Injection Prevention: Quote-escapes text fields that could run as formulas
- Security Logging: Logs when a value is escaped
"""

from __future__ import annotations

import csv
import logging
import re
from io import StringIO
from typing import FrozenSet, Iterable, List, Optional, Pattern, Sequence

from domain.spin import SpinRecord

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "ID",
    "Name",
    "Email",
    "Phone",
    "Domain",
    "Discount",
    "CouponCode",
    "CreatedAt",
]

FORMULA_CHARS: FrozenSet[str] = frozenset({"=", "+", "-", "@", "\t", "\r"})

ESCAPE_PREFIX = "'"

# A dialable number such as "+91 98765 43210" is data, not a formula.
PHONE_NUMBER_PATTERN: Pattern[str] = re.compile(r"\+[\d -]+")


def sanitize_csv_field(
    value: str | None,
    field_name: str = "unknown",
    safe_pattern: Optional[Pattern[str]] = None,
) -> str:
    """
    Sanitize field to prevent CSV injection attacks with security logging.

    Values starting with a character that can trigger formula execution in
    Excel/Sheets are prefixed with a single quote, so spreadsheets show them as
    text. Nothing is removed: dropping the leading quote gives back the stored
    value. A warning is logged for security monitoring whenever a value is
    escaped.

    Args:
        value: Field value to sanitize
        field_name: Name of the field being sanitized (for logging)
        safe_pattern: Values matching this pattern are written unchanged

    Returns:
        Sanitized string safe for CSV export

    Example:
        sanitize_csv_field("=1+1", "name")
        # Returns "'=1+1" and logs warning about escaped "=" character

        sanitize_csv_field("+91 98765 43210", "phone", PHONE_NUMBER_PATTERN)
        # Returns "+91 98765 43210" (unchanged, no logging)
    """
    if value is None or value == "":
        return ""

    text = str(value)

    if text[0] not in FORMULA_CHARS:
        return text
    if safe_pattern is not None and safe_pattern.fullmatch(text):
        return text

    logger.warning(
        f"CSV injection character escaped in field '{field_name}'",
        extra={
            "field_name": field_name,
            "leading_character": text[0],
            "original_value": text[:100],
            "modification_type": "csv_injection_prevention",
        },
    )

    return ESCAPE_PREFIX + text


def sort_newest_first(records: Iterable[SpinRecord]) -> List[SpinRecord]:
    """Order records by created_at descending (ties keep storage order)."""
    return sorted(records, key=lambda record: record.created_at, reverse=True)


def spin_to_csv_row(record: SpinRecord) -> list:
    """
    Convert a SpinRecord to a CSV row.

    ID and Discount stay numeric so that they are written unquoted.
    """
    return [
        record.id,
        sanitize_csv_field(record.name, "name"),
        sanitize_csv_field(record.email, "email"),
        sanitize_csv_field(record.phone, "phone", PHONE_NUMBER_PATTERN),
        sanitize_csv_field(record.domain, "domain"),
        record.discount,
        sanitize_csv_field(record.coupon_code, "coupon_code"),
        record.created_at.isoformat(),
    ]


def write_spins_csv(records: Sequence[SpinRecord], output) -> int:
    """
    Write the CSV report to a text stream.

    The header is written bare; string fields are quoted, numeric fields are not.

    Returns:
        Number of data rows written
    """
    csv.writer(output).writerow(CSV_COLUMNS)
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC)

    for record in records:
        writer.writerow(spin_to_csv_row(record))

    return len(records)


def generate_spins_csv(records: Sequence[SpinRecord]) -> str:
    """
    Generate the CSV report for the given records, newest first.

    Returns:
        CSV content as a string

    Example:
        csv_content = generate_spins_csv(repository.load_all())
        return Response(content=csv_content, media_type="text/csv")
    """
    output = StringIO()
    write_spins_csv(sort_newest_first(records), output)
    return output.getvalue()


__all__ = [
    "CSV_COLUMNS",
    "generate_spins_csv",
    "sanitize_csv_field",
    "sort_newest_first",
    "spin_to_csv_row",
    "write_spins_csv",
]
