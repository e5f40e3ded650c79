"""
CSV export of a guide result batch.

Every field is wrapped in double quotes, embedded quotes are doubled and
rows are joined with a bare newline. Absent optional fields become empty
quoted fields.
"""

import csv
import io
from typing import Iterable, Optional, Union

import structlog

from src.models.schemas import BusinessRecord, Category
from src.monitoring.metrics import CSV_EXPORT_TOTAL

logger = structlog.get_logger(__name__)

CSV_MEDIA_TYPE = "text/csv"

CSV_HEADER = [
    "Name",
    "Address",
    "Map Reference",
    "Facebook",
    "Instagram",
    "Twitter",
    "Phone",
    "Email",
    "Website",
    "Image Links",
    "Rating",
    "Review Count",
    "Source",
]


def _row(record: BusinessRecord) -> list[Optional[object]]:
    return [
        record.name,
        record.address,
        record.map_reference,
        record.social_links.facebook,
        record.social_links.instagram,
        record.social_links.twitter,
        record.contact.phone,
        record.contact.email,
        record.contact.website,
        "; ".join(record.images),
        f"{record.rating:.1f}",
        record.review_count,
        record.source.value,
    ]


def export_csv(records: Iterable[BusinessRecord], category: Optional[Category] = None) -> str:
    """
    Serialize records to CSV text with a fixed column order.

    Returns:
        Header plus one line per record, no trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    rows = 0
    for record in records:
        writer.writerow(_row(record))
        rows += 1

    label = category.value if category else "none"
    CSV_EXPORT_TOTAL.labels(category=label).inc()
    logger.info("csv_exported", category=label, rows=rows)
    return buffer.getvalue().rstrip("\n")


def csv_filename(category: Union[Category, str]) -> str:
    """Download name for an export, e.g. ``Eat_places.csv``."""
    name = category.value if isinstance(category, Category) else category
    return f"{name}_places.csv"
