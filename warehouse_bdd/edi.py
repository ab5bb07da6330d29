"""X12 EDI documents produced at the end of a warehouse flow."""

from datetime import datetime
from typing import Mapping, Optional, Set

SEGMENT_TERMINATOR = "~\n"


def build_944(
    shipment_id: str,
    lot_numbers: Mapping[str, Set[str]],
    when: Optional[datetime] = None,
) -> str:
    """Build a 944 (warehouse stock transfer receipt advice) document.

    One W04 line is written per SKU with its lot count. The SE segment
    counts the W04 lines plus the ST and W17 segments.
    """
    when = when or datetime.now()
    segments = [
        "ST*944*0001",
        f"W17*{shipment_id}*{when.strftime('%Y%m%d')}",
    ]
    for sku in sorted(lot_numbers):
        segments.append(f"W04*{sku}*{len(lot_numbers[sku])}")
    segments.append(f"SE*{len(lot_numbers) + 2}*0001")
    return "".join(segment + SEGMENT_TERMINATOR for segment in segments)
