"""Shared helper functions for step definitions."""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from warehouse_bdd.inventory_api import InventoryApiClient
from warehouse_bdd.reporting import StepLogger

_LIST_SEPARATOR = re.compile(r",\s*")


def table_rows(datatable: Sequence[Sequence[str]]) -> List[Dict[str, str]]:
    """Convert a pytest-bdd datatable into header-keyed rows.

    The first row of the table is the header. Cell values are stripped.
    """
    if not datatable:
        return []
    header = [cell.strip() for cell in datatable[0]]
    return [
        {key: cell.strip() for key, cell in zip(header, row)}
        for row in datatable[1:]
    ]


def split_list(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated cell ("LOT-1, LOT-2") into its parts."""
    if not value:
        return ()
    return tuple(part.strip() for part in _LIST_SEPARATOR.split(value) if part.strip())


def as_int(row: Dict[str, str], column: str) -> int:
    try:
        return int(row[column])
    except KeyError:
        raise AssertionError(f"Data table is missing column '{column}'") from None
    except ValueError:
        raise AssertionError(
            f"Column '{column}' must be a whole number, got '{row[column]}'"
        ) from None


def require_success(result: bool, message: str) -> None:
    """Fail the step when a page operation returned False."""
    if not result:
        print(f"✗ {message}")
        raise AssertionError(message)


def validate_items_via_api(
    api: InventoryApiClient, item_codes: Sequence[str], step_log: StepLogger
) -> bool:
    """GET every item from the inventory API and log its total quantity.

    Returns False if any call comes back with a non-200 status.
    """
    all_valid = True
    for item_code in item_codes:
        response = api.get_item(item_code)
        if response.status_code != 200:
            step_log.failed(
                f"API validation failed for {item_code}. Status: {response.status_code}"
            )
            all_valid = False
            continue
        record = api.extract_inventory(response)
        step_log.passed(f"Inventory validated for {item_code}: {record.total_quantity}")
        print(f"✓ {item_code}: totalQuantity={record.total_quantity}")
    return all_valid
