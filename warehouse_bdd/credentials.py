"""Credential fixtures read from an Excel workbook.

The sheet layout is a header row followed by one row per account; the first
column holds the serial number used to address a row:

    | S.No | Username | Password |
    | 1    | picker01 | secret   |
"""

from pathlib import Path
from typing import Dict, Optional

from openpyxl import load_workbook


def _header_index(header_row, header: str) -> Optional[int]:
    wanted = header.strip().lower()
    for idx, cell in enumerate(header_row):
        if cell is not None and str(cell).strip().lower() == wanted:
            return idx
    return None


def read_cell(path: Path, serial_number: int, header: str, sheet: str = "Sheet1") -> str:
    """Return the cell at row ``serial_number`` under column ``header``.

    :param path: workbook path
    :param serial_number: value of the first column identifying the row
    :param header: column header, matched case-insensitively
    :param sheet: worksheet name
    :raises ValueError: if the row or the column is not found
    """
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        rows = workbook[sheet].iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            raise ValueError(f"Sheet '{sheet}' in {path} is empty")

        column = _header_index(header_row, header)
        if column is None:
            raise ValueError(f"Column '{header}' not found in sheet '{sheet}'")

        for row in rows:
            if row and row[0] is not None and str(row[0]).strip() == str(serial_number):
                value = row[column] if column < len(row) else None
                return "" if value is None else str(value)
        raise ValueError(f"Row with serial number {serial_number} not found in sheet '{sheet}'")
    finally:
        workbook.close()


def read_credentials(path: Path, sheet: str = "Sheet1") -> Dict[str, str]:
    """Return ``{username: password}`` for every account row."""
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        rows = workbook[sheet].iter_rows(values_only=True)
        header_row = next(rows, None) or ()
        user_col = _header_index(header_row, "Username")
        pass_col = _header_index(header_row, "Password")
        if user_col is None or pass_col is None:
            raise ValueError(f"Sheet '{sheet}' needs Username and Password columns")

        credentials: Dict[str, str] = {}
        for row in rows:
            if not row or row[user_col] is None:
                continue
            password = row[pass_col] if pass_col < len(row) else None
            credentials[str(row[user_col])] = "" if password is None else str(password)
        return credentials
    finally:
        workbook.close()
