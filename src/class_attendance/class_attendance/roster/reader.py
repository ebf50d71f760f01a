from __future__ import annotations

import csv
import io
import logging
from pathlib import PurePath
from typing import Optional

import pandas as pd

from ..core.constants import ALLOWED_UPLOAD_EXTENSIONS, DEFAULT_MAX_UPLOAD_MB
from ..core.exceptions import UnreadableSpreadsheetError, ValidationError
from .model import Cell

logger = logging.getLogger(__name__)

UNREADABLE_MESSAGE = "Error procesando el archivo Excel. Verifique que el formato sea correcto."


def file_extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def validate_upload(filename: str, size_bytes: int, *, max_mb: int = DEFAULT_MAX_UPLOAD_MB) -> None:
    """Reject files that must never reach the normalizer."""

    if file_extension(filename) not in ALLOWED_UPLOAD_EXTENSIONS:
        raise ValidationError("Formato de archivo no válido. Solo se permiten archivos .xlsx, .xls o .csv")
    if size_bytes > max_mb * 1024 * 1024:
        raise ValidationError(f"El archivo es demasiado grande. Máximo {max_mb}MB permitido.")


def _is_absent(value: Cell) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _trim_trailing(cells: list[Cell]) -> list[Cell]:
    # A row is as long as its last filled cell, the same way sheet-to-array readers report it.
    end = len(cells)
    while end and _is_absent(cells[end - 1]):
        end -= 1
    return cells[:end]


def _read_excel(data: bytes, extension: str) -> list[list[Cell]]:
    engine: Optional[str] = "openpyxl" if extension == ".xlsx" else "xlrd"
    frame = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=str, engine=engine)
    table: list[list[Cell]] = []
    for values in frame.itertuples(index=False, name=None):
        table.append(_trim_trailing([None if pd.isna(v) else v for v in values]))
    return table


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _read_csv(data: bytes) -> list[list[Cell]]:
    text = _decode_text(data)
    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    return [_trim_trailing(list(row)) for row in csv.reader(io.StringIO(text), dialect)]


def read_table(data: bytes, filename: str) -> list[list[Cell]]:
    """Read the first sheet of an upload into rows of cells (header included)."""

    extension = file_extension(filename)
    try:
        if extension == ".csv":
            return _read_csv(data)
        if extension in (".xlsx", ".xls"):
            return _read_excel(data, extension)
    except Exception as e:
        logger.warning("unreadable upload %s: %s", filename, e)
        raise UnreadableSpreadsheetError(UNREADABLE_MESSAGE) from e

    raise UnreadableSpreadsheetError(UNREADABLE_MESSAGE)
