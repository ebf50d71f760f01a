from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ..common.text import name_key
from ..core.exceptions import UnreadableSpreadsheetError
from .factory import RowParserFactory
from .layout import detect_layout
from .model import NormalizationResult, NormalizedRecord, RawRow

logger = logging.getLogger(__name__)


def duplicate_key(record: NormalizedRecord) -> str:
    return name_key(record.given_names, record.surnames)


class RosterNormalizer:
    """Turns the rows of one uploaded table into a clean, de-duplicated roster.

    Stateless: every call is an independent transformation, so one instance can
    be shared freely.
    """

    def __init__(self, parser_factory: Optional[RowParserFactory] = None):
        self._factory = parser_factory or RowParserFactory()

    def normalize_table(self, table: Any) -> NormalizationResult:
        """Normalize a 2-D array whose row 0 is a header."""

        if table is None or isinstance(table, (str, bytes)) or not isinstance(table, Sequence):
            raise UnreadableSpreadsheetError(
                "Formato de hoja de cálculo ilegible. Verifique que el archivo sea correcto."
            )

        rows = []
        for position in range(1, len(table)):
            cells = table[position]
            if not isinstance(cells, (list, tuple)):
                cells = ()
            rows.append(RawRow(position=position, cells=cells))
        return self.normalize_rows(rows)

    def normalize_rows(self, rows: Iterable[RawRow]) -> NormalizationResult:
        records: list[NormalizedRecord] = []
        seen: set[str] = set()
        duplicates = 0
        rejected = 0

        for row in sorted(rows, key=lambda r: r.position):
            parser = self._factory.for_layout(detect_layout(row.cells))
            parsed = parser.parse(row.cells)
            if parsed is None:
                rejected += 1
                continue

            record = NormalizedRecord(
                given_names=parsed.given_names,
                surnames=parsed.surnames,
                original_order=row.position,
            )
            key = duplicate_key(record)
            if key in seen:
                duplicates += 1
                continue

            seen.add(key)
            records.append(record)

        logger.debug(
            "roster normalized: kept=%s duplicates=%s rejected=%s", len(records), duplicates, rejected
        )
        return NormalizationResult(records=records, duplicates_skipped=duplicates)


def normalize_table(table: Any) -> NormalizationResult:
    return RosterNormalizer().normalize_table(table)
