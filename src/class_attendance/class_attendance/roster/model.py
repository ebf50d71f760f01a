from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

# A spreadsheet cell as handed over by the file reader: a value or its absence.
Cell = Optional[Union[str, int, float]]


@dataclass(frozen=True)
class RawRow:
    """One data line of an uploaded table.

    ``position`` is the row index in the source file (header is row 0, so the
    first data row is 1).
    """

    position: int
    cells: Sequence[Cell]


@dataclass(frozen=True)
class ParsedName:
    given_names: str
    surnames: str


@dataclass(frozen=True)
class NormalizedRecord:
    given_names: str
    surnames: str
    original_order: int


@dataclass(frozen=True)
class NormalizationResult:
    records: list[NormalizedRecord] = field(default_factory=list)
    duplicates_skipped: int = 0
