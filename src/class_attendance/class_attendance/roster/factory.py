from __future__ import annotations

from dataclasses import dataclass, field

from .layout import ColumnLayout
from .parsers.base import RejectRowParser, RowParser
from .parsers.four_column import FourColumnParser
from .parsers.single_column import SingleColumnParser
from .parsers.two_column import TwoColumnParser


@dataclass
class RowParserFactory:
    """Factory Pattern: one parser per column layout."""

    _parsers: dict[ColumnLayout, RowParser] = field(
        default_factory=lambda: {
            ColumnLayout.FOUR_COLUMN: FourColumnParser(),
            ColumnLayout.TWO_COLUMN: TwoColumnParser(),
            ColumnLayout.SINGLE_COLUMN: SingleColumnParser(),
        }
    )

    def for_layout(self, layout: ColumnLayout) -> RowParser:
        return self._parsers.get(layout) or RejectRowParser()
