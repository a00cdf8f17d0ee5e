"""
Non-fatal diagnostics.

Imperfect input never aborts a run: short rows get padded, bad numbers become
NaN, dangling references fall back, and so on. Each such recovery is recorded
here as an ``Anomaly`` so callers can inspect what was absorbed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from tabtree.logging import get_logger

log = get_logger(__name__)


class AnomalyKind(str, Enum):
    SHORT_ROW = "short_row"
    LONG_ROW = "long_row"
    BLANK_LINE = "blank_line"
    DUPLICATE_COLUMN = "duplicate_column"
    UNPARSEABLE_NUMBER = "unparseable_number"
    EMPTY_ID = "empty_id"
    DUPLICATE_ID = "duplicate_id"
    DANGLING_PARENT = "dangling_parent"
    DANGLING_CHILD = "dangling_child"
    MULTIPLE_PARENTS = "multiple_parents"
    CYCLE = "cycle"


# Per-cell anomalies can be very frequent; keep them out of the console.
_QUIET_KINDS = {AnomalyKind.UNPARSEABLE_NUMBER}


@dataclass(frozen=True)
class Anomaly:
    """
    One recovered data problem.

    Attributes:
        kind: What was recovered.
        message: Human readable description.
        lineno: 1-based source line, when the anomaly belongs to a row.
    """

    kind: AnomalyKind
    message: str
    lineno: Optional[int] = None

    def __str__(self) -> str:
        where = f"line {self.lineno}: " if self.lineno is not None else ""
        return f"[{self.kind.value}] {where}{self.message}"


@dataclass
class Diagnostics:
    """Collector shared by the reader, builder and assembler of one run."""

    anomalies: List[Anomaly] = field(default_factory=list)

    def record(
        self,
        kind: AnomalyKind,
        message: str,
        lineno: Optional[int] = None,
    ) -> Anomaly:
        anomaly = Anomaly(kind=kind, message=message, lineno=lineno)
        self.anomalies.append(anomaly)

        level = logging.DEBUG if kind in _QUIET_KINDS else logging.WARNING
        log.log(level, "%s", anomaly)
        return anomaly

    def of_kind(self, kind: AnomalyKind) -> List[Anomaly]:
        return [a for a in self.anomalies if a.kind == kind]

    def __len__(self) -> int:
        return len(self.anomalies)

    def __iter__(self) -> Iterator[Anomaly]:
        return iter(self.anomalies)
