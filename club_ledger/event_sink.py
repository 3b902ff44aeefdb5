from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TextIO

from club_ledger.events import Record
from club_ledger.reporting import ReportLine, TableReport, render_line


class ReportSink(ABC):
    """
    Consumer of output lines, in the order the engine produces them.
    The engine must be able to run with sink=None (outcomes are still returned).
    """

    @abstractmethod
    def emit(self, line: ReportLine) -> None: ...


@dataclass
class InMemoryReportSink(ReportSink):
    """
    Simple sink for tests/demos.
    Keeps the structured lines so callers can inspect or render them later.
    """

    lines: list[ReportLine] = field(default_factory=list)

    def emit(self, line: ReportLine) -> None:
        self.lines.append(line)

    @property
    def records(self) -> list[Record]:
        return [line for line in self.lines if isinstance(line, Record)]

    @property
    def table_reports(self) -> list[TableReport]:
        return [line for line in self.lines if isinstance(line, TableReport)]

    def rendered(self) -> list[str]:
        return [render_line(line) for line in self.lines]


@dataclass
class TextReportSink(ReportSink):
    """Writes each line to a text stream as soon as it is emitted."""

    stream: TextIO
    written: int = field(default=0, init=False)

    def emit(self, line: ReportLine) -> None:
        self.stream.write(render_line(line) + "\n")
        self.written += 1
