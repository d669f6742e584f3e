"""
Reporting sinks for decision records.
"""

import json
import sys
from typing import List, Optional, TextIO

from shared.errors import ValidationError
from ..rules.models import DecisionRecord


class ReportSink:
    """Receives decision records in evaluation order."""

    def emit(self, record: DecisionRecord) -> None:
        raise NotImplementedError


class CollectingSink(ReportSink):
    """Keeps every record in memory."""

    def __init__(self):
        self.records: List[DecisionRecord] = []

    def emit(self, record: DecisionRecord) -> None:
        self.records.append(record)


class TextReportSink(ReportSink):
    """Writes one human readable line per record."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    @staticmethod
    def render(record: DecisionRecord) -> str:
        return (
            f"Distributor {record.distributor_name} has permission to distribute in "
            f"{record.city.label()}: {record.decision.value}"
        )

    def emit(self, record: DecisionRecord) -> None:
        self.stream.write(self.render(record) + "\n")


class JsonLinesReportSink(ReportSink):
    """Writes one JSON object per record."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    @staticmethod
    def render(record: DecisionRecord) -> str:
        return json.dumps({
            "distributor": record.distributor_name,
            "city_code": record.city.code,
            "city": record.city.name,
            "province": record.city.province,
            "country": record.city.country,
            "decision": record.decision.value,
            "reason": record.reason,
        })

    def emit(self, record: DecisionRecord) -> None:
        self.stream.write(self.render(record) + "\n")


SINK_FORMATS = {
    "text": TextReportSink,
    "json": JsonLinesReportSink,
}


def build_sink(report_format: str, stream: Optional[TextIO] = None) -> ReportSink:
    """Build the sink for a report format name."""
    sink_class = SINK_FORMATS.get(report_format.lower())
    if sink_class is None:
        raise ValidationError(
            f"Unknown report format '{report_format}'",
            {"supported": sorted(SINK_FORMATS)}
        )
    return sink_class(stream)
