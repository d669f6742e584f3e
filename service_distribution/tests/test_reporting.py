"""
Unit tests for reporting sinks.
"""

import io
import json
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.errors import ValidationError
from service_distribution.app.reporting.sinks import (
    CollectingSink, JsonLinesReportSink, TextReportSink, build_sink
)
from service_distribution.app.rules.models import City, Decision, DecisionRecord


class TestReportSinks:
    """Test cases for report sinks."""

    @pytest.fixture
    def record(self):
        """Create a sample decision record."""
        return DecisionRecord(
            distributor_name="DISTRIBUTOR1",
            city=City(code="CHIAO", name="Chicago", province="Illinois", country="United States"),
            decision=Decision.GRANTED,
            reason="country 'United States' is included by 'United States'"
        )

    def test_text_sink(self, record):
        """Test the text line format."""
        stream = io.StringIO()

        TextReportSink(stream).emit(record)

        assert stream.getvalue() == (
            "Distributor DISTRIBUTOR1 has permission to distribute in "
            "Chicago-Illinois-United States: YES\n"
        )

    def test_text_sink_denied_token(self, record):
        """Test denied decisions render as NO."""
        record.decision = Decision.DENIED

        assert TextReportSink.render(record).endswith(": NO")

    def test_json_sink(self, record):
        """Test one JSON object per line."""
        stream = io.StringIO()
        sink = JsonLinesReportSink(stream)

        sink.emit(record)
        sink.emit(record)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        payload = json.loads(lines[0])
        assert payload["distributor"] == "DISTRIBUTOR1"
        assert payload["city_code"] == "CHIAO"
        assert payload["country"] == "United States"
        assert payload["decision"] == "YES"

    def test_collecting_sink(self, record):
        """Test records are kept in order."""
        sink = CollectingSink()

        sink.emit(record)

        assert sink.records == [record]

    def test_build_sink(self):
        """Test sink selection by format name."""
        stream = io.StringIO()

        assert isinstance(build_sink("text", stream), TextReportSink)
        assert isinstance(build_sink("JSON", stream), JsonLinesReportSink)

        with pytest.raises(ValidationError):
            build_sink("xml", stream)
