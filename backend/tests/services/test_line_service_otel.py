"""Tests for LineService OpenTelemetry instrumentation."""

import pytest
from fastapi import HTTPException
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import SpanKind, StatusCode
from sqlalchemy.ext.asyncio import AsyncSession
from subway.models.station import Station
from subway.schemas.lines import CreateLineRequest
from subway.services.line_service import LineService

from tests.helpers.otel import assert_span_status, spans_named


class TestLineServiceOtelSpans:
    """Span names, attributes and status for line use cases."""

    @pytest.mark.asyncio
    async def test_create_line_span_ok(
        self,
        otel_enabled_provider: tuple[TracerProvider, InMemorySpanExporter],
        db_session: AsyncSession,
        up_station: Station,
        down_station: Station,
    ) -> None:
        """create_line records a line.create span with the new id."""
        _, exporter = otel_enabled_provider
        request = CreateLineRequest(
            name="1호선", color="#0000FF", up_station_id=up_station.id, down_station_id=down_station.id, distance=10
        )

        response = await LineService(db_session).create_line(request)

        [span] = spans_named(exporter, "line.create")
        assert span.kind == SpanKind.INTERNAL
        assert_span_status(span, StatusCode.OK)
        assert span.attributes is not None
        assert span.attributes["peer.service"] == "line-service"
        assert span.attributes["line.name"] == "1호선"
        assert span.attributes["line.id"] == response.id

        # Station lookups are nested under the create span
        station_spans = spans_named(exporter, "station.get")
        assert len(station_spans) == 2
        assert all(s.parent is not None and s.parent.span_id == span.context.span_id for s in station_spans)

    @pytest.mark.asyncio
    async def test_get_missing_line_span_records_exception(
        self,
        otel_enabled_provider: tuple[TracerProvider, InMemorySpanExporter],
        db_session: AsyncSession,
    ) -> None:
        """A 404 marks the span as ERROR with an exception event."""
        _, exporter = otel_enabled_provider

        with pytest.raises(HTTPException):
            await LineService(db_session).get_line(99)

        [span] = spans_named(exporter, "line.get")
        assert_span_status(span, StatusCode.ERROR, check_exception=True)
        assert span.attributes is not None
        assert span.attributes["line.id"] == 99

    @pytest.mark.asyncio
    async def test_list_lines_span_counts_results(
        self,
        otel_enabled_provider: tuple[TracerProvider, InMemorySpanExporter],
        db_session: AsyncSession,
        line_factory,
    ) -> None:
        """line.list carries the number of lines returned."""
        _, exporter = otel_enabled_provider
        await line_factory("1호선")
        await line_factory("2호선")

        await LineService(db_session).find_all_lines()

        [span] = spans_named(exporter, "line.list")
        assert_span_status(span, StatusCode.OK)
        assert span.attributes is not None
        assert span.attributes["line.result_count"] == 2
