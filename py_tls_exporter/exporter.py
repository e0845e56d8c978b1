"""OpenTelemetry SDK integration.

.. code-block:: python

    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    uploader = TLSUploader.create(load_config_file('tls.yaml'))
    provider = TracerProvider()
    provider.add_span_processor(BatchSpanProcessor(TLSSpanExporter(uploader)))
"""
import logging
from collections import OrderedDict
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter
from opentelemetry.sdk.trace.export import SpanExportResult

from py_tls_exporter._types import SpanKind
from py_tls_exporter._types import StatusCode
from py_tls_exporter.config import DestinationOverride
from py_tls_exporter.exception import TLSExporterError
from py_tls_exporter.trace import Event
from py_tls_exporter.trace import Link
from py_tls_exporter.trace import ResourceSpans
from py_tls_exporter.trace import ScopeSpans
from py_tls_exporter.trace import Span
from py_tls_exporter.trace import SPAN_ID_SIZE
from py_tls_exporter.trace import Status
from py_tls_exporter.trace import TRACE_ID_SIZE
from py_tls_exporter.trace import TraceBatch
from py_tls_exporter.uploader import TLSUploader
from py_tls_exporter.util import int_to_id_bytes

log = logging.getLogger("py_tls_exporter.exporter")

_ResourceKey = Tuple[Tuple[str, str], ...]
_ScopeKey = Tuple[str, str]


def _trace_id(trace_id: int) -> bytes:
    return int_to_id_bytes(trace_id, TRACE_ID_SIZE)


def _span_id(span_id: int) -> bytes:
    return int_to_id_bytes(span_id, SPAN_ID_SIZE)


def convert_span(readable_span: ReadableSpan) -> Span:
    """Converts an OpenTelemetry SDK span to a py_tls_exporter Span."""
    context = readable_span.context
    parent = readable_span.parent
    status = readable_span.status

    return Span(
        name=readable_span.name,
        trace_id=_trace_id(context.trace_id) if context else None,
        span_id=_span_id(context.span_id) if context else None,
        parent_span_id=_span_id(parent.span_id) if parent else None,
        kind=SpanKind[readable_span.kind.name],
        start_time=readable_span.start_time,
        end_time=readable_span.end_time,
        attributes=dict(readable_span.attributes or {}),
        events=[
            Event(
                name=event.name,
                timestamp=event.timestamp,
                attributes=dict(event.attributes or {}),
            )
            for event in readable_span.events
        ],
        links=[
            Link(
                trace_id=_trace_id(link.context.trace_id),
                span_id=_span_id(link.context.span_id),
                attributes=dict(link.attributes or {}),
            )
            for link in readable_span.links
        ],
        status=Status(
            code=StatusCode[status.status_code.name],
            message=status.description or "",
        ),
        trace_state=context.trace_state.to_header() if context else "",
    )


def group_spans(spans: Sequence[ReadableSpan]) -> TraceBatch:
    """Groups spans by resource, then by instrumentation scope, keeping the
    order in which resources, scopes and spans are first seen.
    """
    resource_attributes: Dict[_ResourceKey, Dict[str, object]] = {}
    buckets: Dict[_ResourceKey, Dict[_ScopeKey, List[Span]]] = OrderedDict()
    for readable_span in spans:
        attributes = dict(readable_span.resource.attributes)
        resource_key = tuple(sorted((k, repr(v)) for k, v in attributes.items()))
        resource_attributes.setdefault(resource_key, attributes)

        scope = readable_span.instrumentation_scope
        scope_key = (scope.name, scope.version or "") if scope else ("", "")

        scopes = buckets.setdefault(resource_key, OrderedDict())
        scopes.setdefault(scope_key, []).append(convert_span(readable_span))

    return [
        ResourceSpans(
            attributes=resource_attributes[resource_key],
            scope_spans=[
                ScopeSpans(name=name, version=version, spans=scope_spans)
                for (name, version), scope_spans in scopes.items()
            ],
        )
        for resource_key, scopes in buckets.items()
    ]


class TLSSpanExporter(SpanExporter):
    """Exports OpenTelemetry SDK spans to a TLS topic.

    Retries, batching and timeouts are left to the span processor.
    """

    def __init__(
        self,
        uploader: TLSUploader,
        override: Optional[DestinationOverride] = None,
    ) -> None:
        self.uploader = uploader
        self.override = override
        self._shutdown = False

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if self._shutdown:
            log.warning("Exporter already shutdown, ignoring batch")
            return SpanExportResult.FAILURE

        try:
            self.uploader.export(group_spans(spans), self.override)
        except TLSExporterError as e:
            log.warning("Failed to export %d spans to TLS: %s", len(spans), e)
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        self._shutdown = True

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True
