import logging
from typing import Dict
from typing import Iterable
from typing import List
from typing import Union

from typing_extensions import TypedDict

from py_tls_exporter._types import SpanKind
from py_tls_exporter._types import StatusCode
from py_tls_exporter.encoding import _types as fields
from py_tls_exporter.encoding._types import Content
from py_tls_exporter.encoding._types import LogRecord
from py_tls_exporter.trace import Attributes
from py_tls_exporter.trace import Event
from py_tls_exporter.trace import Link
from py_tls_exporter.trace import ResourceSpans
from py_tls_exporter.trace import ScopeSpans
from py_tls_exporter.trace import Span
from py_tls_exporter.util import dump_json
from py_tls_exporter.util import id_to_hex_or_empty_string
from py_tls_exporter.util import nanos_to_micros
from py_tls_exporter.util import nanos_to_millis
from py_tls_exporter.util import time_ns
from py_tls_exporter.util import to_json_value
from py_tls_exporter.util import value_as_string

log = logging.getLogger("py_tls_exporter.translator")

# Semantic convention keys lifted out of the resource attributes.
HOST_NAME_ATTRIBUTE = "host.name"
SERVICE_NAME_ATTRIBUTE = "service.name"

_KIND_NAMES: Dict[SpanKind, str] = {
    SpanKind.INTERNAL: "internal",
    SpanKind.CLIENT: "client",
    SpanKind.SERVER: "server",
    SpanKind.PRODUCER: "producer",
    SpanKind.CONSUMER: "consumer",
}
UNSPECIFIED_KIND_NAME = "unspecified"

_STATUS_CODE_NAMES: Dict[StatusCode, str] = {
    StatusCode.OK: "OK",
    StatusCode.ERROR: "ERROR",
}
UNSET_STATUS_CODE_NAME = "UNSET"


class JSONEvent(TypedDict):
    Name: str
    Time: int
    Attributes: Dict[str, object]


class JSONLink(TypedDict):
    SpanID: str
    TraceID: str
    Attributes: Dict[str, object]


def translate(batch: Iterable[ResourceSpans]) -> List[LogRecord]:
    """Translates a batch of spans into TLS log records, one per span.

    Records come out in the same order as the spans in the batch. A span
    whose record can't be built is logged and skipped; the rest of the batch
    is still translated.

    :param batch: spans grouped by resource and instrumentation scope.
    :type batch: list of ResourceSpans
    :returns: list of LogRecord
    """
    records: List[LogRecord] = []
    for resource_spans in batch:
        records.extend(_resource_spans_to_records(resource_spans))
    return records


def _resource_spans_to_records(resource_spans: ResourceSpans) -> List[LogRecord]:
    records = []
    resource_contents = resource_to_contents(resource_spans.attributes)
    for scope_spans in resource_spans.scope_spans:
        scope_contents = scope_to_contents(scope_spans)
        for span in scope_spans.spans:
            try:
                record = span_to_record(span, resource_contents, scope_contents)
            except Exception:
                log.exception(
                    "Unable to build a record for span %r",
                    getattr(span, "name", None),
                )
                continue
            records.append(record)
    return records


def resource_to_contents(attributes: Attributes) -> List[Content]:
    """Lifts host and service name out of the resource attributes and packs
    everything else in a JSON object of strings.
    """
    attributes = attributes or {}
    other_attributes = {
        key: value_as_string(value)
        for key, value in attributes.items()
        if key not in (HOST_NAME_ATTRIBUTE, SERVICE_NAME_ATTRIBUTE)
    }
    return [
        (fields.HOST_FIELD, value_as_string(attributes.get(HOST_NAME_ATTRIBUTE, ""))),
        (
            fields.SERVICE_NAME_FIELD,
            value_as_string(attributes.get(SERVICE_NAME_ATTRIBUTE, "")),
        ),
        (fields.RESOURCE_FIELD, dump_json(other_attributes)),
    ]


def scope_to_contents(scope_spans: ScopeSpans) -> List[Content]:
    return [
        (fields.OTLP_NAME_FIELD, scope_spans.name or ""),
        (fields.OTLP_VERSION_FIELD, scope_spans.version or ""),
    ]


def span_to_record(
    span: Span,
    resource_contents: List[Content],
    scope_contents: List[Content],
) -> LogRecord:
    """Builds the LogRecord of a single span.

    :param span: span to convert.
    :type span: Span
    :param resource_contents: contents shared by every span of the resource.
    :param scope_contents: contents shared by every span of the scope.
    :returns: LogRecord
    """
    end_time = span.end_time
    record_time = nanos_to_millis(end_time or time_ns())

    start_micros = nanos_to_micros(span.start_time)
    end_micros = nanos_to_micros(end_time)
    # Spans that ended before they started (unset end, clock skew) report
    # a zero duration instead of a wrapped-around one.
    duration_micros = max(end_micros - start_micros, 0)

    contents = list(resource_contents)
    contents.extend(scope_contents)
    contents.extend(
        [
            (fields.NAME_FIELD, span.name or ""),
            (fields.TRACE_ID_FIELD, id_to_hex_or_empty_string(span.trace_id)),
            (fields.SPAN_ID_FIELD, id_to_hex_or_empty_string(span.span_id)),
            (fields.TRACE_STATE_FIELD, span.trace_state),
            (
                fields.PARENT_SPAN_ID_FIELD,
                id_to_hex_or_empty_string(span.parent_span_id),
            ),
            (fields.KIND_FIELD, kind_to_short_string(span.kind)),
            (fields.START_TIME_FIELD, str(start_micros)),
            (fields.END_TIME_FIELD, str(end_micros)),
            (fields.DURATION_FIELD, str(duration_micros)),
            (fields.ATTRIBUTES_FIELD, attributes_to_string(span.attributes)),
            (fields.EVENTS_FIELD, events_to_string(span.events)),
            (fields.LINKS_FIELD, links_to_string(span.links)),
            (fields.STATUS_CODE_FIELD, status_code_to_short_string(span.status.code)),
            (fields.STATUS_DESCRIPTION_FIELD, span.status.message or ""),
        ]
    )
    return LogRecord(time=record_time, contents=contents)


def kind_to_short_string(kind: Union[SpanKind, int]) -> str:
    if not isinstance(kind, SpanKind):
        try:
            kind = SpanKind(kind)
        except ValueError:
            return UNSPECIFIED_KIND_NAME
    return _KIND_NAMES.get(kind, UNSPECIFIED_KIND_NAME)


def status_code_to_short_string(code: Union[StatusCode, int]) -> str:
    if not isinstance(code, StatusCode):
        try:
            code = StatusCode(code)
        except ValueError:
            return UNSET_STATUS_CODE_NAME
    return _STATUS_CODE_NAMES.get(code, UNSET_STATUS_CODE_NAME)


def _attributes_to_json(attributes: Attributes) -> Dict[str, object]:
    return {
        str(key): to_json_value(value) for key, value in (attributes or {}).items()
    }


def attributes_to_string(attributes: Attributes) -> str:
    return dump_json(_attributes_to_json(attributes))


def events_to_string(events: Iterable[Event]) -> str:
    json_events: List[JSONEvent] = [
        {
            "Name": event.name,
            "Time": event.timestamp or 0,
            "Attributes": _attributes_to_json(event.attributes),
        }
        for event in events
    ]
    return dump_json(json_events)


def links_to_string(links: Iterable[Link]) -> str:
    json_links: List[JSONLink] = [
        {
            "SpanID": id_to_hex_or_empty_string(link.span_id),
            "TraceID": id_to_hex_or_empty_string(link.trace_id),
            "Attributes": _attributes_to_json(link.attributes),
        }
        for link in links
    ]
    return dump_json(json_links)
