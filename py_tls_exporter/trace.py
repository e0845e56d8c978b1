from typing import Any
from typing import List
from typing import Mapping
from typing import NamedTuple
from typing import Optional
from typing import Sequence
from typing import Union

from py_tls_exporter._types import SpanKind
from py_tls_exporter._types import StatusCode


AttributeValue = Any
Attributes = Mapping[str, AttributeValue]

TRACE_ID_SIZE = 16
SPAN_ID_SIZE = 8

EMPTY_TRACE_ID = bytes(TRACE_ID_SIZE)
EMPTY_SPAN_ID = bytes(SPAN_ID_SIZE)


class Event(NamedTuple):
    name: str
    timestamp: int
    attributes: Attributes = {}


class Link(NamedTuple):
    trace_id: bytes
    span_id: bytes
    attributes: Attributes = {}


class Status(NamedTuple):
    code: Union[StatusCode, int] = StatusCode.UNSET
    message: str = ""


class Span:
    """A finished span, as handed over by the pipeline host."""

    def __init__(
        self,
        name: str,
        trace_id: Optional[bytes] = None,
        span_id: Optional[bytes] = None,
        parent_span_id: Optional[bytes] = None,
        kind: Union[SpanKind, int] = SpanKind.UNSPECIFIED,
        start_time: Optional[int] = None,
        end_time: Optional[int] = None,
        attributes: Optional[Attributes] = None,
        events: Optional[Sequence[Event]] = None,
        links: Optional[Sequence[Link]] = None,
        status: Optional[Status] = None,
        trace_state: str = "",
    ):
        """Creates a new Span.

        :param name: Name of the span.
        :type name: str
        :param trace_id: 16-byte trace id. Defaults to all zeros.
        :type trace_id: bytes
        :param span_id: 8-byte span id. Defaults to all zeros.
        :type span_id: bytes
        :param parent_span_id: 8-byte parent span id, None for root spans.
        :type parent_span_id: bytes
        :param kind: Span type (client, server, internal, etc...)
        :type kind: SpanKind
        :param start_time: start timestamp in nanoseconds since epoch.
            0 or None means unset.
        :type start_time: int
        :param end_time: end timestamp in nanoseconds since epoch.
            0 or None means unset.
        :type end_time: int
        :param attributes: Optional dict of span attributes.
        :type attributes: dict
        :param events: Optional list of timestamped events.
        :type events: list of Event
        :param links: Optional list of links to other spans.
        :type links: list of Link
        :param status: span status. Defaults to UNSET with no message.
        :type status: Status
        :param trace_state: raw W3C tracestate header value.
        :type trace_state: str
        """
        self.name = name
        self.trace_id = trace_id or EMPTY_TRACE_ID
        self.span_id = span_id or EMPTY_SPAN_ID
        self.parent_span_id = parent_span_id or EMPTY_SPAN_ID
        self.kind = kind
        self.start_time = start_time or 0
        self.end_time = end_time or 0
        self.attributes = attributes or {}
        self.events = events or []
        self.links = links or []
        self.status = status or Status()
        self.trace_state = trace_state or ""

    def __eq__(self, other: object) -> bool:  # pragma: no cover
        return self.__dict__ == other.__dict__

    def __repr__(self) -> str:  # pragma: no cover
        return f"Span({self.__dict__!r})"


class ScopeSpans(NamedTuple):
    """Spans produced by one instrumentation scope."""

    name: str
    version: str
    spans: Sequence[Span]


class ResourceSpans(NamedTuple):
    """Spans produced by one resource, grouped by instrumentation scope."""

    attributes: Attributes
    scope_spans: Sequence[ScopeSpans]


TraceBatch = List[ResourceSpans]
