from typing import List
from typing import NamedTuple
from typing import Tuple


# Resource contents, shared by every record of a resource.
HOST_FIELD = "host"
SERVICE_NAME_FIELD = "service_name"
RESOURCE_FIELD = "resource"

# Shortcuts for the instrumentation scope name and version.
OTLP_NAME_FIELD = "OTLPName"
OTLP_VERSION_FIELD = "OTLPVersion"

NAME_FIELD = "Name"
TRACE_ID_FIELD = "TraceID"
SPAN_ID_FIELD = "SpanID"
TRACE_STATE_FIELD = "TraceState"
PARENT_SPAN_ID_FIELD = "ParentSpanID"
KIND_FIELD = "Kind"
START_TIME_FIELD = "Start"
END_TIME_FIELD = "End"
DURATION_FIELD = "Duration"
ATTRIBUTES_FIELD = "Attributes"
EVENTS_FIELD = "Events"
LINKS_FIELD = "Links"
TIME_FIELD = "Time"
STATUS_CODE_FIELD = "StatusCode"
STATUS_DESCRIPTION_FIELD = "StatusDescription"


Content = Tuple[str, str]


class LogRecord(NamedTuple):
    """One flattened span, ready to be sent to TLS.

    :param time: record timestamp in milliseconds since epoch.
    :param contents: ordered list of (key, value) pairs.
    """

    time: int
    contents: List[Content]

    def get(self, key: str) -> str:
        """Returns the value of the first content with the given key."""
        for content_key, value in self.contents:
            if content_key == key:
                return value
        raise KeyError(key)
