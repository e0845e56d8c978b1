from enum import Enum


class SpanKind(Enum):
    """Type of Span. Values follow the OTLP wire numbering."""

    UNSPECIFIED = 0
    INTERNAL = 1
    SERVER = 2
    CLIENT = 3
    PRODUCER = 4
    CONSUMER = 5


class StatusCode(Enum):
    """Status of a finished Span."""

    UNSET = 0
    OK = 1
    ERROR = 2
