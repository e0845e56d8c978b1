import pytest

from py_tls_exporter import SpanKind
from py_tls_exporter import StatusCode
from py_tls_exporter.config import create_destination
from py_tls_exporter.testing import MockIngestionClient
from py_tls_exporter.trace import ResourceSpans
from py_tls_exporter.trace import ScopeSpans
from py_tls_exporter.trace import Span
from py_tls_exporter.trace import Status


@pytest.fixture
def destination():
    return create_destination(
        endpoint="https://tls-cn-beijing.volces.com",
        topic_id="default-topic",
        access_key="default-ak",
        secret_key="default-sk",
        region="cn-beijing",
    )


@pytest.fixture
def mock_client():
    return MockIngestionClient()


@pytest.fixture
def server_span():
    return Span(
        name="op",
        trace_id=bytes(16),
        span_id=bytes.fromhex("0102030405060708"),
        kind=SpanKind.SERVER,
        start_time=1000000000,
        end_time=2000000000,
        status=Status(code=StatusCode.OK),
    )


@pytest.fixture
def batch(server_span):
    return [
        ResourceSpans(
            attributes={"host.name": "h1", "service.name": "s1", "region": "x"},
            scope_spans=[ScopeSpans(name="lib", version="1.0", spans=[server_span])],
        )
    ]
