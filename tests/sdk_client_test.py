from unittest import mock

import pytest

pytest.importorskip("volcengine.tls.TLSService")

from py_tls_exporter.encoding import create_log_group_list  # noqa: E402
from py_tls_exporter.encoding import LogRecord  # noqa: E402
from py_tls_exporter.exception import TransmissionError  # noqa: E402
from py_tls_exporter.sdk_client import VolcengineIngestionClient  # noqa: E402


class FakeTLSException(Exception):
    def __init__(self, http_code):
        super().__init__(f"HTTP {http_code}")
        self.http_code = http_code


@pytest.fixture
def log_group_list():
    return create_log_group_list([LogRecord(time=7, contents=[("Name", "op")])])


@pytest.fixture
def mock_service():
    with mock.patch("py_tls_exporter.sdk_client.TLSService") as mock_service:
        yield mock_service


def test_create_service_reveals_secret(mock_service, destination):
    VolcengineIngestionClient().create_service(destination)

    mock_service.assert_called_once_with(
        "https://tls-cn-beijing.volces.com",
        "default-ak",
        "default-sk",
        "cn-beijing",
    )


def test_put_logs(mock_service, destination, log_group_list):
    with mock.patch("py_tls_exporter.sdk_client.PutLogsRequest") as mock_request:
        VolcengineIngestionClient().put_logs(destination, log_group_list)

    topic_id, sent = mock_request.call_args[0]
    assert topic_id == "default-topic"
    (log,) = sent.LogGroups[0].Logs
    assert log.Time == 7
    assert [(c.Key, c.Value) for c in log.Contents] == [("Name", "op")]
    mock_service.return_value.put_logs.assert_called_once_with(
        mock_request.return_value
    )


def test_put_logs_sdk_error(mock_service, destination, log_group_list):
    mock_service.return_value.put_logs.side_effect = FakeTLSException(429)

    with mock.patch(
        "py_tls_exporter.sdk_client.TLSException", FakeTLSException
    ), mock.patch("py_tls_exporter.sdk_client.PutLogsRequest"):
        with pytest.raises(TransmissionError) as e:
            VolcengineIngestionClient().put_logs(destination, log_group_list)

    assert e.value.status_code == 429
    assert "default-topic" in str(e.value)


def test_put_logs_network_error(mock_service, destination, log_group_list):
    mock_service.return_value.put_logs.side_effect = OSError("unreachable")

    with mock.patch("py_tls_exporter.sdk_client.PutLogsRequest"):
        with pytest.raises(TransmissionError) as e:
            VolcengineIngestionClient().put_logs(destination, log_group_list)

    assert e.value.status_code is None
