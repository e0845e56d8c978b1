import logging

from volcengine.tls import log_pb2
from volcengine.tls.tls_exception import TLSException
from volcengine.tls.tls_requests import PutLogsRequest
from volcengine.tls.TLSService import TLSService

from py_tls_exporter.config import Destination
from py_tls_exporter.config import OpaqueString
from py_tls_exporter.encoding.protobuf import encode_log_group_list
from py_tls_exporter.encoding.protobuf import LogGroupList
from py_tls_exporter.exception import TransmissionError
from py_tls_exporter.transport import BaseIngestionClient

log = logging.getLogger("py_tls_exporter.sdk_client")


class VolcengineIngestionClient(BaseIngestionClient):
    """Delivers logs with the official Volcengine SDK (``pip install
    py_tls_exporter[sdk]``).

    Prefer this client in production, request signing is left to the SDK.
    """

    def create_service(self, destination: Destination) -> TLSService:
        return TLSService(
            destination.endpoint,
            destination.access_key,
            OpaqueString(destination.secret_key).reveal(),
            destination.region,
        )

    def put_logs(
        self,
        destination: Destination,
        log_group_list: LogGroupList,
    ) -> None:
        sdk_log_group_list = log_pb2.LogGroupList()
        sdk_log_group_list.ParseFromString(encode_log_group_list(log_group_list))
        service = self.create_service(destination)
        try:
            service.put_logs(PutLogsRequest(destination.topic_id, sdk_log_group_list))
        except (TLSException, OSError) as e:
            raise TransmissionError(
                f"TLS PutLogs to topic {destination.topic_id} failed: {e}",
                status_code=getattr(e, "http_code", None),
            ) from e
        log.debug("Delivered logs to TLS topic %s", destination.topic_id)
