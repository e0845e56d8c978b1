import logging
from typing import Optional
from urllib.error import HTTPError
from urllib.error import URLError
from urllib.parse import urlencode
from urllib.request import Request
from urllib.request import urlopen

from py_tls_exporter.config import Destination
from py_tls_exporter.config import OpaqueString
from py_tls_exporter.encoding.protobuf import encode_log_group_list
from py_tls_exporter.encoding.protobuf import LogGroupList
from py_tls_exporter.exception import TransmissionError
from py_tls_exporter.signer import sign_request

log = logging.getLogger("py_tls_exporter.transport")

TLS_API_VERSION = "0.3.0"
PUT_LOGS_PATH = "/PutLogs"
PROTOBUF_CONTENT_TYPE = "application/x-protobuf"


class BaseIngestionClient:
    def put_logs(
        self,
        destination: Destination,
        log_group_list: LogGroupList,
    ) -> None:  # pragma: no cover
        """Delivers a LogGroupList to the destination's topic.

        This is the only capability py_tls_exporter needs from TLS. Implement
        it to plug in a different client, e.g. one built on the official SDK.

        :param destination: resolved endpoint, topic and credentials.
        :type destination: Destination
        :param log_group_list: the delivery unit.
        :type log_group_list: LogGroupList
        :raises TransmissionError: if the records couldn't be delivered.
        """
        raise NotImplementedError("put_logs is not implemented")

    def __call__(self, destination: Destination, log_group_list: LogGroupList) -> None:
        """Internal wrapper around `put_logs`. Do not override."""
        self.put_logs(destination, log_group_list)


class SimpleHTTPIngestionClient(BaseIngestionClient):
    def __init__(
        self,
        timeout: Optional[float] = None,
        api_version: str = TLS_API_VERSION,
    ) -> None:
        """A simple HTTP client for the TLS PutLogs API.

        This is not production ready (no retries, no compression, a new
        connection per call) but it's enough for low volumes and for trying
        out py_tls_exporter.

        :param timeout: socket timeout in seconds. None blocks forever.
        :type timeout: float
        :param api_version: value of the x-tls-apiversion header.
        :type api_version: str
        """
        super().__init__()
        self.timeout = timeout
        self.api_version = api_version

    def _get_url(self, destination: Destination) -> str:
        endpoint = destination.endpoint.rstrip("/")
        if "://" not in endpoint:
            endpoint = f"https://{endpoint}"
        query = urlencode({"TopicId": destination.topic_id})
        return f"{endpoint}{PUT_LOGS_PATH}?{query}"

    def build_request(
        self,
        destination: Destination,
        log_group_list: LogGroupList,
    ) -> Request:
        payload = encode_log_group_list(log_group_list)
        url = self._get_url(destination)
        headers = sign_request(
            method="POST",
            url=url,
            headers={
                "Content-Type": PROTOBUF_CONTENT_TYPE,
                "x-tls-apiversion": self.api_version,
            },
            body=payload,
            access_key=destination.access_key,
            secret_key=OpaqueString(destination.secret_key).reveal(),
            region=destination.region,
        )
        return Request(url, payload, headers, method="POST")

    def put_logs(
        self,
        destination: Destination,
        log_group_list: LogGroupList,
    ) -> None:
        req = self.build_request(destination, log_group_list)
        try:
            with urlopen(req, timeout=self.timeout) as response:
                status = response.getcode()
        except HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise TransmissionError(
                f"TLS PutLogs to topic {destination.topic_id} failed "
                f"with HTTP {e.code}: {body}",
                status_code=e.code,
            ) from e
        except (URLError, OSError) as e:
            raise TransmissionError(
                f"TLS PutLogs to topic {destination.topic_id} failed: {e}"
            ) from e

        if status != 200:
            raise TransmissionError(
                f"TLS PutLogs to topic {destination.topic_id} "
                f"returned HTTP {status}",
                status_code=status,
            )
        log.debug("Delivered logs to TLS topic %s", destination.topic_id)
