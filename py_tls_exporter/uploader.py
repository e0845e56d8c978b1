import logging
from typing import Iterable
from typing import Optional
from typing import Sequence

from py_tls_exporter.config import apply_override
from py_tls_exporter.config import Destination
from py_tls_exporter.config import DestinationOverride
from py_tls_exporter.config import validate_destination
from py_tls_exporter.encoding import create_log_group_list
from py_tls_exporter.encoding import LogRecord
from py_tls_exporter.trace import ResourceSpans
from py_tls_exporter.translator import translate
from py_tls_exporter.transport import BaseIngestionClient
from py_tls_exporter.transport import SimpleHTTPIngestionClient

log = logging.getLogger("py_tls_exporter.uploader")


class TLSUploader:
    """Sends translated records to a TLS topic.

    The uploader only holds its default destination and the ingestion
    client, so a single instance can be shared across threads as long as
    the client can.

    .. code-block:: python

        uploader = TLSUploader.create(load_config_file('tls.yaml'))
        uploader.submit(translate(batch))
    """

    def __init__(
        self,
        destination: Destination,
        client: Optional[BaseIngestionClient] = None,
    ) -> None:
        """
        :param destination: default endpoint, topic and credentials.
        :type destination: Destination
        :param client: ingestion client, defaults to SimpleHTTPIngestionClient.
        :type client: BaseIngestionClient
        :raises ConfigurationError: if any destination field is empty.
        """
        self.destination = validate_destination(destination)
        self.client = client if client is not None else SimpleHTTPIngestionClient()

    @classmethod
    def create(
        cls,
        destination: Destination,
        client: Optional[BaseIngestionClient] = None,
    ) -> "TLSUploader":
        return cls(destination, client)

    def resolve_destination(
        self,
        override: Optional[DestinationOverride] = None,
    ) -> Destination:
        return apply_override(self.destination, override)

    def submit(
        self,
        records: Sequence[LogRecord],
        override: Optional[DestinationOverride] = None,
    ) -> None:
        """Sends all the records in a single PutLogs call.

        Errors raised by the client are not caught: retrying is up to the
        caller.

        :param records: translated records.
        :type records: list of LogRecord
        :param override: optional per-call topic and credentials. Ignored
            unless all four of its fields are set.
        :type override: DestinationOverride
        :raises TransmissionError: if the client fails to deliver.
        """
        destination = self.resolve_destination(override)
        log_group_list = create_log_group_list(records)
        log.debug(
            "Sending %d records to TLS topic %s",
            len(records),
            destination.topic_id,
        )
        self.client(destination, log_group_list)

    def export(
        self,
        batch: Iterable[ResourceSpans],
        override: Optional[DestinationOverride] = None,
    ) -> None:
        """Translates a batch of spans and submits the resulting records."""
        self.submit(translate(batch), override)
