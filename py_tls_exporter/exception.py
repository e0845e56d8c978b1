from typing import Optional


class TLSExporterError(Exception):
    """Base exception for py_tls_exporter errors."""


class ConfigurationError(TLSExporterError):
    """Raised when a destination is missing one of its required fields."""


class TransmissionError(TLSExporterError):
    """Raised when the remote ingestion call fails.

    :param message: human readable description of the failure.
    :type message: str
    :param status_code: HTTP status returned by the server, if any.
    :type status_code: int
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
