from py_tls_exporter.testing.mock_client import MockIngestionClient  # noqa
