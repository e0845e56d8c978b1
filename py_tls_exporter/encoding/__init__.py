from py_tls_exporter.encoding._types import LogRecord  # noqa: F401
from py_tls_exporter.encoding.protobuf import create_log_group_list  # noqa: F401
from py_tls_exporter.encoding.protobuf import encode_log_group_list  # noqa: F401
