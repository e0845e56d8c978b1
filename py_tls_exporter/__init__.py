# DeprecationWarnings are silent since Python 2.7.
# The `default` filter only prints the first occurrence of matching warnings for
# each location where the warning is issued, so that we don't spam our users logs.
import warnings
warnings.simplefilter('default', DeprecationWarning)

# Export useful functions and types from private modules.
from py_tls_exporter._types import SpanKind  # noqa
from py_tls_exporter._types import StatusCode  # noqa
from py_tls_exporter.config import Destination  # noqa
from py_tls_exporter.config import DestinationOverride  # noqa
from py_tls_exporter.translator import translate  # noqa
from py_tls_exporter.uploader import TLSUploader  # noqa
