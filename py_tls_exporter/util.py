import base64
import json
import math
import time
from typing import Any
from typing import Optional


def id_to_hex_or_empty_string(id_bytes: Optional[bytes]) -> str:
    """Converts a trace or span id to lower-case hex.

    Examples:
        b'\\x01\\x02\\x03\\x04\\x05\\x06\\x07\\x08' => '0102030405060708'
        b'\\x00' * 8 => ''

    :param id_bytes: raw id bytes.
    :returns: hex string, or an empty string for a missing or all-zero id.
    """
    if not id_bytes or not any(id_bytes):
        return ""
    return bytes(id_bytes).hex()


def int_to_id_bytes(int_id: int, size: int) -> bytes:
    """Converts an integer id (as stored by the OpenTelemetry SDK) to
    big-endian bytes of the given size.
    """
    return int_id.to_bytes(size, "big")


def nanos_to_millis(timestamp: int) -> int:
    return timestamp // 1000000


def nanos_to_micros(timestamp: int) -> int:
    return timestamp // 1000


def time_ns() -> int:
    return time.time_ns()


def to_json_value(value: Any) -> Any:
    """Coerces an attribute value to something json.dumps accepts without
    producing invalid JSON.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, dict):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    return str(value)


def dump_json(value: Any) -> str:
    """Compact JSON with sorted keys so that output is reproducible."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), allow_nan=False)


def value_as_string(value: Any) -> str:
    """Returns the string representation of an attribute value.

    Strings are returned verbatim, booleans as `true`/`false`, integral floats
    without a fractional part, bytes base64 encoded and lists or maps as
    compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return to_json_value(value)
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (dict, list, tuple)):
        return dump_json(to_json_value(value))
    return str(value)
