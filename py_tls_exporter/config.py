import logging
from typing import Any
from typing import Mapping
from typing import NamedTuple
from typing import Optional
from typing import Union

import staticconf

from py_tls_exporter.exception import ConfigurationError

log = logging.getLogger("py_tls_exporter.config")

TLS_CONFIG_NAMESPACE = "tls_exporter"

# Keys of the per-request destination override.
TRACE_TOPIC_KEY = "tracetopic"
ACCESS_KEY_KEY = "ak"
SECRET_KEY_KEY = "sk"
REGION_KEY = "region"

REDACTED = "[REDACTED]"


class OpaqueString:
    """A string that doesn't show its value when printed or logged.

    Use `reveal()` to get the actual value.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, "OpaqueString"]) -> None:
        if isinstance(value, OpaqueString):
            value = value.reveal()
        self._value = value

    def reveal(self) -> str:
        return self._value

    def __str__(self) -> str:
        return REDACTED

    def __repr__(self) -> str:
        return f"OpaqueString({REDACTED!r})"

    def __bool__(self) -> bool:
        return bool(self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OpaqueString):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


def _redacted(secret: Optional[Union[str, OpaqueString]]) -> Optional[OpaqueString]:
    return None if secret is None else OpaqueString(secret)


class Destination(NamedTuple):
    """Where and as whom records get delivered.

    :param endpoint: TLS endpoint, e.g. https://tls-cn-beijing.volces.com
    :param topic_id: TLS topic id.
    :param access_key: Volcengine access key.
    :param secret_key: Volcengine secret key.
    :param region: Volcengine region, e.g. cn-beijing.
    """

    endpoint: str
    topic_id: str
    access_key: str
    secret_key: Union[str, OpaqueString]
    region: str

    def __repr__(self) -> str:
        return (
            f"Destination(endpoint={self.endpoint!r}, topic_id={self.topic_id!r}, "
            f"access_key={self.access_key!r}, "
            f"secret_key={_redacted(self.secret_key)!r}, region={self.region!r})"
        )


class DestinationOverride(NamedTuple):
    """Per-call replacement for a Destination's topic and credentials.

    It only takes effect when all four fields are set.
    """

    topic_id: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[Union[str, OpaqueString]] = None
    region: Optional[str] = None

    def is_complete(self) -> bool:
        return all(value is not None for value in self)

    def __repr__(self) -> str:
        return (
            f"DestinationOverride(topic_id={self.topic_id!r}, "
            f"access_key={self.access_key!r}, "
            f"secret_key={_redacted(self.secret_key)!r}, region={self.region!r})"
        )


def create_destination(
    endpoint: str,
    topic_id: str,
    access_key: str,
    secret_key: Union[str, OpaqueString],
    region: str,
) -> Destination:
    """Creates a validated Destination.

    :raises ConfigurationError: if any of the fields is empty.
    """
    destination = Destination(
        endpoint=endpoint,
        topic_id=topic_id,
        access_key=access_key,
        secret_key=OpaqueString(secret_key or ""),
        region=region,
    )
    return validate_destination(destination)


def validate_destination(destination: Optional[Destination]) -> Destination:
    """Checks that every field is set and returns the destination with its
    secret key wrapped in an OpaqueString.

    :raises ConfigurationError: if the destination or any of its fields is
        missing or empty.
    """
    if destination is None:
        raise ConfigurationError("missing TLS destination")
    missing = [field for field, value in destination._asdict().items() if not value]
    if missing:
        raise ConfigurationError(
            "missing volcengine tls trace params: {}".format(", ".join(missing))
        )
    return destination._replace(secret_key=OpaqueString(destination.secret_key))


def apply_override(
    destination: Destination,
    override: Optional[DestinationOverride],
) -> Destination:
    """Returns the destination a single call should use.

    The override replaces topic, access key, secret key and region all
    together, and only if it carries all four. The endpoint always comes
    from the default destination.
    """
    if override is None or not override.is_complete():
        return destination
    assert override.secret_key is not None
    return destination._replace(
        topic_id=override.topic_id,
        access_key=override.access_key,
        secret_key=OpaqueString(override.secret_key),
        region=override.region,
    )


def override_from_context(context: Mapping[str, Any]) -> DestinationOverride:
    """Builds a DestinationOverride from a request-scoped mapping.

    Only string values under TRACE_TOPIC_KEY, ACCESS_KEY_KEY, SECRET_KEY_KEY
    and REGION_KEY are taken into account, anything else counts as missing.

    :param context: request-scoped values, e.g. a dict of request metadata.
    :type context: Mapping
    :rtype: DestinationOverride
    """

    def _read(key: str) -> Optional[str]:
        value = context.get(key)
        return value if isinstance(value, str) else None

    return DestinationOverride(
        topic_id=_read(TRACE_TOPIC_KEY),
        access_key=_read(ACCESS_KEY_KEY),
        secret_key=_redacted(_read(SECRET_KEY_KEY)),
        region=_read(REGION_KEY),
    )


def load_config(namespace: str = TLS_CONFIG_NAMESPACE) -> Destination:
    """Reads the default destination from a loaded staticconf namespace.

    :param namespace: staticconf namespace holding endpoint, topic_id,
        access_key, secret_key and region.
    :type namespace: str
    :raises ConfigurationError: if any of the keys is missing or empty.
    """
    reader = staticconf.NamespaceReaders(namespace)
    return create_destination(
        endpoint=reader.read_string("endpoint", default=""),
        topic_id=reader.read_string("topic_id", default=""),
        access_key=reader.read_string("access_key", default=""),
        secret_key=reader.read_string("secret_key", default=""),
        region=reader.read_string("region", default=""),
    )


def load_config_file(
    filename: str,
    namespace: str = TLS_CONFIG_NAMESPACE,
) -> Destination:
    """Loads a YAML config file in `namespace` and reads the destination.

    .. code-block:: yaml

        endpoint: https://tls-cn-beijing.volces.com
        topic_id: 1f1a2b3c-...
        access_key: AKLT...
        secret_key: ...
        region: cn-beijing
    """
    log.debug("Loading TLS destination from %s", filename)
    staticconf.YamlConfiguration(filename, namespace=namespace)
    return load_config(namespace)
