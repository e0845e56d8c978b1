import pytest
from staticconf.testing import MockConfiguration

from py_tls_exporter import config
from py_tls_exporter.config import Destination
from py_tls_exporter.config import DestinationOverride
from py_tls_exporter.config import OpaqueString
from py_tls_exporter.exception import ConfigurationError


VALID_FIELDS = {
    "endpoint": "https://tls-cn-beijing.volces.com",
    "topic_id": "topic",
    "access_key": "ak",
    "secret_key": "sk",
    "region": "cn-beijing",
}


class TestOpaqueString:
    def test_hides_value(self):
        secret = OpaqueString("hunter2")

        assert str(secret) == "[REDACTED]"
        assert "hunter2" not in repr(secret)
        assert "hunter2" not in f"{secret}"
        assert secret.reveal() == "hunter2"

    def test_equality_and_truthiness(self):
        assert OpaqueString("a") == OpaqueString("a")
        assert OpaqueString("a") != OpaqueString("b")
        assert OpaqueString("a") != "a"
        assert not OpaqueString("")
        assert OpaqueString(OpaqueString("a")).reveal() == "a"


def test_create_destination():
    destination = config.create_destination(**VALID_FIELDS)

    assert destination.endpoint == VALID_FIELDS["endpoint"]
    assert destination.topic_id == "topic"
    assert destination.secret_key.reveal() == "sk"
    assert "sk'" not in repr(destination)
    assert "[REDACTED]" in repr(destination)


def test_destination_repr_hides_plain_secret():
    destination = Destination(**dict(VALID_FIELDS, secret_key="plain-secret"))

    assert "plain-secret" not in repr(destination)
    assert "[REDACTED]" in repr(destination)


def test_validate_destination_wraps_plain_secret():
    destination = Destination(**dict(VALID_FIELDS, secret_key="plain-secret"))

    validated = config.validate_destination(destination)

    assert validated.secret_key == OpaqueString("plain-secret")
    assert validated.topic_id == destination.topic_id


def test_override_repr_hides_secret():
    override = config.override_from_context(
        {config.SECRET_KEY_KEY: "hunter2", config.TRACE_TOPIC_KEY: "t2"}
    )

    assert "hunter2" not in repr(override)
    assert "hunter2" not in repr(DestinationOverride(secret_key="hunter2"))
    assert "t2" in repr(override)


@pytest.mark.parametrize("missing", sorted(VALID_FIELDS))
def test_create_destination_with_empty_field(missing):
    fields = dict(VALID_FIELDS, **{missing: ""})

    with pytest.raises(ConfigurationError, match=missing):
        config.create_destination(**fields)


def test_validate_destination_none():
    with pytest.raises(ConfigurationError):
        config.validate_destination(None)


class TestApplyOverride:
    @pytest.fixture
    def default(self):
        return config.create_destination(**VALID_FIELDS)

    def test_no_override(self, default):
        assert config.apply_override(default, None) is default

    def test_complete_override(self, default):
        override = DestinationOverride("t2", "ak2", "sk2", "cn-shanghai")

        resolved = config.apply_override(default, override)

        assert resolved == Destination(
            endpoint=default.endpoint,
            topic_id="t2",
            access_key="ak2",
            secret_key=OpaqueString("sk2"),
            region="cn-shanghai",
        )

    @pytest.mark.parametrize(
        "missing", ["topic_id", "access_key", "secret_key", "region"]
    )
    def test_partial_override_is_ignored(self, default, missing):
        override = DestinationOverride("t2", "ak2", "sk2", "cn-shanghai")
        override = override._replace(**{missing: None})

        assert config.apply_override(default, override) is default


def test_override_from_context():
    context = {
        config.TRACE_TOPIC_KEY: "t2",
        config.ACCESS_KEY_KEY: "ak2",
        config.SECRET_KEY_KEY: "sk2",
        config.REGION_KEY: "cn-shanghai",
        "unrelated": "value",
    }

    override = config.override_from_context(context)

    assert override == DestinationOverride(
        "t2", "ak2", OpaqueString("sk2"), "cn-shanghai"
    )
    assert override.is_complete()


def test_override_from_context_ignores_non_strings():
    context = {
        config.TRACE_TOPIC_KEY: "t2",
        config.ACCESS_KEY_KEY: "ak2",
        config.SECRET_KEY_KEY: 1234,
        config.REGION_KEY: "cn-shanghai",
    }

    override = config.override_from_context(context)

    assert override.secret_key is None
    assert not override.is_complete()


def test_override_context_keys():
    assert config.TRACE_TOPIC_KEY == "tracetopic"
    assert config.ACCESS_KEY_KEY == "ak"
    assert config.SECRET_KEY_KEY == "sk"
    assert config.REGION_KEY == "region"


def test_load_config():
    with MockConfiguration(VALID_FIELDS, namespace="tls_exporter_load_test"):
        destination = config.load_config("tls_exporter_load_test")

    assert destination == config.create_destination(**VALID_FIELDS)


def test_load_config_missing_key():
    fields = dict(VALID_FIELDS)
    del fields["region"]

    with MockConfiguration(fields, namespace="tls_exporter_missing_test"):
        with pytest.raises(ConfigurationError, match="region"):
            config.load_config("tls_exporter_missing_test")


def test_load_config_file(tmp_path):
    config_file = tmp_path / "tls.yaml"
    config_file.write_text(
        "\n".join(f"{key}: {value}" for key, value in VALID_FIELDS.items())
    )

    destination = config.load_config_file(
        str(config_file),
        namespace="tls_exporter_file_test",
    )

    assert destination.topic_id == "topic"
    assert destination.secret_key.reveal() == "sk"
