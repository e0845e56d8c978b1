from py_tls_exporter.encoding import create_log_group_list
from py_tls_exporter.encoding import encode_log_group_list
from py_tls_exporter.encoding import LogRecord
from py_tls_exporter.encoding import protobuf


def test_create_log():
    record = LogRecord(time=2000, contents=[("host", "h1"), ("Name", "")])

    pb_log = protobuf.create_log(record)

    assert pb_log.Time == 2000
    contents = [(c.Key, c.Value) for c in pb_log.Contents]
    assert contents == [("host", "h1"), ("Name", "")]


def test_create_log_group_list_uses_a_single_group():
    records = [
        LogRecord(time=1, contents=[("Name", "a")]),
        LogRecord(time=2, contents=[("Name", "b")]),
        LogRecord(time=3, contents=[("Name", "c")]),
    ]

    log_group_list = create_log_group_list(records)

    assert len(log_group_list.LogGroups) == 1
    logs = log_group_list.LogGroups[0].Logs
    assert [log.Time for log in logs] == [1, 2, 3]
    assert [log.Contents[0].Value for log in logs] == ["a", "b", "c"]


def test_create_log_group_list_empty():
    log_group_list = create_log_group_list([])

    assert len(log_group_list.LogGroups) == 1
    assert len(log_group_list.LogGroups[0].Logs) == 0


def test_encode_log_group_list_round_trips():
    records = [LogRecord(time=1700000000000, contents=[("host", "")])]
    log_group_list = create_log_group_list(records)

    encoded = encode_log_group_list(log_group_list)

    assert isinstance(encoded, bytes)
    decoded = protobuf.LogGroupList()
    decoded.ParseFromString(encoded)
    assert decoded == log_group_list
    # Empty values are still on the wire since the fields are required.
    assert decoded.LogGroups[0].Logs[0].Contents[0].HasField("Value")


def test_message_schema():
    fields = [f.name for f in protobuf.LogGroup.DESCRIPTOR.fields]
    assert fields == ["Logs", "Source", "LogTags", "FileName", "ContextFlow"]
    assert protobuf.LogGroupList.DESCRIPTOR.full_name == "pb.LogGroupList"
