"""Protobuf messages of the TLS PutLogs API.

The schema is small and stable, so rather than shipping generated code the
message classes are built at import time from a FileDescriptorProto that
mirrors TLS' log.proto.
"""
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool
from google.protobuf import message_factory

from py_tls_exporter.encoding._types import LogRecord

_Field = descriptor_pb2.FieldDescriptorProto

_PACKAGE = "pb"

# (name, label, type, message type name) per field, numbered from 1.
_SCHEMA: List[Tuple[str, List[Tuple[str, int, int, Optional[str]]]]] = [
    (
        "LogContent",
        [
            ("Key", _Field.LABEL_REQUIRED, _Field.TYPE_STRING, None),
            ("Value", _Field.LABEL_REQUIRED, _Field.TYPE_STRING, None),
        ],
    ),
    (
        "LogTag",
        [
            ("Key", _Field.LABEL_REQUIRED, _Field.TYPE_STRING, None),
            ("Value", _Field.LABEL_REQUIRED, _Field.TYPE_STRING, None),
        ],
    ),
    (
        "Log",
        [
            ("Time", _Field.LABEL_REQUIRED, _Field.TYPE_INT64, None),
            ("Contents", _Field.LABEL_REPEATED, _Field.TYPE_MESSAGE, "LogContent"),
        ],
    ),
    (
        "LogGroup",
        [
            ("Logs", _Field.LABEL_REPEATED, _Field.TYPE_MESSAGE, "Log"),
            ("Source", _Field.LABEL_OPTIONAL, _Field.TYPE_STRING, None),
            ("LogTags", _Field.LABEL_REPEATED, _Field.TYPE_MESSAGE, "LogTag"),
            ("FileName", _Field.LABEL_OPTIONAL, _Field.TYPE_STRING, None),
            ("ContextFlow", _Field.LABEL_OPTIONAL, _Field.TYPE_STRING, None),
        ],
    ),
    (
        "LogGroupList",
        [
            ("LogGroups", _Field.LABEL_REPEATED, _Field.TYPE_MESSAGE, "LogGroup"),
        ],
    ),
]


def _build_file_descriptor_proto() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="py_tls_exporter/tls_log.proto",
        package=_PACKAGE,
        syntax="proto2",
    )
    for message_name, fields in _SCHEMA:
        message_proto = file_proto.message_type.add(name=message_name)
        for number, (name, label, field_type, type_name) in enumerate(fields, 1):
            field_proto = message_proto.field.add(
                name=name,
                number=number,
                label=label,
                type=field_type,
            )
            if type_name:
                field_proto.type_name = f".{_PACKAGE}.{type_name}"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor_proto().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{_PACKAGE}.{name}")
    )


LogContent = _message_class("LogContent")
LogTag = _message_class("LogTag")
Log = _message_class("Log")
LogGroup = _message_class("LogGroup")
LogGroupList = _message_class("LogGroupList")


def create_log(record: LogRecord) -> "Log":
    """Converts a LogRecord in a protobuf Log.

    :param record: record to convert.
    :type record: LogRecord
    :return: protobuf's Log
    :rtype: Log
    """
    return Log(
        Time=record.time,
        Contents=[LogContent(Key=key, Value=value) for key, value in record.contents],
    )


def create_log_group_list(records: Sequence[LogRecord]) -> "LogGroupList":
    """Wraps all the records in a single LogGroup.

    There's no splitting by size or count: the whole batch is one delivery
    unit and it's up to the caller to keep batches within TLS' request limits.

    :param records: list of records.
    :type records: list of LogRecord
    :return: LogGroupList holding exactly one LogGroup.
    :rtype: LogGroupList
    """
    log_group = LogGroup(Logs=[create_log(record) for record in records])
    return LogGroupList(LogGroups=[log_group])


def encode_log_group_list(log_group_list: "LogGroupList") -> bytes:
    return log_group_list.SerializeToString()
