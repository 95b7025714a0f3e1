"""ConfigAgent messages and client stub.

Descriptors mirror ``config_agent.proto`` in this package and are registered
with ``google.protobuf`` at import time, so no protoc step is needed. The
resulting classes are ordinary protobuf messages (``SerializeToString`` /
``FromString``), and ``ConfigAgentStub`` has the shape of a generated
``*_pb2_grpc`` stub.
"""

from __future__ import annotations

from pathlib import Path

import grpc
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PROTO_FILE = Path(__file__).with_name("config_agent.proto")
PACKAGE = "protos"
SERVICE_NAME = f"{PACKAGE}.ConfigAgent"
CHECK_STATUS_METHOD = f"/{SERVICE_NAME}/CheckStatus"

_Field = descriptor_pb2.FieldDescriptorProto


def _string_field(message: descriptor_pb2.DescriptorProto, name: str, number: int) -> None:
    message.field.add(name=name, number=number, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL)


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fd = descriptor_pb2.FileDescriptorProto(
        name="config_agent.proto", package=PACKAGE, syntax="proto3"
    )

    request = fd.message_type.add(name="CheckStatusRequest")
    check_type = request.enum_type.add(name="Type")
    check_type.value.add(name="UNKNOWN_TYPE", number=0)
    check_type.value.add(name="INSTANCE", number=1)
    _string_field(request, "name", 1)
    _string_field(request, "cdb_name", 2)
    request.field.add(
        name="check_status_type",
        number=3,
        type=_Field.TYPE_ENUM,
        type_name=f".{PACKAGE}.CheckStatusRequest.Type",
        label=_Field.LABEL_OPTIONAL,
    )
    _string_field(request, "db_domain", 4)

    response = fd.message_type.add(name="CheckStatusResponse")
    _string_field(response, "status", 1)

    service = fd.service.add(name="ConfigAgent")
    service.method.add(
        name="CheckStatus",
        input_type=f".{PACKAGE}.CheckStatusRequest",
        output_type=f".{PACKAGE}.CheckStatusResponse",
    )
    return fd


# Private pool: never collides with another registration of config_agent.proto.
_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_file_descriptor().SerializeToString())

DESCRIPTOR = _POOL.FindFileByName("config_agent.proto")

CheckStatusRequest = message_factory.GetMessageClass(
    _POOL.FindMessageTypeByName(f"{PACKAGE}.CheckStatusRequest")
)
CheckStatusResponse = message_factory.GetMessageClass(
    _POOL.FindMessageTypeByName(f"{PACKAGE}.CheckStatusResponse")
)

CHECK_STATUS_INSTANCE: int = (
    CheckStatusRequest.DESCRIPTOR.enum_types_by_name["Type"].values_by_name["INSTANCE"].number
)


class ConfigAgentStub:
    """Client stub for the ConfigAgent service."""

    def __init__(self, channel: grpc.Channel):
        self.CheckStatus = channel.unary_unary(
            CHECK_STATUS_METHOD,
            request_serializer=CheckStatusRequest.SerializeToString,
            response_deserializer=CheckStatusResponse.FromString,
        )


__all__ = [
    "CHECK_STATUS_INSTANCE",
    "CHECK_STATUS_METHOD",
    "CheckStatusRequest",
    "CheckStatusResponse",
    "ConfigAgentStub",
    "DESCRIPTOR",
    "PROTO_FILE",
]
