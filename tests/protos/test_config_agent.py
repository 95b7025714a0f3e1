"""Tests for dbspine.protos.config_agent — descriptors agree with the .proto file."""

from __future__ import annotations

import re

from dbspine.protos.config_agent import (
    CHECK_STATUS_METHOD,
    DESCRIPTOR,
    PROTO_FILE,
    CheckStatusRequest,
    CheckStatusResponse,
    ConfigAgentStub,
)

_MESSAGE = re.compile(r"^message (\w+) \{(.*?)^\}", re.MULTILINE | re.DOTALL)
_FIELD = re.compile(r"^\s*(\w+) (\w+) = (\d+);", re.MULTILINE)


def _proto_fields() -> dict[str, set[tuple[str, int]]]:
    text = PROTO_FILE.read_text()
    return {
        name: {(field, int(number)) for _type, field, number in _FIELD.findall(body)}
        for name, body in _MESSAGE.findall(text)
    }


def _descriptor_fields(message) -> set[tuple[str, int]]:
    return {(field.name, field.number) for field in message.DESCRIPTOR.fields}


class TestProtoContract:
    def test_proto_file_shipped(self):
        assert PROTO_FILE.is_file()

    def test_request_fields_match_proto(self):
        assert _descriptor_fields(CheckStatusRequest) == _proto_fields()["CheckStatusRequest"]

    def test_response_fields_match_proto(self):
        assert _descriptor_fields(CheckStatusResponse) == _proto_fields()["CheckStatusResponse"]

    def test_service_method(self):
        service = DESCRIPTOR.services_by_name["ConfigAgent"]
        method = service.methods_by_name["CheckStatus"]
        assert method.input_type.full_name == "protos.CheckStatusRequest"
        assert method.output_type.full_name == "protos.CheckStatusResponse"
        assert "rpc CheckStatus(CheckStatusRequest) returns (CheckStatusResponse);" in PROTO_FILE.read_text()


class TestConfigAgentStub:
    def test_binds_check_status(self):
        bound = {}

        class Channel:
            def unary_unary(self, method, request_serializer=None, response_deserializer=None):
                bound.update(
                    method=method,
                    serializer=request_serializer,
                    deserializer=response_deserializer,
                )
                return "callable"

        stub = ConfigAgentStub(Channel())
        assert stub.CheckStatus == "callable"
        assert bound["method"] == CHECK_STATUS_METHOD
        payload = bound["serializer"](CheckStatusRequest(name="orcl1"))
        assert payload == b"\n\x05orcl1"
        assert bound["deserializer"](b"\n\x02ok").status == "ok"
