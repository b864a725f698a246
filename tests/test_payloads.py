import json

import pytest

from discosdk.gateway.payloads import (
    IdentifyPayload,
    IdentifyProperties,
    OpCode,
    Payload,
    ResumePayload,
)


def test_opcode_constants():
    assert Payload(op=OpCode.RESUME).to_dict() == {"op": 6, "d": None}
    assert Payload.from_dict({"op": 11, "d": None}).op is OpCode.HEARTBEAT_ACK


def test_identify_payload_json():
    payload = IdentifyPayload(
        token="token",
        properties=IdentifyProperties(os="linux", browser="vibe", device="agent"),
        compress=True,
        intents=512,
        shard=[0, 2],
    )
    decoded = json.loads(json.dumps(payload.to_dict()))
    assert decoded["token"] == "token"
    assert decoded["compress"] is True
    assert decoded["shard"] == [0, 2]
    assert decoded["properties"] == {"os": "linux", "browser": "vibe", "device": "agent"}


def test_identify_payload_omits_empty_options():
    payload = IdentifyPayload(token="token", properties=IdentifyProperties("linux", "b", "d"))
    decoded = payload.to_dict()
    assert "compress" not in decoded
    assert "shard" not in decoded
    assert decoded["intents"] == 0


def test_payload_serialization_round_trip():
    payload = Payload(op=OpCode.DISPATCH, d={"event": "READY"}, s=1, t="READY")
    roundtrip = Payload.from_json(payload.to_json())
    assert roundtrip == payload
    assert roundtrip.op is OpCode.DISPATCH


def test_payload_omits_empty_sequence_and_type():
    assert Payload(op=OpCode.HEARTBEAT).to_dict() == {"op": 1, "d": None}


def test_payload_from_dict_tolerates_nulls_and_unknown_ops():
    payload = Payload.from_dict({"op": 5, "d": None, "s": None, "t": None})
    assert payload.op == 5
    assert payload.s == 0
    assert payload.t == ""


def test_payload_from_json_rejects_non_object():
    with pytest.raises(ValueError):
        Payload.from_json("[1, 2]")
    with pytest.raises(ValueError):
        Payload.from_dict({"op": "hello"})


def test_resume_payload():
    state = ResumePayload(token="token", session_id="session-123", seq=42).to_dict()
    assert state == {"token": "token", "session_id": "session-123", "seq": 42}