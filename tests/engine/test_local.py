"""Test the local AES-GCM protection engine."""

import base64

import pytest

from dbveil.engine import EngineError, LocalEngine, ProtectionEngine, UnauthorizedError
from dbveil.policy import ColumnProtectionPolicy

PII = ColumnProtectionPolicy.from_mapping({"classification": ["pii"]})
INTERNAL = ColumnProtectionPolicy.from_mapping({"classification": ["internal"]})


def test_engine_satisfies_protocol(local_engine):
    assert isinstance(local_engine, ProtectionEngine)


def test_round_trip(local_engine):
    envelope = local_engine.protect("Jane", PII)
    assert envelope != "Jane"
    assert "Jane" not in envelope
    assert local_engine.is_envelope(envelope)
    assert local_engine.unprotect(envelope) == ("Jane", PII)


def test_round_trip_empty_and_unicode(local_engine):
    for plaintext in ("", "Zoë Åström", "鈴木"):
        assert local_engine.unprotect(local_engine.protect(plaintext, PII))[0] == plaintext


def test_round_trip_empty_policy(local_engine):
    empty = ColumnProtectionPolicy()
    assert local_engine.unprotect(local_engine.protect("x", empty)) == ("x", empty)


def test_protect_is_randomized(local_engine):
    assert local_engine.protect("Jane", PII) != local_engine.protect("Jane", PII)


def test_envelope_shape(local_engine):
    envelope = local_engine.protect("Jane", PII)
    assert envelope.startswith("~!1!")
    assert envelope.endswith("!")
    header = envelope.split("!")[2]
    padded = header + "=" * (-len(header) % 4)
    assert base64.urlsafe_b64decode(padded).decode() == PII.canonical_json()


def test_protect_rejects_non_str(local_engine):
    with pytest.raises(EngineError):
        local_engine.protect(b"Jane", PII)


def test_is_envelope(local_engine):
    envelope = local_engine.protect("Jane", PII)
    assert local_engine.is_envelope(envelope.encode("ascii"))
    assert not local_engine.is_envelope("Jane")
    assert not local_engine.is_envelope(None)
    assert not local_engine.is_envelope(42)
    assert not local_engine.is_envelope("prefix " + envelope)
    assert not local_engine.is_envelope(b"\xff\xfe")


def test_ciphertext_protected_again_round_trips(local_engine):
    once = local_engine.protect("Jane", PII)
    twice = local_engine.protect(once, PII)
    assert local_engine.unprotect(twice)[0] == once


def test_tampered_payload_fails(local_engine):
    envelope = local_engine.protect("Jane", PII)
    prefix, payload = envelope[:-1].rsplit("!", 1)
    raw = bytearray(base64.b64decode(payload))
    raw[-1] ^= 0x01
    tampered = f"{prefix}!{base64.b64encode(bytes(raw)).decode()}!"
    with pytest.raises(EngineError, match="authentication"):
        local_engine.unprotect(tampered)


def test_swapped_attribute_header_fails(local_engine):
    envelope = local_engine.protect("Jane", PII)
    other = local_engine.protect("Jane", INTERNAL)
    parts, other_parts = envelope.split("!"), other.split("!")
    parts[2] = other_parts[2]
    with pytest.raises(EngineError):
        local_engine.unprotect("!".join(parts))


def test_truncated_payload_fails(local_engine):
    short = base64.b64encode(b"\x00" * 8).decode()
    header = base64.urlsafe_b64encode(b"{}").rstrip(b"=").decode()
    with pytest.raises(EngineError, match="truncated"):
        local_engine.unprotect(f"~!1!{header}!{short}!")


def test_malformed_header_fails(local_engine):
    payload = base64.b64encode(b"\x00" * 40).decode()
    header = base64.urlsafe_b64encode(b'{"a": 1}').rstrip(b"=").decode()
    with pytest.raises(EngineError, match="malformed"):
        local_engine.unprotect(f"~!1!{header}!{payload}!")


def test_unprotect_non_envelope(local_engine):
    with pytest.raises(EngineError, match="not a protected envelope"):
        local_engine.unprotect("Jane")


def test_other_secret_cannot_unprotect(local_engine):
    envelope = local_engine.protect("Jane", PII)
    other = LocalEngine(b"\x02" * 32)
    with pytest.raises(EngineError):
        other.unprotect(envelope)


def test_short_secret_rejected():
    with pytest.raises(EngineError, match="at least 32 bytes"):
        LocalEngine(b"short")


def test_deny_blocks_protect_and_unprotect(local_engine):
    envelope = local_engine.protect("Jane", PII)
    restricted = LocalEngine(bytes(range(32)), deny={"classification": ["pii"]})

    with pytest.raises(UnauthorizedError, match="classification=pii"):
        restricted.protect("Jane", PII)
    with pytest.raises(UnauthorizedError):
        restricted.unprotect(envelope)

    # Other attribute values are unaffected.
    assert restricted.unprotect(local_engine.protect("dept", INTERNAL))[0] == "dept"


def test_unauthorized_is_engine_error():
    assert issubclass(UnauthorizedError, EngineError)


def test_repr_hides_secret(local_engine):
    assert repr(local_engine) == "LocalEngine(profile_id='test')"
