"""Local protection engine — AES-256-GCM with per-policy keys derived from a profile secret."""

from __future__ import annotations

import base64
import json
import os
import re
import threading
from collections.abc import Iterable, Mapping

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from dbveil.errors import EngineError, UnauthorizedError
from dbveil.policy import ColumnProtectionPolicy

ENVELOPE_VERSION = "1"
KEY_SIZE = 32  # AES-256
NONCE_SIZE = 12  # 96-bit GCM nonce
TAG_SIZE = 16

# ~!<version>!<base64url canonical attributes>!<base64 nonce+ciphertext+tag>!
_ENVELOPE_RE = re.compile(
    r"~!" + ENVELOPE_VERSION + r"!([A-Za-z0-9_-]*)!([A-Za-z0-9+/]+={0,2})!"
)


def _as_text(value: object) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("ascii")
        except UnicodeDecodeError:
            return None
    return None


class LocalEngine:
    """Protection engine holding one secret; every policy gets its own derived key.

    The canonical attribute JSON is both the HKDF ``info`` and the GCM
    associated data, so an envelope whose attribute header was altered fails
    authentication instead of decrypting under the wrong policy.
    """

    def __init__(
        self,
        secret: bytes,
        *,
        deny: Mapping[str, Iterable[str]] | None = None,
        profile_id: str | None = None,
    ) -> None:
        if len(secret) < KEY_SIZE:
            raise EngineError(f"engine secret must be at least {KEY_SIZE} bytes")
        self._secret = bytes(secret)
        self._deny = {name: frozenset(values) for name, values in (deny or {}).items()}
        self._ciphers: dict[str, AESGCM] = {}
        self._lock = threading.Lock()
        self.profile_id = profile_id

    def __repr__(self) -> str:
        return f"LocalEngine(profile_id={self.profile_id!r})"

    def _check_access(self, policy: ColumnProtectionPolicy) -> None:
        for name, values in policy.attributes:
            denied = self._deny.get(name)
            if denied and denied.intersection(values):
                blocked = ", ".join(sorted(denied.intersection(values)))
                raise UnauthorizedError(f"access denied to keys with {name}={blocked}")

    def _cipher(self, info: str) -> AESGCM:
        cipher = self._ciphers.get(info)
        if cipher is not None:
            return cipher
        key = HKDF(
            algorithm=hashes.SHA256(), length=KEY_SIZE, salt=None, info=info.encode("utf-8")
        ).derive(self._secret)
        with self._lock:
            return self._ciphers.setdefault(info, AESGCM(key))

    def protect(self, plaintext: str, policy: ColumnProtectionPolicy) -> str:
        if not isinstance(plaintext, str):
            raise EngineError(f"only str values can be protected, got {type(plaintext).__name__}")
        self._check_access(policy)

        info = policy.canonical_json()
        nonce = os.urandom(NONCE_SIZE)
        try:
            sealed = self._cipher(info).encrypt(
                nonce, plaintext.encode("utf-8"), info.encode("utf-8")
            )
        except (ValueError, OverflowError) as e:
            raise EngineError(f"encryption failed: {e}") from e

        header = base64.urlsafe_b64encode(info.encode("utf-8")).rstrip(b"=").decode("ascii")
        payload = base64.b64encode(nonce + sealed).decode("ascii")
        return f"~!{ENVELOPE_VERSION}!{header}!{payload}!"

    def is_envelope(self, value: object) -> bool:
        text = _as_text(value)
        return text is not None and _ENVELOPE_RE.fullmatch(text) is not None

    def unprotect(self, value: str | bytes) -> tuple[str, ColumnProtectionPolicy]:
        text = _as_text(value)
        match = _ENVELOPE_RE.fullmatch(text) if text is not None else None
        if match is None:
            raise EngineError("value is not a protected envelope")
        header, payload = match.groups()

        policy = _decode_policy(header)
        self._check_access(policy)

        try:
            raw = base64.b64decode(payload, validate=True)
        except ValueError as e:
            raise EngineError(f"envelope payload is not valid base64: {e}") from e
        if len(raw) < NONCE_SIZE + TAG_SIZE:
            raise EngineError("envelope payload is truncated")

        info = policy.canonical_json()
        try:
            plaintext = self._cipher(info).decrypt(
                raw[:NONCE_SIZE], raw[NONCE_SIZE:], info.encode("utf-8")
            )
        except InvalidTag as e:
            raise EngineError("envelope failed authentication") from e
        try:
            return plaintext.decode("utf-8"), policy
        except UnicodeDecodeError as e:
            raise EngineError("decrypted value is not valid UTF-8") from e


def _decode_policy(header: str) -> ColumnProtectionPolicy:
    try:
        padded = header + "=" * (-len(header) % 4)
        attributes = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
    except ValueError as e:
        raise EngineError(f"envelope attribute header is malformed: {e}") from e

    if not isinstance(attributes, dict) or not all(
        isinstance(values, list) and all(isinstance(v, str) for v in values)
        for values in attributes.values()
    ):
        raise EngineError("envelope attribute header is malformed")
    return ColumnProtectionPolicy.from_mapping(attributes)
