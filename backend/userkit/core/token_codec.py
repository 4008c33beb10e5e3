"""Token Codec: signs and verifies bearer tokens that carry a subject and JSON data.

Wire format:
    base64(JSON({"data": ..., "subject": ...})) + "." + base64(HMAC-SHA256(key, first_segment))

Invariants:
    - encode_token never sets context; decode_token preserves it verbatim when present
    - Signature is checked before the payload segment is decoded
    - Signatures are compared in constant time
    - A failed decode raises; no partial payload is ever returned
    - No IO, no logging, no shared state

Design Decisions:
    - Canonical JSON (sorted keys, compact separators): equal inputs yield equal tokens
    - Standard base64 alphabet with padding: contains no "." so the first "." always frames
"""

import base64
import binascii
import hashlib
import hmac
import json
from dataclasses import dataclass
from typing import Any

from userkit.core.errors import InvalidSignatureError, MalformedTokenError

SEPARATOR = "."


@dataclass(frozen=True)
class EncodedToken:
    """Result of encode_token. context is reserved for callers and never populated here."""
    token: str
    context: dict | None = None


@dataclass(frozen=True)
class TokenPayload:
    """Decoded token contents."""
    subject: str
    data: Any
    context: dict | None = None

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"subject": self.subject, "data": self.data}
        if self.context is not None:
            payload["context"] = self.context
        return payload


def encode_token(subject: str, data: Any, secret_key: str | bytes) -> EncodedToken:
    """Serialize subject and data into a signed token.

    data must be JSON-serializable; json raises TypeError otherwise.
    """
    serialized = json.dumps(
        {"subject": subject, "data": data},
        sort_keys=True, separators=(",", ":"), ensure_ascii=False,
    )
    encoded_payload = base64.b64encode(serialized.encode("utf-8")).decode("ascii")
    signature = _sign(encoded_payload, secret_key)
    return EncodedToken(token=f"{encoded_payload}{SEPARATOR}{signature}")


def decode_token(token: str, secret_key: str | bytes) -> TokenPayload:
    """Verify a token against secret_key and return its payload.

    Raises:
        MalformedTokenError: no separator, an empty segment, or a payload that
            is not base64-encoded JSON of the expected shape.
        InvalidSignatureError: the signature was not produced with secret_key
            over this payload segment.
    """
    encoded_payload, separator, signature = token.partition(SEPARATOR)
    if not separator:
        raise MalformedTokenError("missing separator")
    if not encoded_payload or not signature:
        raise MalformedTokenError("empty segment")

    expected = _sign(encoded_payload, secret_key)
    if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
        raise InvalidSignatureError()

    return _parse_payload(encoded_payload)


def _sign(encoded_payload: str, secret_key: str | bytes) -> str:
    key = secret_key.encode("utf-8") if isinstance(secret_key, str) else secret_key
    digest = hmac.new(key, encoded_payload.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def _parse_payload(encoded_payload: str) -> TokenPayload:
    try:
        raw = base64.b64decode(encoded_payload, validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise MalformedTokenError("payload is not base64-encoded JSON") from e

    if not isinstance(payload, dict):
        raise MalformedTokenError("payload is not an object")
    if not isinstance(payload.get("subject"), str) or "data" not in payload:
        raise MalformedTokenError("payload lacks subject or data")
    context = payload.get("context")
    if context is not None and not isinstance(context, dict):
        raise MalformedTokenError("context is not an object")

    return TokenPayload(
        subject=payload["subject"], data=payload["data"], context=context,
    )
