"""Opaque continuation tokens for shard pagination.

A token carries everything needed to resume a listing on the next call:

- the id of the last shard returned
- the position in the sorted index list at which the page stopped
- the creation time and name of the anchor index (the index owning that shard)
- the query start time, which bounds the indices visible to the whole sequence

The fields are joined with ``$`` and base64url-encoded without padding.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from shardpage.common.models import TOKEN_DELIMITER

INCORRECT_TAINTED_NEXT_TOKEN_ERROR_MESSAGE = (
    "Parameter [next_token] has been tainted and is incorrect. "
    "Please provide a valid [next_token]."
)

_TOKEN_FIELD_COUNT = 5
_INT_MAX = 2**31 - 1
_LONG_MAX = 2**63 - 1
_NUMBER_RE = re.compile(r"[+-]?[0-9]+")
_URLSAFE_RE = re.compile(r"[A-Za-z0-9_-]*")


class MalformedTokenError(ValueError):
    """A next_token that cannot be decoded or fails validation."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(INCORRECT_TAINTED_NEXT_TOKEN_ERROR_MESSAGE)


@dataclass(frozen=True)
class ContinuationToken:
    """Resumption state handed to the client between pages."""

    last_shard_id: int
    index_position: int
    anchor_creation_time: int
    query_start_time: int
    anchor_index_name: str

    def __post_init__(self) -> None:
        for name in ("last_shard_id", "index_position"):
            if not 0 <= getattr(self, name) <= _INT_MAX:
                raise ValueError(f"{name} must be within [0, {_INT_MAX}]")
        for name in ("anchor_creation_time", "query_start_time"):
            if not 0 <= getattr(self, name) <= _LONG_MAX:
                raise ValueError(f"{name} must be within [0, {_LONG_MAX}]")
        if not self.anchor_index_name:
            raise ValueError("anchor_index_name must not be empty")
        if TOKEN_DELIMITER in self.anchor_index_name:
            raise ValueError(f"anchor_index_name must not contain {TOKEN_DELIMITER!r}")

    def encode(self) -> str:
        return encode_token(self)


def encode_token(token: ContinuationToken) -> str:
    """Serialize a token into a URL-safe string without padding."""
    raw = TOKEN_DELIMITER.join(
        [
            str(token.last_shard_id),
            str(token.index_position),
            str(token.anchor_creation_time),
            str(token.query_start_time),
            token.anchor_index_name,
        ]
    )
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def _parse_number(value: str, upper: int, field_name: str) -> int:
    if not _NUMBER_RE.fullmatch(value):
        raise MalformedTokenError(f"{field_name} is not a number")
    number = int(value)
    if number < 0:
        raise MalformedTokenError(f"{field_name} is negative")
    if number > upper:
        raise MalformedTokenError(f"{field_name} is out of range")
    return number


def _decode_text(encoded: str) -> str:
    # b64decode maps altchars but still accepts "+" and "/"
    if not _URLSAFE_RE.fullmatch(encoded):
        raise MalformedTokenError("token contains characters outside the base64url alphabet")
    # Restore padding
    padded = encoded + "=" * ((4 - len(encoded) % 4) % 4)
    try:
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeError) as exc:
        raise MalformedTokenError("token is not valid base64url") from exc


def decode_token(encoded: str) -> ContinuationToken:
    """Decode and validate a token string.

    Raises MalformedTokenError for anything other than exactly five
    ``$``-separated fields with four non-negative integers and a non-empty name.
    """
    if not encoded:
        raise MalformedTokenError("token is empty")
    elements = _decode_text(encoded).split(TOKEN_DELIMITER)
    if len(elements) != _TOKEN_FIELD_COUNT:
        raise MalformedTokenError(f"expected {_TOKEN_FIELD_COUNT} fields, got {len(elements)}")

    last_shard_id = _parse_number(elements[0], _INT_MAX, "last_shard_id")
    index_position = _parse_number(elements[1], _INT_MAX, "index_position")
    anchor_creation_time = _parse_number(elements[2], _LONG_MAX, "anchor_creation_time")
    query_start_time = _parse_number(elements[3], _LONG_MAX, "query_start_time")
    anchor_index_name = elements[4]
    if not anchor_index_name:
        raise MalformedTokenError("anchor index name is empty")

    return ContinuationToken(
        last_shard_id=last_shard_id,
        index_position=index_position,
        anchor_creation_time=anchor_creation_time,
        query_start_time=query_start_time,
        anchor_index_name=anchor_index_name,
    )
