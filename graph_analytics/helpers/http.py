"""Raw HTTP/1.1 message decoding.

Captured exchanges carry the request and response as base64-encoded wire
bytes: start line, headers, a blank line, then a body framed by
``Content-Length``.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field

from graph_analytics.errors import DecodeError, MalformedMessageError
from graph_analytics.formats.analytics_record import Header

_DELIMITERS = (b"\r\n\r\n", b"\n\n")


@dataclass
class RawMessage:
    """A decoded HTTP message: start line, headers and the framed body."""

    start_line: str
    headers: list[Header] = field(default_factory=lambda: list[Header]())
    body: bytes = b""


def get_header(headers: list[Header], name: str) -> str | None:
    """Get a header value by name (case-insensitive, first match wins)."""
    name_lower = name.lower()
    for h in headers:
        if h.name.lower() == name_lower:
            return h.value
    return None


def get_header_values(headers: list[Header], name: str) -> list[str]:
    """Get every value of a header by name (case-insensitive)."""
    name_lower = name.lower()
    return [h.value for h in headers if h.name.lower() == name_lower]


def decode_base64(value: str, what: str = "payload", stage: str = "decode") -> bytes:
    """Strictly decode a base64 string, raising DecodeError on bad input."""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(
            f"{what} is not valid base64: {e}", stage=stage, details={"what": what}
        ) from e


def parse_raw_message(data: bytes, stage: str = "decode") -> RawMessage:
    """Split raw HTTP bytes into start line, headers and Content-Length body.

    Bytes past the declared Content-Length are ignored.
    """
    head, rest = _split_head(data, stage)
    lines = [line.rstrip("\r") for line in head.decode("latin-1").split("\n")]
    if not lines or not lines[0].strip():
        raise MalformedMessageError("missing start line", stage=stage)

    headers: list[Header] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise MalformedMessageError(
                f"malformed header line: {line!r}", stage=stage, details={"line": line}
            )
        headers.append(Header(name=name.strip(), value=value.strip()))

    length = _content_length(headers, stage)
    if length > len(rest):
        raise MalformedMessageError(
            f"Content-Length {length} exceeds the {len(rest)} bytes available",
            stage=stage,
            details={"content_length": length, "available": len(rest)},
        )

    return RawMessage(start_line=lines[0].strip(), headers=headers, body=rest[:length])


def read_message_body(value: str, what: str = "message", stage: str = "decode") -> bytes:
    """Decode a base64 raw HTTP message and return its body."""
    return parse_raw_message(decode_base64(value, what, stage), stage).body


def _split_head(data: bytes, stage: str) -> tuple[bytes, bytes]:
    # The earliest blank line ends the head, whichever line ending it uses.
    found: tuple[int, bytes] | None = None
    for delimiter in _DELIMITERS:
        index = data.find(delimiter)
        if index != -1 and (found is None or index < found[0]):
            found = (index, delimiter)
    if found is None:
        raise MalformedMessageError("missing header/body delimiter", stage=stage)
    index, delimiter = found
    return data[:index], data[index + len(delimiter):]


def _content_length(headers: list[Header], stage: str) -> int:
    values = {v.strip() for v in get_header_values(headers, "Content-Length")}
    if not values:
        raise MalformedMessageError("missing Content-Length header", stage=stage)
    if len(values) > 1:
        raise MalformedMessageError(
            "conflicting Content-Length headers",
            stage=stage,
            details={"values": sorted(values)},
        )
    raw = values.pop()
    if not (raw.isascii() and raw.isdigit()):
        raise MalformedMessageError(
            f"invalid Content-Length: {raw!r}", stage=stage, details={"value": raw}
        )
    return int(raw)
