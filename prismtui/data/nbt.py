"""Minimal Named Binary Tag codec for ``servers.dat``.

Values keep their tag kind so that unknown fields survive a read/write
round trip unchanged. Input may be raw or gzip-compressed; output is raw,
which is what the game writes for the server list.
"""

from __future__ import annotations

import gzip
import io
import struct
from dataclasses import dataclass, field

TAG_END = 0
TAG_BYTE = 1
TAG_SHORT = 2
TAG_INT = 3
TAG_LONG = 4
TAG_FLOAT = 5
TAG_DOUBLE = 6
TAG_BYTE_ARRAY = 7
TAG_STRING = 8
TAG_LIST = 9
TAG_COMPOUND = 10
TAG_INT_ARRAY = 11
TAG_LONG_ARRAY = 12

MAX_DEPTH = 512
GZIP_MAGIC = b"\x1f\x8b"

_SCALAR_FORMATS: dict[int, str] = {
    TAG_BYTE: ">b",
    TAG_SHORT: ">h",
    TAG_INT: ">i",
    TAG_LONG: ">q",
    TAG_FLOAT: ">f",
    TAG_DOUBLE: ">d",
}


class NbtError(ValueError):
    """Raised for truncated or structurally invalid NBT data."""


@dataclass(frozen=True)
class Tag:
    kind: int
    value: object


@dataclass(frozen=True)
class TagList:
    """Homogeneous list payload; ``items`` are bare payloads of ``element_kind``."""

    element_kind: int
    items: list = field(default_factory=list)


def string_tag(text: str) -> Tag:
    return Tag(TAG_STRING, text)


def compound_tag(entries: dict[str, Tag]) -> Tag:
    return Tag(TAG_COMPOUND, dict(entries))


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(data)

    def take(self, count: int) -> bytes:
        chunk = self._stream.read(count)
        if len(chunk) != count:
            raise NbtError("unexpected end of NBT data")
        return chunk

    def unpack(self, fmt: str):
        size = struct.calcsize(fmt)
        return struct.unpack(fmt, self.take(size))[0]

    def string(self) -> str:
        length = self.unpack(">H")
        return self.take(length).decode("utf-8", errors="replace")

    def payload(self, kind: int, depth: int) -> object:
        if depth > MAX_DEPTH:
            raise NbtError("NBT nesting too deep")
        fmt = _SCALAR_FORMATS.get(kind)
        if fmt is not None:
            return self.unpack(fmt)
        if kind == TAG_STRING:
            return self.string()
        if kind == TAG_BYTE_ARRAY:
            return self.take(self._length())
        if kind == TAG_INT_ARRAY:
            return [self.unpack(">i") for _ in range(self._length())]
        if kind == TAG_LONG_ARRAY:
            return [self.unpack(">q") for _ in range(self._length())]
        if kind == TAG_LIST:
            element_kind = self.unpack(">b")
            count = self._length()
            return TagList(element_kind, [self.payload(element_kind, depth + 1) for _ in range(count)])
        if kind == TAG_COMPOUND:
            entries: dict[str, Tag] = {}
            while True:
                child_kind = self.unpack(">b")
                if child_kind == TAG_END:
                    return entries
                name = self.string()
                entries[name] = Tag(child_kind, self.payload(child_kind, depth + 1))
        raise NbtError(f"unknown NBT tag kind {kind}")

    def _length(self) -> int:
        length = self.unpack(">i")
        if length < 0:
            raise NbtError("negative NBT length")
        return length


def _write_string(out: io.BytesIO, text: str) -> None:
    encoded = text.encode("utf-8")
    if len(encoded) > 0xFFFF:
        raise NbtError("NBT string too long")
    out.write(struct.pack(">H", len(encoded)))
    out.write(encoded)


def _write_payload(out: io.BytesIO, kind: int, value: object) -> None:
    fmt = _SCALAR_FORMATS.get(kind)
    if fmt is not None:
        out.write(struct.pack(fmt, value))
    elif kind == TAG_STRING:
        _write_string(out, str(value))
    elif kind == TAG_BYTE_ARRAY:
        data = bytes(value)
        out.write(struct.pack(">i", len(data)))
        out.write(data)
    elif kind in (TAG_INT_ARRAY, TAG_LONG_ARRAY):
        item_fmt = ">i" if kind == TAG_INT_ARRAY else ">q"
        out.write(struct.pack(">i", len(value)))
        for item in value:
            out.write(struct.pack(item_fmt, item))
    elif kind == TAG_LIST:
        if not isinstance(value, TagList):
            raise NbtError("list tag requires a TagList payload")
        element_kind = value.element_kind if value.items else TAG_END
        out.write(struct.pack(">b", element_kind))
        out.write(struct.pack(">i", len(value.items)))
        for item in value.items:
            _write_payload(out, element_kind, item)
    elif kind == TAG_COMPOUND:
        for name, child in value.items():
            out.write(struct.pack(">b", child.kind))
            _write_string(out, name)
            _write_payload(out, child.kind, child.value)
        out.write(struct.pack(">b", TAG_END))
    else:
        raise NbtError(f"unknown NBT tag kind {kind}")


def decode(data: bytes) -> tuple[str, dict[str, Tag]]:
    """Decode a root compound, returning ``(root_name, entries)``."""
    if data[:2] == GZIP_MAGIC:
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError) as exc:
            raise NbtError(f"bad gzip stream: {exc}") from exc
    reader = _Reader(data)
    root_kind = reader.unpack(">b")
    if root_kind != TAG_COMPOUND:
        raise NbtError("NBT root is not a compound")
    name = reader.string()
    entries = reader.payload(TAG_COMPOUND, 0)
    return name, entries


def encode(entries: dict[str, Tag], root_name: str = "") -> bytes:
    out = io.BytesIO()
    out.write(struct.pack(">b", TAG_COMPOUND))
    _write_string(out, root_name)
    _write_payload(out, TAG_COMPOUND, entries)
    return out.getvalue()
