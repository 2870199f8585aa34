"""Read and write xgcode (.gx) files.

Layout (little-endian):
    [Magic(16) | ThumbOffset(4) | PayloadOffset(4) x2 | Header(30) | Thumbnail | Payload]

The thumbnail and payload are opaque blobs. The payload has no length field
and runs to end of stream.
"""
from __future__ import annotations

import io
import os
import struct
import uuid
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import BinaryIO

from xgcode.errors import (
    BadHeaderSize,
    BadMagic,
    DataInReservedField,
    SecondGOffsetNotFound,
    ThumbnailTooLarge,
    ThumbSizeNegative,
    XGCodeIOError,
)
from xgcode.protocol import (
    HEADER_FIELDS,
    HEADER_FMT,
    HEADER_LEN,
    MAX_OFFSET,
    PREAMBLE_FMT,
    READ_CHUNK_SIZE,
    RESERVED_FIELDS,
    THUMB_OFFSET,
    XGCODE_MAGIC,
)

_FIELD_WIDTH = {name: width for name, width, _ in HEADER_FIELDS}
_FIELD_OFFSET = {name: off for name, _, off in HEADER_FIELDS}


@dataclass(frozen=True)
class Header:
    """Print parameters stored in the fixed header block."""

    print_time: int = 0  # seconds
    filament_0_usage: int = 0  # mm, extruder 0 (right)
    filament_1_usage: int = 0  # mm, extruder 1 (left)
    multi_extruder_type: int = 0
    layer_height: int = 0  # microns
    reserved0: int = 0  # function unknown
    perimeter_shells: int = 0
    print_speed: int = 0  # mm/s
    hotbed_temp: int = 0  # °C
    extruder_0_temp: int = 0  # °C
    extruder_1_temp: int = 0  # °C
    reserved1: int = 0  # function unknown

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{f.name} must be an integer, got {value!r}")
            limit = 1 << (8 * _FIELD_WIDTH[f.name])
            if not 0 <= value < limit:
                raise ValueError(f"{f.name}={value} does not fit in {_FIELD_WIDTH[f.name] * 8} bits")

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Header":
        unknown = set(data) - set(_FIELD_WIDTH)
        if unknown:
            raise ValueError(f"Unknown header fields: {', '.join(sorted(unknown))}")
        return cls(**data)

    def pack(self) -> bytes:
        return struct.pack(HEADER_FMT, *(getattr(self, name) for name, _, _ in HEADER_FIELDS))

    @classmethod
    def unpack(cls, raw: bytes) -> "Header":
        values = struct.unpack(HEADER_FMT, raw)
        return cls(**{name: v for (name, _, _), v in zip(HEADER_FIELDS, values)})


@dataclass(frozen=True)
class Document:
    """A decoded xgcode file."""

    header: Header
    thumbnail: bytes = b""  # BMP, 80x60, 8-bit RGB (not validated)
    payload: bytes = b""  # G-code

    @property
    def payload_offset(self) -> int:
        return THUMB_OFFSET + len(self.thumbnail)


def _read_exact(source: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes or raise XGCodeIOError.

    Large reads are chunked so an offset taken from a corrupt file cannot
    force a huge allocation before EOF is detected.
    """
    buf = bytearray()
    while len(buf) < size:
        try:
            chunk = source.read(min(size - len(buf), READ_CHUNK_SIZE))
        except OSError as e:
            raise XGCodeIOError(str(e)) from e
        if not chunk:
            raise XGCodeIOError(f"unexpected end of stream ({len(buf)} of {size} bytes)")
        buf += chunk
    return bytes(buf)


def _read_u32(source: BinaryIO) -> int:
    return struct.unpack("<I", _read_exact(source, 4))[0]


def _read_to_end(source: BinaryIO) -> bytes:
    try:
        data = source.read()
    except OSError as e:
        raise XGCodeIOError(str(e)) from e
    return bytes(data or b"")


def check_reserved(header: Header) -> None:
    """Reject a header that carries data in a reserved field."""
    for name in RESERVED_FIELDS:
        value = getattr(header, name)
        if value:
            raise DataInReservedField(_FIELD_OFFSET[name], value)


def read(source: BinaryIO, strict: bool = False) -> Document:
    """Decode a Document from a binary stream.

    The payload consumes everything left in the stream. With ``strict`` set,
    nonzero reserved fields are rejected.
    """
    magic = _read_exact(source, len(XGCODE_MAGIC))
    if magic != XGCODE_MAGIC:
        raise BadMagic(magic)

    thumb_offset = _read_u32(source)
    if thumb_offset != THUMB_OFFSET:
        raise BadHeaderSize(thumb_offset)

    payload_offset = _read_u32(source)
    thumb_size = payload_offset - THUMB_OFFSET
    if thumb_size < 0:
        raise ThumbSizeNegative(thumb_size)

    payload_offset2 = _read_u32(source)
    if payload_offset2 != payload_offset:
        raise SecondGOffsetNotFound(payload_offset, payload_offset2)

    header = Header.unpack(_read_exact(source, HEADER_LEN))
    if strict:
        check_reserved(header)

    thumbnail = _read_exact(source, thumb_size)
    payload = _read_to_end(source)
    return Document(header=header, thumbnail=thumbnail, payload=payload)


def _write_all(writer: BinaryIO, data) -> None:
    """Write every byte of ``data``, looping over short writes."""
    view = memoryview(data).cast("B")
    while view:
        try:
            n = writer.write(view)
        except OSError as e:
            raise XGCodeIOError(str(e)) from e
        if not n:
            raise XGCodeIOError(f"stream accepted no data ({len(view)} bytes pending)")
        view = view[n:]


def write(doc, writer: BinaryIO) -> None:
    """Encode ``doc`` onto a binary stream.

    ``doc`` is any object with ``header``, ``thumbnail`` and ``payload``;
    the blobs may be any bytes-like object and are written without copying.
    """
    payload_offset = THUMB_OFFSET + len(doc.thumbnail)
    if payload_offset > MAX_OFFSET:
        raise ThumbnailTooLarge(len(doc.thumbnail))

    _write_all(writer, struct.pack(PREAMBLE_FMT, XGCODE_MAGIC, THUMB_OFFSET, payload_offset, payload_offset))
    _write_all(writer, doc.header.pack())
    _write_all(writer, doc.thumbnail)
    _write_all(writer, doc.payload)


def decode(data: bytes, strict: bool = False) -> Document:
    return read(io.BytesIO(data), strict=strict)


def encode(doc) -> bytes:
    buf = io.BytesIO()
    write(doc, buf)
    return buf.getvalue()


def load(path: Path | str, strict: bool = False) -> Document:
    try:
        f = open(path, "rb")
    except OSError as e:
        raise XGCodeIOError(str(e)) from e
    with f:
        return read(f, strict=strict)


def dump(doc, path: Path | str) -> None:
    """Write ``doc`` to ``path`` atomically.

    Bytes go to a temporary sibling first; on any failure the target is
    left untouched. The file is created with the usual umask-derived mode.
    """
    path = Path(path)
    # Fail before touching the filesystem.
    if THUMB_OFFSET + len(doc.thumbnail) > MAX_OFFSET:
        raise ThumbnailTooLarge(len(doc.thumbnail))

    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        f = open(tmp_path, "xb")
    except OSError as e:
        raise XGCodeIOError(str(e)) from e
    try:
        with f:
            write(doc, f)
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink()
        raise XGCodeIOError(str(e)) from e
    except BaseException:
        tmp_path.unlink()
        raise
