import struct

import pytest

MAGIC = b"xgcode 1.0\n\0\0\0\0\0"

GCODE = (
    b";start gcode\n"
    b"M140 S60\n"
    b"M104 S210 T0\n"
    b"G28\n"
    b"G1 Z0.2 F1200\n"
    b"G1 X20 Y20 E1.5 F1800\n"
    b"M107\n"
    b";end gcode\n"
)


def make_bitmap(width: int = 80, height: int = 60) -> bytes:
    """Uncompressed 24-bit BMP filled with a gradient."""
    row_len = (width * 3 + 3) & ~3
    pixels = bytearray()
    for y in range(height):
        row = bytearray()
        for x in range(width):
            row += bytes((x * 3 % 256, y * 4 % 256, 0x80))
        row += b"\0" * (row_len - len(row))
        pixels += row
    info = struct.pack("<IiiHHIIiiII", 40, width, height, 1, 24, 0, len(pixels), 2835, 2835, 0, 0)
    file_header = struct.pack("<2sIHHI", b"BM", 14 + len(info) + len(pixels), 0, 0, 14 + len(info))
    return file_header + info + bytes(pixels)


def build_gx(fields=(0,) * 12, thumbnail=b"", payload=b"", offsets=None) -> bytes:
    """Assemble a .gx image by hand, independent of the codec."""
    off = 0x3A + len(thumbnail)
    thumb_off, off1, off2 = offsets or (0x3A, off, off)
    return (
        MAGIC
        + struct.pack("<III", thumb_off, off1, off2)
        + struct.pack("<IIIHHHHHHHHH", *fields)
        + thumbnail
        + payload
    )


@pytest.fixture
def sample_bytes() -> bytes:
    # 20mm box: 42 min print, 0.2 mm layers, PLA at 210/60 °C
    fields = (2520, 1873, 0, 0, 200, 0, 2, 60, 60, 210, 0, 0)
    return build_gx(fields, make_bitmap(), GCODE)


@pytest.fixture
def sample_file(tmp_path, sample_bytes):
    p = tmp_path / "20mm_Box.gx"
    p.write_bytes(sample_bytes)
    return p
