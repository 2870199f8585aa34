"""xgcode protocol constants.

Single source of truth for the on-disk magic, fixed offsets and record layouts.
Keep this file stable. Reader and writer must remain synchronized.
"""

# File magic: ASCII tag plus NUL padding to 16 bytes
XGCODE_MAGIC = b"xgcode 1.0\n\0\0\0\0\0"

# Preamble: [Magic(16) | ThumbOffset(4) | PayloadOffset(4) | PayloadOffset(4)] = 28 bytes
PREAMBLE_FMT = "<16sIII"
PREAMBLE_LEN = 28

# Header: [PrintTime(4) | Fil0(4) | Fil1(4) | 9 x u16] = 30 bytes
HEADER_FMT = "<IIIHHHHHHHHH"
HEADER_LEN = 30

# The thumbnail always starts right after the fixed header.
THUMB_OFFSET = PREAMBLE_LEN + HEADER_LEN  # 0x3A

# Offset fields are u32
MAX_OFFSET = 0xFFFFFFFF

# (name, width in bytes, file offset) in on-disk order
HEADER_FIELDS = (
    ("print_time", 4, 0x1C),
    ("filament_0_usage", 4, 0x20),
    ("filament_1_usage", 4, 0x24),
    ("multi_extruder_type", 2, 0x28),
    ("layer_height", 2, 0x2A),
    ("reserved0", 2, 0x2C),
    ("perimeter_shells", 2, 0x2E),
    ("print_speed", 2, 0x30),
    ("hotbed_temp", 2, 0x32),
    ("extruder_0_temp", 2, 0x34),
    ("extruder_1_temp", 2, 0x36),
    ("reserved1", 2, 0x38),
)

RESERVED_FIELDS = ("reserved0", "reserved1")

# Thumbnails are BMP files (80x60, 8-bit RGB)
BMP_SIGNATURE = b"BM"

# Bounded read size for blobs whose length comes from the file itself
READ_CHUNK_SIZE = 64 * 1024  # 64 KiB
