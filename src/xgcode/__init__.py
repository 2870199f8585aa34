"""xgcode - codec for .gx printer files (header, BMP thumbnail, G-code payload)."""
from .codec import Document, Header, decode, dump, encode, load, read, write
from .errors import (
    BadHeaderSize,
    BadMagic,
    DataInReservedField,
    SecondGOffsetNotFound,
    ThumbnailTooLarge,
    ThumbSizeNegative,
    XGCodeError,
    XGCodeIOError,
)

__all__ = [
    "Document",
    "Header",
    "read",
    "write",
    "decode",
    "encode",
    "load",
    "dump",
    "XGCodeError",
    "BadMagic",
    "BadHeaderSize",
    "ThumbSizeNegative",
    "SecondGOffsetNotFound",
    "DataInReservedField",
    "ThumbnailTooLarge",
    "XGCodeIOError",
]
