"""Error taxonomy for the xgcode codec.

Every exception carries a stable ``code`` (see ``ERRORS``) plus the
diagnostic values that triggered it.
"""
from __future__ import annotations

ERRORS = {
    "E_BAD_MAGIC": "Bad magic header",
    "E_BAD_HEADER_SIZE": "Bad header size",
    "E_THUMB_SIZE_NEGATIVE": "Thumb size negative",
    "E_SECOND_OFFSET": "Second payload offset not found",
    "E_RESERVED_DATA": "Data in reserved field",
    "E_THUMBNAIL_TOO_LARGE": "Thumbnail too large",
    "E_IO": "IO error",
    # Report-only codes emitted by the verifier
    "E_ROUND_TRIP": "Re-encoded bytes differ from input",
    "E_THUMB_SIGNATURE": "Thumbnail missing BMP signature",
}


class XGCodeError(Exception):
    code = "E_XGCODE"

    def __init__(self, detail: str | None = None):
        message = ERRORS.get(self.code, "xgcode error")
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def details(self) -> dict:
        """Diagnostic payload as a JSON-friendly dict."""
        return {}


class BadMagic(XGCodeError):
    code = "E_BAD_MAGIC"

    def __init__(self, magic: bytes):
        self.magic = bytes(magic)
        super().__init__(repr(self.magic))

    def details(self) -> dict:
        return {"magic": self.magic.hex()}


class BadHeaderSize(XGCodeError):
    code = "E_BAD_HEADER_SIZE"

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"thumbnail offset {value:#x}")

    def details(self) -> dict:
        return {"value": self.value}


class ThumbSizeNegative(XGCodeError):
    code = "E_THUMB_SIZE_NEGATIVE"

    def __init__(self, size: int):
        self.size = size
        super().__init__(str(size))

    def details(self) -> dict:
        return {"size": self.size}


class SecondGOffsetNotFound(XGCodeError):
    code = "E_SECOND_OFFSET"

    def __init__(self, first: int, second: int):
        self.first = first
        self.second = second
        super().__init__(f"{first:#x} != {second:#x}")

    def details(self) -> dict:
        return {"first": self.first, "second": self.second}


class DataInReservedField(XGCodeError):
    code = "E_RESERVED_DATA"

    def __init__(self, offset: int, value: int):
        self.offset = offset
        self.value = value
        super().__init__(f"{value:#x} at offset {offset:#x}")

    def details(self) -> dict:
        return {"offset": self.offset, "value": self.value}


class ThumbnailTooLarge(XGCodeError):
    code = "E_THUMBNAIL_TOO_LARGE"

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"{length} bytes")

    def details(self) -> dict:
        return {"length": self.length}


class XGCodeIOError(XGCodeError):
    """Underlying stream failure. The original exception is ``__cause__``."""

    code = "E_IO"
