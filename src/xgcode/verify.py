from __future__ import annotations

from pathlib import Path

from xgcode.codec import decode, encode
from xgcode.errors import ERRORS, XGCodeError
from xgcode.protocol import BMP_SIGNATURE


def looks_like_bitmap(thumbnail: bytes) -> bool:
    return len(thumbnail) >= 2 and thumbnail[:2] == BMP_SIGNATURE


def _fail(errors: list[dict]) -> dict:
    return {"status": "FAIL", "error_count": len(errors), "errors": errors}


def verify_file(path: Path, strict: bool = False) -> dict:
    """Decode ``path``, re-encode it and compare against the original bytes."""
    errors = []

    try:
        original = Path(path).read_bytes()
    except OSError as e:
        errors.append({"code": "E_IO", "message": f"{ERRORS['E_IO']}: {e}", "path": str(path)})
        return _fail(errors)

    try:
        doc = decode(original, strict=strict)
    except XGCodeError as e:
        errors.append({"code": e.code, "message": str(e), "path": str(path), **e.details()})
        return _fail(errors)

    reencoded = encode(doc)
    if reencoded != original:
        # First differing offset, or the shorter length if one is a prefix.
        first = next(
            (i for i, (a, b) in enumerate(zip(original, reencoded)) if a != b),
            min(len(original), len(reencoded)),
        )
        errors.append({
            "code": "E_ROUND_TRIP",
            "message": ERRORS["E_ROUND_TRIP"],
            "offset": first,
            "expected_len": len(original),
            "computed_len": len(reencoded),
        })
        return _fail(errors)

    if not looks_like_bitmap(doc.thumbnail):
        errors.append({
            "code": "E_THUMB_SIGNATURE",
            "message": ERRORS["E_THUMB_SIGNATURE"],
            "signature": doc.thumbnail[:2].hex(),
        })
        return _fail(errors)

    return {"status": "PASS", "error_count": 0, "errors": []}
