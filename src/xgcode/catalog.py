from __future__ import annotations

import hashlib
from pathlib import Path
from warnings import warn

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from xgcode.codec import load
from xgcode.errors import XGCodeError
from xgcode.protocol import HEADER_FIELDS

CATALOG_SCHEMA = pa.schema(
    [("file", pa.string())]
    + [(name, pa.uint32() if width == 4 else pa.uint16()) for name, width, _ in HEADER_FIELDS]
    + [
        ("thumbnail_size", pa.int64()),
        ("payload_size", pa.int64()),
        ("thumbnail_hash", pa.string()),
        ("payload_hash", pa.string()),
    ]
)


def scan_directory(root: Path) -> list[dict]:
    """Decode every .gx file under ``root``; undecodable files are skipped."""
    rows: list[dict] = []
    root = Path(root)
    for path in sorted(root.rglob("*.gx")):
        if not path.is_file():
            continue
        try:
            doc = load(path)
        except XGCodeError as e:
            warn(f"Skipping {path}: {e}")
            continue

        row = {"file": path.relative_to(root).as_posix()}
        row.update(doc.header.to_dict())
        row["thumbnail_size"] = len(doc.thumbnail)
        row["payload_size"] = len(doc.payload)
        row["thumbnail_hash"] = hashlib.sha256(doc.thumbnail).hexdigest()
        row["payload_hash"] = hashlib.sha256(doc.payload).hexdigest()
        rows.append(row)
    return rows


def write_catalog(root: Path, out_path: Path) -> int:
    """Write the header catalog of ``root`` as Parquet. Returns the row count."""
    rows = scan_directory(root)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(rows, columns=CATALOG_SCHEMA.names)
    table = pa.Table.from_pandas(df, schema=CATALOG_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path)
    return len(rows)
