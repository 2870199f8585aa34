"""xgcode command line tools."""
from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import NoReturn

import click

from xgcode.catalog import write_catalog
from xgcode.codec import Document, Header, dump, load
from xgcode.errors import XGCodeError
from xgcode.verify import verify_file

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}


def _fatal(e: Exception) -> NoReturn:
    # Fail closed, with a single-line reason.
    click.echo(f"FATAL: {e}")
    raise SystemExit(1)


@click.group()
def main():
    pass


@main.command("info")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def info_cmd(path: Path):
    """Print header fields and region sizes."""
    try:
        doc = load(path)
    except XGCodeError as e:
        _fatal(e)
    result = {
        "header": doc.header.to_dict(),
        "payload_offset": doc.payload_offset,
        "thumbnail_size": len(doc.thumbnail),
        "payload_size": len(doc.payload),
        "thumbnail_hash": hashlib.sha256(doc.thumbnail).hexdigest(),
        "payload_hash": hashlib.sha256(doc.payload).hexdigest(),
    }
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))


@main.command("verify")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Reject data in reserved header fields")
def verify_cmd(path: Path, strict: bool):
    """Check that PATH decodes and re-encodes byte for byte."""
    result = verify_file(path, strict=strict)
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))
    if result["status"] != "PASS":
        raise SystemExit(1)


@main.command("extract")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(file_okay=False, path_type=Path))
def extract_cmd(path: Path, out: Path):
    """Split PATH into header.json, thumbnail.bmp and payload.gcode."""
    try:
        doc = load(path)
    except XGCodeError as e:
        _fatal(e)
    out.mkdir(parents=True, exist_ok=True)
    (out / "header.json").write_text(json.dumps(doc.header.to_dict(), indent=2, sort_keys=True), encoding="utf-8")
    (out / "thumbnail.bmp").write_bytes(doc.thumbnail)
    (out / "payload.gcode").write_bytes(doc.payload)
    click.echo(f"Extracted {path} to {out}")


@main.command("pack")
@click.argument("header", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("thumbnail", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
def pack_cmd(header: Path, thumbnail: Path, payload: Path, out: Path):
    """Build OUT from a header JSON file, a thumbnail and a payload."""
    try:
        hdr = Header.from_dict(json.loads(header.read_text(encoding="utf-8")))
        doc = Document(header=hdr, thumbnail=thumbnail.read_bytes(), payload=payload.read_bytes())
        dump(doc, out)
    except (ValueError, TypeError, XGCodeError) as e:
        _fatal(e)
    click.echo(f"Packed {out} ({doc.payload_offset + len(doc.payload)} bytes)")


@main.command("index")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
def index_cmd(root: Path, out: Path):
    """Catalog the headers of every .gx file under ROOT into a Parquet table."""
    count = write_catalog(root, out)
    click.echo(f"Indexed {count} file(s) into {out}")


if __name__ == "__main__":
    main()
