from conftest import build_gx
from xgcode.verify import looks_like_bitmap, verify_file


def test_verify_pass(sample_file):
    result = verify_file(sample_file)
    assert result == {"status": "PASS", "error_count": 0, "errors": []}


def test_verify_bad_magic(tmp_path, sample_bytes):
    p = tmp_path / "bad.gx"
    p.write_bytes(b"ygcode" + sample_bytes[6:])
    result = verify_file(p)
    assert result["status"] == "FAIL"
    assert result["errors"][0]["code"] == "E_BAD_MAGIC"
    assert result["errors"][0]["magic"].startswith(b"ygcode".hex())


def test_verify_offset_mismatch(tmp_path):
    p = tmp_path / "bad.gx"
    p.write_bytes(build_gx(thumbnail=b"BM", offsets=(0x3A, 0x3C, 0x3D)))
    result = verify_file(p)
    assert result["errors"][0]["code"] == "E_SECOND_OFFSET"
    assert result["errors"][0]["first"] == 0x3C


def test_verify_strict_reserved(tmp_path):
    p = tmp_path / "reserved.gx"
    p.write_bytes(build_gx((0,) * 5 + (9,) + (0,) * 6, thumbnail=b"BM"))
    assert verify_file(p)["status"] == "PASS"
    result = verify_file(p, strict=True)
    assert result["errors"][0]["code"] == "E_RESERVED_DATA"
    assert result["errors"][0]["offset"] == 0x2C
    assert result["errors"][0]["value"] == 9


def test_verify_thumbnail_signature(tmp_path):
    p = tmp_path / "nothumb.gx"
    p.write_bytes(build_gx(thumbnail=b"\x89PNG", payload=b"G28\n"))
    result = verify_file(p)
    assert result["errors"][0]["code"] == "E_THUMB_SIGNATURE"
    assert result["errors"][0]["signature"] == "8950"


def test_looks_like_bitmap():
    assert looks_like_bitmap(b"BM\x00")
    assert not looks_like_bitmap(b"B")
    assert not looks_like_bitmap(b"")


def test_verify_unreadable_path_reports_io(tmp_path):
    result = verify_file(tmp_path / "missing.gx")
    assert result["status"] == "FAIL"
    assert result["errors"][0]["code"] == "E_IO"

    result = verify_file(tmp_path)
    assert result["errors"][0]["code"] == "E_IO"


def test_verify_reads_file_once(monkeypatch, sample_file):
    calls = []
    real = type(sample_file).read_bytes

    def counting_read_bytes(self):
        calls.append(self)
        return real(self)

    monkeypatch.setattr(type(sample_file), "read_bytes", counting_read_bytes)
    assert verify_file(sample_file)["status"] == "PASS"
    assert calls == [sample_file]
