import random
import struct

import pytest

from codec import HuffmanCodec
from header import HEADER_SIZE, HeaderError


@pytest.mark.parametrize("data", [
    b"",
    b"\x41" * 1000,
    bytes(range(256)),
    b"z" * 5000 + b"abc" + bytes([0, 255]),
    b"The quick brown fox jumps over the lazy dog. " * 20,
    b"x",
])
def test_roundtrip(data):
    codec = HuffmanCodec()
    assert codec.decompress(codec.compress(data)) == data


def test_roundtrip_random_bytes():
    rng = random.Random(1234)
    data = bytes(rng.getrandbits(8) for _ in range(20000))
    assert HuffmanCodec().decompress(HuffmanCodec().compress(data)) == data


def test_empty_input_gives_empty_output():
    codec = HuffmanCodec()
    assert codec.compress(b"") == b""
    assert codec.decompress(b"") == b""


def test_header_counts_sum_to_input_length():
    data = b"mississippi river"
    comp = HuffmanCodec().compress(data)
    counts = struct.unpack(">256H", comp[:HEADER_SIZE])
    assert sum(counts) == len(data)
    assert counts[ord("s")] == 4


def test_single_symbol_has_no_payload():
    comp = HuffmanCodec().compress(b"\x41" * 1000)
    assert len(comp) == HEADER_SIZE
    assert HuffmanCodec().decompress(comp) == b"\x41" * 1000


def test_two_symbol_scenario():
    comp = HuffmanCodec().compress(b"ab")
    assert len(comp) == HEADER_SIZE + 1
    assert comp[HEADER_SIZE] >> 6 == 0b01


def test_skewed_input_compresses():
    data = b"\x00" * 10000 + b"\x01\x02\x03"
    comp = HuffmanCodec().compress(data)
    assert len(comp) < len(data) // 4


def test_decompress_short_header_raises():
    with pytest.raises(HeaderError):
        HuffmanCodec().decompress(b"\x00" * 100)


def test_decompress_truncated_payload_raises():
    data = b"This is a test" * 100
    comp = HuffmanCodec().compress(data)
    with pytest.raises(EOFError):
        HuffmanCodec().decompress(comp[:-3])


def test_decompress_zero_header_gives_empty_output():
    assert HuffmanCodec().decompress(b"\x00" * HEADER_SIZE) == b""


def test_compress_rejects_count_over_16_bits():
    with pytest.raises(HeaderError):
        HuffmanCodec().compress(b"a" * 65536)


def test_progress_reported_to_completion(progress_recorder):
    data = b"progress " * 50
    codec = HuffmanCodec()
    on_prog, calls = progress_recorder
    comp = codec.compress(data, on_progress=on_prog)
    assert calls[-1] == (len(data), len(data))
    assert len(calls) <= 101

    calls.clear()
    assert codec.decompress(comp, on_progress=on_prog) == data
    assert calls[-1] == (len(data), len(data))


def test_codec_keeps_tree_and_table():
    codec = HuffmanCodec()
    codec.compress(b"aab")
    assert codec.frequencies[ord("a")] == 2
    assert set(codec.tree.codes()) == {ord("a"), ord("b")}


def test_file_roundtrip(sample_file, tmp_path):
    packed = tmp_path / "sample.huf"
    unpacked = tmp_path / "sample.out"
    codec = HuffmanCodec()
    before, after = codec.compress_file(str(sample_file), str(packed))
    assert before == sample_file.stat().st_size
    assert after == packed.stat().st_size
    codec.decompress_file(str(packed), str(unpacked))
    assert unpacked.read_bytes() == sample_file.read_bytes()


def test_empty_file_roundtrip(tmp_path):
    src = tmp_path / "empty"
    src.write_bytes(b"")
    packed = tmp_path / "empty.huf"
    HuffmanCodec().compress_file(str(src), str(packed))
    assert packed.exists() and packed.stat().st_size == 0
    out = tmp_path / "empty.out"
    HuffmanCodec().decompress_file(str(packed), str(out))
    assert out.read_bytes() == b""


def test_compress_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        HuffmanCodec().compress_file(
            str(tmp_path / "nope"), str(tmp_path / "out")
        )
    assert not (tmp_path / "out").exists()
