import struct
from typing import List, Sequence, Tuple

from bitops import BitReader, BitWriter
from huffman import SYMBOLS

COUNT_MAX = 0xFFFF  #: Largest count a header field can hold
HEADER_FORMAT = f">{SYMBOLS}H"  #: 256 big-endian unsigned 16-bit counts
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  #: 512 bytes


class HeaderError(ValueError):
    """Raised when a frequency header cannot be written or read."""


def count_frequencies(reader: BitReader) -> List[int]:
    """Count byte occurrences by reading ``reader`` to its end.

    The reader is rewound afterwards so the same bytes can be encoded.

    :param reader: Source positioned at its first byte.
    :type reader: BitReader
    :returns: 256 counts indexed by byte value.
    :rtype: List[int]
    """
    freqs = [0] * SYMBOLS
    while reader.good():
        freqs[reader.read_byte()] += 1
    reader.reset()
    return freqs


def write_header(frequencies: Sequence[int], out: BitWriter):
    """Write the frequency table as a 512-byte block.

    :param frequencies: 256 counts in symbol order.
    :type frequencies: Sequence[int]
    :param out: Destination writer.
    :type out: BitWriter
    :returns: None
    :rtype: None
    :raises HeaderError: If a count does not fit in 16 bits.
    """
    if len(frequencies) != SYMBOLS:
        raise HeaderError(f"Expected {SYMBOLS} counts, got {len(frequencies)}")
    for symbol, count in enumerate(frequencies):
        if count > COUNT_MAX:
            raise HeaderError(
                f"Byte 0x{symbol:02x} occurs {count} times; "
                f"the header stores at most {COUNT_MAX} per byte value"
            )
    out.write_bytes(struct.pack(HEADER_FORMAT, *frequencies))


def read_header(reader: BitReader) -> Tuple[List[int], int]:
    """Read a 512-byte frequency block.

    :param reader: Source positioned at the start of the header.
    :type reader: BitReader
    :returns: Tuple ``(frequencies, total)`` where ``total`` is the number
              of symbols to decode.
    :rtype: Tuple[List[int], int]
    :raises HeaderError: If fewer than 512 bytes are available.
    """
    block = reader.read_bytes(HEADER_SIZE)
    if len(block) < HEADER_SIZE:
        raise HeaderError(
            f"Header truncated: expected {HEADER_SIZE} bytes, got {len(block)}"
        )
    freqs = list(struct.unpack(HEADER_FORMAT, block))
    return freqs, sum(freqs)
