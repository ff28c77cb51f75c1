class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits, most significant bit first, into bytes and
    buffers them until flushed.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0

    def write_bit(self, bit: int):
        """Append a single bit.

        :param bit: ``0`` or ``1``; any non-zero value counts as ``1``.
        :type bit: int
        :returns: None
        :rtype: None
        """
        self.bit_buffer = (self.bit_buffer << 1) | (1 if bit else 0)
        self.bit_count += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def _pad(self):
        if self.bit_count > 0:
            self.bit_buffer <<= (8 - self.bit_count)
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def write_bytes(self, data: bytes):
        """Write raw bytes, aligning pending bits to the next byte boundary.

        :param data: Byte sequence to append to the output.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self._pad()
        self.buffer.extend(data)

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        A partial byte is padded with zero bits on the right.

        :returns: The accumulated bytes written so far.
        :rtype: bytes
        """
        self._pad()
        return bytes(self.buffer)


class BitReader:
    """Sequential bit and byte reader over an in-memory buffer.

    :ivar data: Input data to read bits/bytes from.
    :type data: bytes
    :ivar pos: Current position in ``data`` (byte index).
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    """

    def __init__(self, data: bytes):
        """Create a bit reader for the given input ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0

    @property
    def size(self) -> int:
        """Total number of bytes in the source."""
        return len(self.data)

    def good(self) -> bool:
        """Return ``True`` while at least one unread bit remains."""
        return self.bit_count > 0 or self.pos < len(self.data)

    def reset(self):
        """Rewind to the first bit of the source.

        :returns: None
        :rtype: None
        """
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0

    def read_bit(self) -> int:
        """Read the next bit.

        :returns: ``0`` or ``1``.
        :rtype: int
        :raises EOFError: If the source is exhausted.
        """
        if self.bit_count == 0:
            if self.pos >= len(self.data):
                raise EOFError("Unexpected end of data")
            self.bit_buffer = self.data[self.pos]
            self.pos += 1
            self.bit_count = 8
        self.bit_count -= 1
        return (self.bit_buffer >> self.bit_count) & 1

    def read_byte(self) -> int:
        """Read one whole byte, discarding any pending bits first.

        :returns: Byte value in ``0..255``.
        :rtype: int
        :raises EOFError: If no byte is left.
        """
        self.bit_count = 0
        if self.pos >= len(self.data):
            raise EOFError("Unexpected end of data")
        value = self.data[self.pos]
        self.pos += 1
        return value

    def read_bytes(self, nbytes: int) -> bytes:
        """Read ``nbytes`` raw bytes from the stream.

        Any pending bits are discarded (byte-aligns the stream) before reading.

        :param nbytes: Number of bytes to read.
        :type nbytes: int
        :returns: The next ``nbytes`` bytes (may be shorter only if source is shorter).
        :rtype: bytes
        """
        self.bit_count = 0
        result = self.data[self.pos:self.pos + nbytes]
        self.pos += len(result)
        return result
