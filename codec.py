from typing import Callable, List, Optional, Tuple

from bitops import BitWriter, BitReader
from header import count_frequencies, read_header, write_header
from huffman import HuffmanTree

ProgressCallback = Callable[[int, int], None]


class _Progress:
    """Forward ``(done, total)`` to a callback once per whole percent."""

    def __init__(self, callback: Optional[ProgressCallback], total: int):
        self.callback = callback
        self.total = total
        self._last_bucket = -1

    def __call__(self, done: int):
        if self.callback is None or self.total <= 0:
            return
        bucket = (done * 100) // self.total
        if bucket != self._last_bucket or done == self.total:
            self._last_bucket = bucket
            self.callback(done, self.total)


class HuffmanCodec:
    """Static Huffman file codec.

    Output format:
    - 256 big-endian uint16 byte frequencies (512 bytes)
    - Huffman codes of every input byte in order, MSB-first, zero padded

    Empty input maps to empty output in both directions.

    :ivar tree: Tree built by the last ``compress``/``decompress`` call.
    :type tree: HuffmanTree
    :ivar frequencies: Frequency table used to build ``tree``.
    :type frequencies: List[int]
    """

    def __init__(self):
        """Initialize an empty codec.

        :returns: None
        :rtype: None
        """
        self.tree = HuffmanTree()
        self.frequencies: List[int] = []

    def compress(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Compress ``data``.

        :param data: Input bytes to compress.
        :type data: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
                            receiving the number of input bytes encoded.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Header followed by the encoded payload, or ``b""`` for
                  empty input.
        :rtype: bytes
        :raises HeaderError: If a byte value occurs more than 65535 times.
        """
        if not data:
            return b""

        source = BitReader(data)
        self.frequencies = count_frequencies(source)
        self.tree = HuffmanTree(self.frequencies)

        output = BitWriter()
        write_header(self.frequencies, output)

        progress = _Progress(on_progress, source.size)
        for done in range(1, source.size + 1):
            self.tree.encode(source.read_byte(), output)
            progress(done)

        return output.flush()

    def decompress(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Decompress data produced by ``compress``.

        :param data: Compressed byte stream.
        :type data: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
                            receiving the number of bytes recovered.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Original uncompressed bytes.
        :rtype: bytes
        :raises HeaderError: If ``data`` is shorter than the header.
        :raises EOFError: If the payload ends before every byte is decoded.
        """
        if not data:
            return b""

        reader = BitReader(data)
        self.frequencies, total = read_header(reader)
        if total == 0:
            return b""
        self.tree = HuffmanTree(self.frequencies)

        output = bytearray()
        progress = _Progress(on_progress, total)
        while len(output) < total:
            try:
                output.append(self.tree.decode(reader))
            except EOFError:
                raise EOFError(
                    f"Payload exhausted after {len(output)} of {total} bytes"
                ) from None
            progress(len(output))

        return bytes(output)

    def compress_file(
        self,
        src: str,
        dst: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Tuple[int, int]:
        """Compress the file at ``src`` into ``dst``.

        :param src: Input file path.
        :type src: str
        :param dst: Output file path; created or truncated.
        :type dst: str
        :param on_progress: Forwarded to :meth:`compress`.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Tuple ``(input size, output size)`` in bytes.
        :rtype: Tuple[int, int]
        :raises OSError: If a file cannot be read or written.
        """
        with open(src, "rb") as f:
            data = f.read()
        comp = self.compress(data, on_progress=on_progress)
        with open(dst, "wb") as out:
            out.write(comp)
        return len(data), len(comp)

    def decompress_file(
        self,
        src: str,
        dst: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Tuple[int, int]:
        """Decompress the file at ``src`` into ``dst``.

        The input is fully decoded before ``dst`` is opened, so malformed
        input leaves no output file behind.

        :param src: Compressed file path.
        :type src: str
        :param dst: Output file path; created or truncated.
        :type dst: str
        :param on_progress: Forwarded to :meth:`decompress`.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Tuple ``(input size, output size)`` in bytes.
        :rtype: Tuple[int, int]
        :raises OSError: If a file cannot be read or written.
        :raises HeaderError: If the input is shorter than the header.
        :raises EOFError: If the payload is truncated.
        """
        with open(src, "rb") as f:
            comp = f.read()
        data = self.decompress(comp, on_progress=on_progress)
        with open(dst, "wb") as out:
            out.write(data)
        return len(comp), len(data)
