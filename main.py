import argparse
import os
import sys

from typing import List, Optional
from codec import HuffmanCodec
from header import HeaderError


def get_parser(prog: str) -> argparse.ArgumentParser:
    """Create the argument parser shared by ``compress`` and ``decompress``.

    :param prog: Program name, ``"compress"`` or ``"decompress"``.
    :type prog: str
    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    action = "Compress" if prog == "compress" else "Decompress"
    parser = argparse.ArgumentParser(
        prog=prog,
        description=f"{action} a file with static Huffman coding",
    )
    parser.add_argument("input", help="Input file path")
    parser.add_argument("output", help="Output file path")
    parser.add_argument(
        "-P",
        "--no-progress",
        action="store_true",
        help="Hide the progress line",
    )
    if prog == "compress":
        parser.add_argument(
            "--show-codes",
            action="store_true",
            help="Print the code assigned to every byte value",
        )
    return parser


def _print_progress(line: str) -> None:
    """Render and flush a single progress line in-place (carriage return).

    :param line: The textual progress line to display.
    :type line: str
    :returns: None
    :rtype: None
    """
    sys.stdout.write("\r" + line)
    sys.stdout.flush()


def _fmt_pct(done: int, total: int) -> str:
    """Format a completion percentage string like ``12.34%``.

    :param done: Units completed.
    :type done: int
    :param total: Total units to complete.
    :type total: int
    :returns: Percentage.
    :rtype: str
    """
    if total <= 0:
        return "0%"
    pct = 100.0 * (done / float(total))
    return f"{pct:6.2f}%"


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def _fmt_symbol(symbol: int) -> str:
    """Render a byte value for the code table, e.g. ``0x41 'A'``."""
    char = chr(symbol)
    shown = repr(char) if char.isprintable() and symbol < 0x7F else ""
    return f"0x{symbol:02x} {shown}".rstrip()


class FileProgress:
    """Callable progress reporter for a single file.

    :ivar label: Action label (e.g., "Compressing" or "Decompressing").
    :type label: str
    :ivar path: Path displayed for the file being processed.
    :type path: str
    """

    def __init__(self, label: str, path: str) -> None:
        """Initialize progress reporter.

        :param label: Action label.
        :type label: str
        :param path: Path to display.
        :type path: str
        :returns: None
        :rtype: None
        """
        self.label = label
        self.path = path
        self._last_reported = -1

    def __call__(self, done: int, total: int) -> None:
        """Update the progress display.

        :param done: Bytes processed so far.
        :type done: int
        :param total: Total bytes to process.
        :type total: int
        :returns: None
        :rtype: None
        """
        if total <= 0:
            return
        percent_bucket = int((done * 100) / total)
        if percent_bucket == self._last_reported:
            return
        self._last_reported = percent_bucket
        _print_progress(f"{self.label} {self.path}  {_fmt_pct(done, total)}")


def compress_file(
    input_path: str, output_path: str, hide_progress: bool,
    show_codes: bool = False,
) -> None:
    """Compress ``input_path`` into ``output_path`` and print a summary.

    :param input_path: File to compress.
    :type input_path: str
    :param output_path: Destination file.
    :type output_path: str
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :param show_codes: Whether to print the code table.
    :type show_codes: bool
    :returns: None
    :rtype: None
    :raises OSError: If a file cannot be read or written.
    """
    codec = HuffmanCodec()
    on_prog = None if hide_progress else FileProgress("Compressing", input_path)
    before, after = codec.compress_file(input_path, output_path, on_prog)
    if on_prog is not None and before:
        sys.stdout.write("\n")
        sys.stdout.flush()
    if show_codes and before:
        for symbol, code in codec.tree.codes().items():
            print(f"{_fmt_symbol(symbol):<12} {codec.frequencies[symbol]:>6}  "
                  f"{code or '(empty)'}")
        bits = codec.tree.encoded_bit_length(codec.frequencies)
        print(f"Payload bits: {bits}")
    print("Size before compression: ", _fmt_bytes(before))
    print("Size after compression: ", _fmt_bytes(after))
    if after:
        print(f"Compression ratio: {before / after:.2f}")


def decompress_file(
    input_path: str, output_path: str, hide_progress: bool
) -> None:
    """Decompress ``input_path`` into ``output_path``.

    :param input_path: Compressed file.
    :type input_path: str
    :param output_path: Destination file.
    :type output_path: str
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :returns: None
    :rtype: None
    :raises OSError: If a file cannot be read or written.
    :raises HeaderError: If the input is shorter than the header.
    :raises EOFError: If the payload is truncated.
    """
    on_prog = (
        None if hide_progress else FileProgress("Decompressing", input_path)
    )
    _, after = HuffmanCodec().decompress_file(input_path, output_path, on_prog)
    if on_prog is not None and after:
        sys.stdout.write("\n")
        sys.stdout.flush()


def _run(prog: str, argv: Optional[List[str]]) -> int:
    args = get_parser(prog).parse_args(argv)
    if not os.path.isfile(args.input):
        print(f"[!] Input file not found: {args.input}")
        return 1
    try:
        if prog == "compress":
            compress_file(
                args.input, args.output, args.no_progress, args.show_codes
            )
        else:
            decompress_file(args.input, args.output, args.no_progress)
    except (HeaderError, EOFError) as e:
        print(f"[!] Corrupt or truncated input: {e}")
        return 1
    except OSError as e:
        print(f"[!] I/O error: {e}")
        return 1
    return 0


def compress_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``compress`` program.

    :param argv: Arguments without the program name; ``sys.argv[1:]`` if
                 ``None``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    return _run("compress", argv)


def decompress_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``decompress`` program.

    :param argv: Arguments without the program name; ``sys.argv[1:]`` if
                 ``None``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    return _run("decompress", argv)


def main():
    """Dispatch on the first argument: ``compress`` or ``decompress``.

    :returns: None
    :rtype: None
    """
    if len(sys.argv) < 2 or sys.argv[1] not in ("compress", "decompress"):
        print("usage: main.py {compress,decompress} <input> <output>")
        sys.exit(2)
    entry = compress_main if sys.argv[1] == "compress" else decompress_main
    sys.exit(entry(sys.argv[2:]))


if __name__ == "__main__":
    main()
