import heapq
from typing import Dict, List, Optional, Sequence

from bitops import BitWriter, BitReader

SYMBOLS = 256  #: Size of the byte alphabet


class HuffmanNode:
    """Vertex of a binary Huffman tree.

    A node has either no children (leaf) or both of them (internal node).

    :ivar weight: Sum of the frequencies of all leaves below this node.
    :type weight: int
    :ivar symbol: Byte value stored at a leaf; unused on internal nodes.
    :type symbol: int
    :ivar zero: Child reached by a ``0`` bit.
    :type zero: HuffmanNode | None
    :ivar one: Child reached by a ``1`` bit.
    :type one: HuffmanNode | None
    :ivar parent: Back-reference to the parent, ``None`` on the root. Only
                  walked upward by :meth:`HuffmanTree.encode`.
    :type parent: HuffmanNode | None
    :ivar order: Creation sequence number, the secondary priority key.
    :type order: int
    """

    __slots__ = ("weight", "symbol", "zero", "one", "parent", "order")

    def __init__(self, weight=0, symbol=0, order=0, zero=None, one=None):
        """Create a Huffman node and adopt the given children.

        :param int weight: Weight of the subtree rooted at this node.
        :param int symbol: Symbol value for leaf nodes.
        :param int order: Creation sequence number.
        :param zero: Zero-child, if any.
        :type zero: HuffmanNode | None
        :param one: One-child, if any.
        :type one: HuffmanNode | None
        :returns: None
        :rtype: None
        """
        self.weight = weight
        self.symbol = symbol
        self.order = order
        self.zero = zero
        self.one = one
        self.parent = None
        if zero is not None:
            zero.parent = self
        if one is not None:
            one.parent = self

    @property
    def is_leaf(self) -> bool:
        return self.zero is None and self.one is None

    def __lt__(self, other):
        """Order nodes by weight, then by creation order.

        :param other: Another node to compare with.
        :type other: HuffmanNode
        :returns: ``True`` if this node must be extracted before ``other``.
        :rtype: bool
        """
        return (self.weight, self.order) < (other.weight, other.order)


class HuffmanTree:
    """Static Huffman coding tree over the byte alphabet.

    The tree is rebuilt from a 256-entry frequency table alone, so an
    encoder and a decoder holding the same table derive identical codes.

    :ivar root: Root node; ``None`` before :meth:`build` is called.
    :type root: HuffmanNode | None
    :ivar leaves: Leaf for every symbol, indexed by symbol value, ``None``
                  for symbols with zero frequency.
    :type leaves: List[HuffmanNode | None]
    """

    def __init__(self, frequencies: Optional[Sequence[int]] = None):
        """Create an empty tree, building it right away if ``frequencies``
        is given.

        :param frequencies: Optional 256-entry frequency table.
        :type frequencies: Sequence[int] | None
        :returns: None
        :rtype: None
        """
        self.root: Optional[HuffmanNode] = None
        self.leaves: List[Optional[HuffmanNode]] = [None] * SYMBOLS
        if frequencies is not None:
            self.build(frequencies)

    def build(self, frequencies: Sequence[int]):
        """Build the tree from a frequency table.

        Leaves are created in ascending symbol order. Ties on weight are
        broken by creation order, first created first extracted, and the
        first node extracted in a merge becomes the zero-child.

        An all-zero table yields a childless placeholder root that has no
        leaf entry; callers never encode or decode with it.

        :param frequencies: Sequence of 256 non-negative counts.
        :type frequencies: Sequence[int]
        :returns: None
        :rtype: None
        :raises ValueError: If the table does not have 256 entries.
        """
        if len(frequencies) != SYMBOLS:
            raise ValueError(
                f"Frequency table must have {SYMBOLS} entries, "
                f"got {len(frequencies)}"
            )

        self.leaves = [None] * SYMBOLS
        order = 0
        heap: List[HuffmanNode] = []
        for symbol, weight in enumerate(frequencies):
            if weight:
                leaf = HuffmanNode(weight=weight, symbol=symbol, order=order)
                order += 1
                self.leaves[symbol] = leaf
                heap.append(leaf)
        heapq.heapify(heap)

        while len(heap) > 1:
            zero = heapq.heappop(heap)
            one = heapq.heappop(heap)
            merged = HuffmanNode(
                weight=zero.weight + one.weight, order=order,
                zero=zero, one=one,
            )
            order += 1
            heapq.heappush(heap, merged)

        self.root = heap[0] if heap else HuffmanNode()

    def _leaf(self, symbol: int) -> HuffmanNode:
        leaf = self.leaves[symbol] if 0 <= symbol < SYMBOLS else None
        if leaf is None:
            raise KeyError(f"Symbol {symbol} is not present in the tree")
        return leaf

    def _path(self, symbol: int) -> List[int]:
        """Bits from the root down to ``symbol``'s leaf."""
        node = self._leaf(symbol)
        bits = []
        while node.parent is not None:
            bits.append(1 if node is node.parent.one else 0)
            node = node.parent
        bits.reverse()
        return bits

    def encode(self, symbol: int, out: BitWriter):
        """Write the code of ``symbol`` to ``out``, most significant bit first.

        When the tree has a single leaf, the root itself, nothing is written.

        :param symbol: Byte value with non-zero frequency.
        :type symbol: int
        :param out: Bit sink.
        :type out: BitWriter
        :returns: None
        :rtype: None
        :raises KeyError: If ``symbol`` has no leaf.
        """
        for bit in self._path(symbol):
            out.write_bit(bit)

    def decode(self, reader: BitReader) -> int:
        """Read bits from ``reader`` until a leaf is reached.

        A single-leaf tree returns its symbol without consuming any bit.

        :param reader: Bit source positioned at the start of a code.
        :type reader: BitReader
        :returns: Decoded byte value.
        :rtype: int
        :raises EOFError: If ``reader`` runs out before a leaf is reached.
        """
        node = self.root
        while not node.is_leaf:
            node = node.one if reader.read_bit() else node.zero
        return node.symbol

    def code_for(self, symbol: int) -> str:
        """Return the code of ``symbol`` as a string of ``0``/``1``."""
        return "".join(str(bit) for bit in self._path(symbol))

    def codes(self) -> Dict[int, str]:
        """Return the code of every symbol present in the tree.

        :returns: Mapping from symbol to its code string, in symbol order.
        :rtype: Dict[int, str]
        """
        return {
            leaf.symbol: self.code_for(leaf.symbol)
            for leaf in self.leaves
            if leaf is not None
        }

    def encoded_bit_length(self, frequencies: Sequence[int]) -> int:
        """Total payload size in bits for data with the given frequencies.

        :param frequencies: Frequency table the tree was built from.
        :type frequencies: Sequence[int]
        :returns: Sum of ``frequency * code length`` over present symbols.
        :rtype: int
        """
        return sum(
            frequencies[symbol] * len(code)
            for symbol, code in self.codes().items()
        )
