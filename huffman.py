import heapq
from collections import Counter
from typing import Dict, Iterator, List, Optional, Tuple

Code = Tuple[bool, ...]

PADDING_KEY = "space"  #: Codebook key holding the payload padding count
NEWLINE_FIELD = ""  #: Codebook symbol field standing for a newline
_PADDING_VALUES = {str(n) for n in range(8)}


def count_frequencies(text: str) -> Counter:
    """Count how often every character occurs in ``text``.

    Keys keep first-occurrence order, which the tree builder relies on
    for its tie-break.

    :param text: Input text.
    :type text: str
    :returns: Mapping from character to occurrence count (empty for ``""``).
    :rtype: Counter
    """
    return Counter(text)


class HuffmanNode:
    """Node for a binary Huffman tree.

    :ivar symbol: The character stored at a leaf; ``None`` for internal nodes.
    :type symbol: str | None
    :ivar freq: Frequency (weight) of the subtree rooted at this node.
    :type freq: int
    :ivar left: Left child node.
    :type left: HuffmanNode | None
    :ivar right: Right child node.
    :type right: HuffmanNode | None
    """

    def __init__(self, symbol=None, freq=0, left=None, right=None):
        """Create a Huffman node.

        :param symbol: Character for leaf nodes; ``None`` for internal nodes.
        :type symbol: str | None
        :param int freq: Frequency (weight) associated with this node.
        :param left: Left child node, if any.
        :type left: HuffmanNode|None
        :param right: Right child node, if any.
        :type right: HuffmanNode|None
        :returns: None
        :rtype: None
        """
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        """Whether this node has no children."""
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode({self.symbol!r}, {self.freq})"
        return f"HuffmanNode(freq={self.freq})"


def build_tree(frequencies: Dict[str, int]) -> Optional[HuffmanNode]:
    """Build a Huffman tree from a symbol frequency table.

    The two lightest nodes are merged until one remains. The node popped
    first becomes the left child. Ties on weight go to the node created
    first: leaves in the iteration order of ``frequencies``, then merged
    nodes in creation order.

    :param frequencies: Mapping from symbol to observed frequency.
    :type frequencies: Dict[str, int]
    :returns: Root node, the sole leaf for a one-symbol table, or ``None``
        for an empty table.
    :rtype: Optional[HuffmanNode]
    :raises ValueError: If a frequency is not positive.
    """
    if not frequencies:
        return None

    heap: List[Tuple[int, int, HuffmanNode]] = []
    for seq, (symbol, freq) in enumerate(frequencies.items()):
        if freq <= 0:
            raise ValueError(f"Frequency of {symbol!r} must be positive")
        heap.append((freq, seq, HuffmanNode(symbol=symbol, freq=freq)))
    heapq.heapify(heap)

    seq = len(heap)
    while len(heap) > 1:
        _, _, left = heapq.heappop(heap)
        _, _, right = heapq.heappop(heap)
        merged = HuffmanNode(freq=left.freq + right.freq, left=left, right=right)
        heapq.heappush(heap, (merged.freq, seq, merged))
        seq += 1

    return heap[0][2]


def bits_to_str(code: Code) -> str:
    """Render a bit tuple as a ``0/1`` string.

    :param code: Bits, first bit first.
    :type code: Tuple[bool, ...]
    :returns: String such as ``"0110"``.
    :rtype: str
    """
    return "".join("1" if bit else "0" for bit in code)


class CodeTable:
    """Symbol to prefix-code mapping derived from a Huffman tree.

    Codes are root-to-leaf paths, ``False`` (0) for a left branch and
    ``True`` (1) for a right branch. The table is read-only once built.
    """

    def __init__(self, codes: Dict[str, Code]):
        self._codes = dict(codes)

    @classmethod
    def from_tree(cls, root: Optional[HuffmanNode]) -> "CodeTable":
        """Derive codes by a depth-first walk of ``root``.

        A tree made of a single leaf gives that leaf the one-bit code ``0``
        so every symbol costs at least one bit.

        :param root: Root of the tree, or ``None`` for an empty tree.
        :type root: Optional[HuffmanNode]
        :returns: The code table.
        :rtype: CodeTable
        """
        codes: Dict[str, Code] = {}
        if root is None:
            return cls(codes)
        if root.is_leaf:
            codes[root.symbol] = (False,)
            return cls(codes)

        stack: List[Tuple[HuffmanNode, Code]] = [(root, ())]
        while stack:
            node, path = stack.pop()
            if node.is_leaf:
                codes[node.symbol] = path
                continue
            # right first so the left subtree is visited first
            stack.append((node.right, path + (True,)))
            stack.append((node.left, path + (False,)))
        return cls(codes)

    @classmethod
    def from_frequencies(cls, frequencies: Dict[str, int]) -> "CodeTable":
        """Build the tree for ``frequencies`` and derive its codes.

        :param frequencies: Mapping from symbol to observed frequency.
        :type frequencies: Dict[str, int]
        :returns: The code table.
        :rtype: CodeTable
        """
        return cls.from_tree(build_tree(frequencies))

    @property
    def codes(self) -> Dict[str, Code]:
        """Copy of the symbol to bit-tuple mapping."""
        return dict(self._codes)

    def code(self, symbol: str) -> Code:
        """Return the bits for ``symbol``.

        :raises KeyError: If ``symbol`` has no code.
        """
        return self._codes[symbol]

    def __getitem__(self, symbol: str) -> str:
        return bits_to_str(self._codes[symbol])

    def __contains__(self, symbol) -> bool:
        return symbol in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._codes)

    def inverse(self) -> Dict[str, str]:
        """Bit-string to symbol mapping used for decoding."""
        return {bits_to_str(code): symbol for symbol, code in self._codes.items()}

    def encoded_bit_length(self, frequencies: Dict[str, int]) -> int:
        """Total payload bits for text with the given ``frequencies``.

        :raises KeyError: If a symbol in ``frequencies`` has no code.
        """
        return sum(freq * len(self._codes[s]) for s, freq in frequencies.items())


def serialize_codebook(table: CodeTable, padding: int) -> str:
    """Render ``table`` and ``padding`` as codebook text.

    The first line is ``space:<padding>``; every following line is
    ``<symbol>:<bits>``, with an empty symbol field for a newline.

    :param table: Code table to serialize.
    :type table: CodeTable
    :param padding: Zero bits padding the last payload byte (0-7).
    :type padding: int
    :returns: Codebook text, every line ending in ``\\n``.
    :rtype: str
    :raises ValueError: If ``padding`` is outside 0-7.
    """
    if not 0 <= padding <= 7:
        raise ValueError(f"Padding must be in 0..7, got {padding}")
    lines = [f"{PADDING_KEY}:{padding}"]
    for symbol in table:
        field = NEWLINE_FIELD if symbol == "\n" else symbol
        lines.append(f"{field}:{table[symbol]}")
    return "".join(line + "\n" for line in lines)


def _is_bitstring(text: str) -> bool:
    """Whether ``text`` is a non-empty string of ``0`` and ``1``."""
    return bool(text) and all(c in "01" for c in text)


class Codebook:
    """Parsed codebook: inverse code mapping plus padding count.

    :ivar decode_map: Mapping from bit-string to symbol.
    :type decode_map: Dict[str, str]
    :ivar padding: Zero bits padding the last payload byte.
    :type padding: int
    """

    def __init__(self, decode_map: Dict[str, str], padding: int = 0):
        self.decode_map = dict(decode_map)
        self.padding = padding

    @classmethod
    def from_table(cls, table: CodeTable, padding: int = 0) -> "Codebook":
        """Build a codebook straight from a code table.

        :param table: Code table to invert.
        :type table: CodeTable
        :param int padding: Zero bits padding the last payload byte.
        :returns: The codebook.
        :rtype: Codebook
        """
        return cls(table.inverse(), padding)

    @classmethod
    def parse(cls, text: str) -> "Codebook":
        """Parse codebook text produced by :func:`serialize_codebook`.

        Lines are split on ``\\n`` only, because other line-break
        characters can be symbols. The bit field is whatever follows the
        last ``:``, so a colon symbol reads as ``::<bits>``. Lines that do
        not fit the format are skipped.

        :param text: Codebook text.
        :type text: str
        :returns: The parsed codebook.
        :rtype: Codebook
        """
        decode_map: Dict[str, str] = {}
        padding = 0
        for line in text.split("\n"):
            field, sep, value = line.rpartition(":")
            if not sep:
                continue
            if field == PADDING_KEY:
                if value in _PADDING_VALUES:
                    padding = int(value)
                continue
            if not _is_bitstring(value):
                continue
            if field == NEWLINE_FIELD:
                decode_map[value] = "\n"
            elif len(field) == 1:
                decode_map[value] = field
        return cls(decode_map, padding)

    @property
    def max_code_length(self) -> int:
        return max((len(bits) for bits in self.decode_map), default=0)

    def __repr__(self):
        return f"Codebook({len(self.decode_map)} codes, padding={self.padding})"
