from typing import Iterable, Optional


class BitWriter:
    """MSB-first bit-packing writer.

    Accumulates individual bits into bytes and buffers them until
    flushed. The number of zero bits used to pad the final byte is kept
    in ``padding`` once :meth:`flush` has run.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    :ivar padding: Zero bits appended by the last :meth:`flush` (0-7).
    :type padding: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0
        self.padding = 0

    def write_bit(self, bit: bool):
        """Append a single bit.

        :param bit: ``True`` for 1, ``False`` for 0.
        :type bit: bool
        :returns: None
        :rtype: None
        """
        self.bit_buffer = (self.bit_buffer << 1) | (1 if bit else 0)
        self.bit_count += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def write_code(self, bits: Iterable[bool]):
        """Append every bit of ``bits`` in order.

        :param bits: Bit sequence, first bit written first.
        :type bits: Iterable[bool]
        :returns: None
        :rtype: None
        """
        for bit in bits:
            self.write_bit(bit)

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        Any partial byte in ``bit_buffer`` is padded with zeros on the
        right to complete the byte before being appended, and the number
        of zero bits added is stored in ``padding``.

        :returns: The accumulated bytes written so far.
        :rtype: bytes
        """
        self.padding = 0
        if self.bit_count > 0:
            self.padding = 8 - self.bit_count
            self.bit_buffer <<= self.padding
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0
        return bytes(self.buffer)


class BitReader:
    """MSB-first bit reader over a bytes-like object.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Current position in ``data`` (byte index).
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    :ivar limit: Number of readable bits; bits past it are treated as absent.
    :type limit: int
    :ivar consumed: Number of bits read so far.
    :type consumed: int
    """

    def __init__(self, data: bytes, limit: Optional[int] = None):
        """Create a bit reader for the given input ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :param limit: Number of usable bits, counted from the start of
            ``data``. Defaults to every bit of ``data``.
        :type limit: Optional[int]
        :returns: None
        :rtype: None
        :raises ValueError: If ``limit`` is negative or exceeds the data.
        """
        total = len(data) * 8
        if limit is None:
            limit = total
        if limit < 0 or limit > total:
            raise ValueError(
                f"Bit limit {limit} out of range for {len(data)} bytes"
            )
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0
        self.limit = limit
        self.consumed = 0

    def bits_remaining(self) -> int:
        """Number of usable bits not read yet.

        :rtype: int
        """
        return self.limit - self.consumed

    def read_bit(self) -> int:
        """Read the next bit.

        :returns: 0 or 1.
        :rtype: int
        :raises EOFError: If the usable bits are exhausted.
        """
        if self.consumed >= self.limit:
            raise EOFError("Unexpected end of data")
        if self.bit_count == 0:
            self.bit_buffer = self.data[self.pos]
            self.pos += 1
            self.bit_count = 8
        self.bit_count -= 1
        self.consumed += 1
        return (self.bit_buffer >> self.bit_count) & 1
