from typing import Tuple

from bitops import BitReader, BitWriter
from huffman import (
    Codebook,
    CodeTable,
    count_frequencies,
    serialize_codebook,
)


class DecodeError(ValueError):
    """Payload bits that the codebook cannot turn back into text."""


class HuffmanCodec:
    """Huffman text codec.

    Produces a raw MSB-first payload with no header, plus codebook text
    carrying the code table and the padding of the final payload byte.
    """

    @staticmethod
    def encode(text: str, table: CodeTable) -> Tuple[bytes, int]:
        """Pack the codes of ``text`` into bytes.

        :param text: Text to encode.
        :type text: str
        :param table: Code table covering every character of ``text``.
        :type table: CodeTable
        :returns: Tuple ``(payload, padding)`` where ``padding`` is the
            number of zero bits filling the last byte (0-7).
        :rtype: Tuple[bytes, int]
        :raises KeyError: If a character of ``text`` has no code.
        """
        writer = BitWriter()
        for symbol in text:
            writer.write_code(table.code(symbol))
        payload = writer.flush()
        return payload, writer.padding

    @staticmethod
    def decode(payload: bytes, codebook: Codebook) -> str:
        """Recover text from ``payload``.

        Bits are accumulated one at a time and looked up in the codebook
        after each bit; a hit emits its symbol and starts a new candidate.

        :param payload: Bytes produced by :meth:`encode`.
        :type payload: bytes
        :param codebook: Codebook the payload was written with.
        :type codebook: Codebook
        :returns: Decoded text.
        :rtype: str
        :raises DecodeError: If the padding does not fit the payload, or the
            bits do not split into codebook entries.
        """
        if not payload:
            if codebook.padding:
                raise DecodeError(
                    f"Padding {codebook.padding} given for an empty payload"
                )
            return ""
        if not 0 <= codebook.padding <= 7:
            raise DecodeError(f"Invalid padding: {codebook.padding}")
        decode_map = codebook.decode_map
        if not decode_map:
            raise DecodeError("Codebook has no codes")

        reader = BitReader(payload, limit=len(payload) * 8 - codebook.padding)
        max_len = codebook.max_code_length
        result = []
        candidate = ""
        while reader.bits_remaining():
            candidate += "1" if reader.read_bit() else "0"
            symbol = decode_map.get(candidate)
            if symbol is not None:
                result.append(symbol)
                candidate = ""
            elif len(candidate) >= max_len:
                raise DecodeError(
                    f"No code matches bits {candidate!r} "
                    f"ending at bit {reader.consumed}"
                )
        if candidate:
            raise DecodeError(
                f"Payload ends inside a code: {candidate!r} left over"
            )
        return "".join(result)

    def compress(self, text: str) -> Tuple[bytes, str]:
        """Encode ``text`` with a code table built from its own frequencies.

        :param text: Text to compress.
        :type text: str
        :returns: Tuple ``(payload, codebook_text)``.
        :rtype: Tuple[bytes, str]
        """
        table = CodeTable.from_frequencies(count_frequencies(text))
        payload, padding = self.encode(text, table)
        return payload, serialize_codebook(table, padding)

    def decompress(self, payload: bytes, codebook_text: str) -> str:
        """Decode ``payload`` with the codebook serialized in ``codebook_text``.

        :raises DecodeError: See :meth:`decode`.
        """
        return self.decode(payload, Codebook.parse(codebook_text))
