import itertools
from fractions import Fraction

import pytest

from huffman import (
    Codebook,
    CodeTable,
    HuffmanNode,
    build_tree,
    count_frequencies,
    serialize_codebook,
)


def _count_nodes(node: HuffmanNode):
    if node.is_leaf:
        return 1, 0
    left_leaves, left_internal = _count_nodes(node.left)
    right_leaves, right_internal = _count_nodes(node.right)
    assert node.freq == node.left.freq + node.right.freq
    return left_leaves + right_leaves, left_internal + right_internal + 1


def _brute_force_cost(freqs):
    """Cheapest code cost over every length assignment meeting Kraft."""
    weights = list(freqs.values())
    n = len(weights)
    best = None
    for lengths in itertools.product(range(1, n), repeat=n):
        if sum(Fraction(1, 2 ** l) for l in lengths) > 1:
            continue
        cost = sum(w * l for w, l in zip(weights, lengths))
        if best is None or cost < best:
            best = cost
    return best


def test_count_frequencies_keeps_first_occurrence_order():
    freqs = count_frequencies("abracadabra")
    assert freqs == {"a": 5, "b": 2, "r": 2, "c": 1, "d": 1}
    assert list(freqs) == ["a", "b", "r", "c", "d"]


def test_count_frequencies_empty():
    assert count_frequencies("") == {}


def test_build_tree_empty_and_single():
    assert build_tree({}) is None
    root = build_tree({"x": 4})
    assert root.is_leaf
    assert root.symbol == "x" and root.freq == 4


def test_build_tree_rejects_non_positive_frequency():
    with pytest.raises(ValueError):
        build_tree({"a": 1, "b": 0})


def test_tree_shape_counts(sample_text):
    freqs = count_frequencies(sample_text)
    root = build_tree(freqs)
    leaves, internal = _count_nodes(root)
    assert leaves == len(freqs)
    assert internal == len(freqs) - 1
    assert root.freq == len(sample_text)


def test_two_symbol_codes_lighter_goes_left():
    table = CodeTable.from_frequencies({"a": 3, "b": 1})
    assert table["b"] == "0"
    assert table["a"] == "1"


def test_ties_resolve_in_creation_order():
    table = CodeTable.from_frequencies({"a": 1, "b": 1, "c": 1, "d": 1})
    assert {s: table[s] for s in table} == {
        "a": "00", "b": "01", "c": "10", "d": "11",
    }


def test_abracadabra_golden_codes():
    table = CodeTable.from_frequencies(count_frequencies("abracadabra"))
    assert {s: table[s] for s in table} == {
        "a": "0", "c": "100", "d": "101", "b": "110", "r": "111",
    }
    assert table.encoded_bit_length(count_frequencies("abracadabra")) == 23


def test_single_symbol_gets_one_bit_code():
    table = CodeTable.from_frequencies({"z": 7})
    assert table.codes == {"z": (False,)}
    assert table["z"] == "0"


def test_empty_table():
    table = CodeTable.from_tree(None)
    assert len(table) == 0
    assert table.inverse() == {}


def test_codes_are_prefix_free(sample_text):
    table = CodeTable.from_frequencies(count_frequencies(sample_text))
    codes = [table[s] for s in table]
    assert len(set(codes)) == len(codes)
    for a, b in itertools.permutations(codes, 2):
        assert not b.startswith(a)


@pytest.mark.parametrize("freqs", [
    {"a": 1, "b": 1, "c": 2, "d": 4, "e": 8},
    {"a": 5, "b": 5, "c": 5, "d": 5},
    {"a": 10, "b": 1, "c": 1},
    {"x": 3, "y": 7, "z": 2, "w": 9, "v": 1},
])
def test_code_cost_is_optimal(freqs):
    table = CodeTable.from_frequencies(freqs)
    assert table.encoded_bit_length(freqs) == _brute_force_cost(freqs)


def test_unknown_symbol_raises_keyerror():
    table = CodeTable.from_frequencies({"a": 1, "b": 2})
    assert "q" not in table
    with pytest.raises(KeyError):
        table.code("q")


def test_codes_property_is_a_copy():
    table = CodeTable.from_frequencies({"a": 1, "b": 2})
    table.codes["a"] = (True, True)
    assert table["a"] == "0"


def test_serialize_codebook_layout():
    table = CodeTable.from_frequencies({"a": 3, "b": 1})
    assert serialize_codebook(table, 4) == "space:4\nb:0\na:1\n"


def test_serialize_newline_uses_empty_field():
    table = CodeTable.from_frequencies(count_frequencies("a\na"))
    assert serialize_codebook(table, 5) == "space:5\n:0\na:1\n"


def test_serialize_rejects_bad_padding():
    table = CodeTable.from_frequencies({"a": 1})
    with pytest.raises(ValueError):
        serialize_codebook(table, 8)


def test_codebook_roundtrip(sample_text):
    table = CodeTable.from_frequencies(count_frequencies(sample_text))
    book = Codebook.parse(serialize_codebook(table, 6))
    assert book.decode_map == table.inverse()
    assert book.padding == 6


def test_parse_special_symbols():
    book = Codebook.parse("space:2\n:00\n::01\n\r:10\n")
    assert book.padding == 2
    assert book.decode_map == {"00": "\n", "01": ":", "10": "\r"}


@pytest.mark.parametrize("line", [
    "no separator",
    "ab:01",
    "a:b:01",
    "x:012",
    "x:",
    "space:9",
    "space:two",
])
def test_parse_skips_malformed_lines(line):
    book = Codebook.parse(f"space:3\na:1\n{line}\n")
    assert book.padding == 3
    assert book.decode_map == {"1": "a"}
