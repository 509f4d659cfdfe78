"""
test_words.py: free reduction and the self-similarity split
"""

import pytest
from grigorchuk_lab.words import (
    add,
    reduce_word,
    inverse_word,
    split,
    split_slow,
    encode,
)


class TestAdd:
    """Appending a generator with cancellation."""

    def test_push_on_empty(self):
        assert add("", "a") == "a"

    def test_involution_cancels(self):
        for g in "abcd":
            assert add(g, g) == ""
        assert add("ab", "b") == "a"

    def test_klein_product_replaces_last(self):
        assert add("b", "c") == "d"
        assert add("ac", "d") == "ab"
        assert add("ad", "b") == "ac"

    def test_a_does_not_combine(self):
        assert add("b", "a") == "ba"
        assert add("ba", "b") == "bab"

    def test_unknown_letter(self):
        with pytest.raises(ValueError):
            add("", "x")
        with pytest.raises(ValueError):
            reduce_word("abe")


class TestReduce:

    def test_bcd_letter_by_letter(self):
        """b,c -> d, then d,d cancels."""
        w = add("", "b")
        assert w == "b"
        w = add(w, "c")
        assert w == "d"
        w = add(w, "d")
        assert w == ""
        assert reduce_word("bcd") == ""

    def test_reduced_words_alternate_a(self):
        w = reduce_word("abbcadacdba")
        for x, y in zip(w, w[1:]):
            assert (x == "a") != (y == "a")

    def test_inverse_word(self):
        assert inverse_word("abc") == "cba"
        assert reduce_word("abac" + inverse_word("abac")) == ""


class TestSplit:

    def test_single_letters(self):
        assert split("") == (False, "", "")
        assert split("a") == (True, "", "")
        assert split("b") == (False, "c", "a")
        assert split("c") == (False, "d", "a")
        assert split("d") == (False, "b", "")

    def test_parity_moves_d(self):
        assert split("ad") == (True, "", "b")
        assert split("ada") == (False, "", "b")

    def test_branches_are_reduced(self):
        assert split("bb") == (False, "", "")
        _sw, s0, s1 = split("abacabadabacaba")
        assert reduce_word(s0) == s0
        assert reduce_word(s1) == s1

    def test_slow_split_stays_aligned(self):
        word = "adbca"
        sw, s0, s1 = split_slow(word)
        assert sw == split(word)[0]
        assert len(s0) == len(word) and len(s1) == len(word)
        assert split_slow("ad") == (True, "--", "-b")


class TestEncode:

    def test_identity_and_d(self):
        assert encode("") == "I"
        assert encode("bcd") == "I"
        assert encode("d") == "d"

    def test_nested(self):
        assert encode("a") == "a(I,I)"
        assert encode("c") == "(d,a(I,I))"
