from __future__ import annotations

from typing import Tuple

GENERATORS = "abcd"

# b, c, d form a Klein four-group: the product of two distinct ones is the third.
_KLEIN = frozenset("bcd")
_KLEIN_THIRD = {
    ("b", "c"): "d", ("c", "b"): "d",
    ("b", "d"): "c", ("d", "b"): "c",
    ("c", "d"): "b", ("d", "c"): "b",
}

Split = Tuple[bool, str, str]


def _check_letter(g: str) -> None:
    if len(g) != 1 or g not in GENERATORS:
        raise ValueError(f"Unknown generator: {g!r}")


def add(word: str, g: str) -> str:
    """Append generator g to a reduced word, cancelling where the relations allow.

    a, b, c, d are involutions; {b, c, d} multiply within the Klein four-group.
    """
    _check_letter(g)
    if not word:
        return g
    last = word[-1]
    if last == g:
        return word[:-1]
    if last in _KLEIN and g in _KLEIN:
        return word[:-1] + _KLEIN_THIRD[(last, g)]
    return word + g


def reduce_word(word: str) -> str:
    res = ""
    for g in word:
        res = add(res, g)
    return res


def inverse_word(word: str) -> str:
    """Inverse of a word: every generator is self-inverse, so just reverse it."""
    for g in word:
        _check_letter(g)
    return word[::-1]


def split(word: str) -> Split:
    """Self-similarity map word -> (swapped, w0, w1).

    Reading left to right with a running swap parity:
      - b puts c on the branch selected by the parity and a on the other,
      - c puts d / a the same way,
      - d puts b on the branch that is currently not swapped,
      - a flips the parity.
    Both branch words are kept reduced via add().
    """
    swapped = False
    s0 = ""
    s1 = ""
    for g in word:
        if g == "b":
            s0 = add(s0, "a" if swapped else "c")
            s1 = add(s1, "c" if swapped else "a")
        elif g == "c":
            s0 = add(s0, "a" if swapped else "d")
            s1 = add(s1, "d" if swapped else "a")
        elif g == "d":
            if swapped:
                s1 = add(s1, "b")
            else:
                s0 = add(s0, "b")
        elif g == "a":
            swapped = not swapped
        else:
            _check_letter(g)
    return swapped, s0, s1


def split_slow(word: str) -> Split:
    """Unreduced split, padded with '-' so both branches stay aligned with the input.

    Debugging aid only: the branch strings are not words.
    """
    swapped = False
    s0 = []
    s1 = []
    for g in word:
        _check_letter(g)
        if g == "b":
            s0.append("a" if swapped else "c")
            s1.append("c" if swapped else "a")
        elif g == "c":
            s0.append("a" if swapped else "d")
            s1.append("d" if swapped else "a")
        elif g == "d":
            (s1 if swapped else s0).append("b")
            (s0 if swapped else s1).append("-")
        else:
            swapped = not swapped
            s0.append("-")
            s1.append("-")
    return swapped, "".join(s0), "".join(s1)


def encode(word: str) -> str:
    """Nested display form, e.g. 'bcd' -> 'I' and 'a' -> 'a(I,I)'."""
    word = reduce_word(word)
    if word == "":
        return "I"
    if word == "d":
        return "d"
    swapped, s0, s1 = split(word)
    return ("a(" if swapped else "(") + encode(s0) + "," + encode(s1) + ")"
