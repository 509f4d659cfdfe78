from __future__ import annotations

from typing import List

from .words import GENERATORS, add, inverse_word, reduce_word, split


def is_identity(word: str, max_depth: int = 512) -> bool:
    """Decide whether a word denotes the identity of the Grigorchuk group.

    The word is reduced, then split; a swapped split cannot fix the first level,
    otherwise both branch words must be trivial. The branches are shorter than the
    word (contraction), so the recursion terminates. The single letter 'd' is a
    fixed base case of this presentation: its split cycles d -> b -> c -> d.
    """
    return _is_identity(reduce_word(word), 0, int(max_depth))


def _is_identity(word: str, depth: int, max_depth: int) -> bool:
    if word == "":
        return True
    if word == "d":
        return False
    if depth >= max_depth:
        raise RecursionError(f"Word problem exceeded depth {max_depth} on a word of length {len(word)}")
    swapped, s0, s1 = split(word)
    if swapped:
        return False
    return _is_identity(s0, depth + 1, max_depth) and _is_identity(s1, depth + 1, max_depth)


def words_equal(u: str, v: str) -> bool:
    return is_identity(u + inverse_word(v))


def distinct_words(length: int) -> List[str]:
    """Reduced words of exactly `length` letters, one per distinct group element.

    Words are generated in lexicographic order; a word is kept only if it does not
    equal any word kept before it.
    """
    length = int(length)
    if length < 0:
        raise ValueError("length must be >= 0")
    seen: List[str] = []

    def extend(s: str, more: int) -> None:
        if more == 0:
            tail = inverse_word(s)
            for q in seen:
                w = q
                for g in tail:
                    w = add(w, g)
                if is_identity(w):
                    return
            seen.append(s)
            return
        for g in GENERATORS:
            s1 = add(s, g)
            if len(s1) != len(s) + 1:
                continue
            extend(s1, more - 1)

    extend("", length)
    return seen
