from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

Key = Tuple[bool, int, int]

# Handles of the pre-seeded elements.
I, A, B, C, D = 0, 1, 2, 3, 4
GENERATOR_HANDLES: Dict[str, int] = {"a": A, "b": B, "c": C, "d": D}

# label -> letters that undo it (right-multiplied in this order).
# 'A' marks a step by ac and 'C' a step by ca.
_UNDO: Dict[str, str] = {"a": "a", "b": "b", "c": "c", "d": "d", "A": "ca", "C": "ac"}


class CacheExhaustedError(MemoryError):
    """Raised when an append-only cache would grow past its configured limit."""


@dataclass
class Element:
    """Canonical representative of a group element.

    swapped/left/right is the self-similarity triple; left and right are handles
    into the owning ElementStore. label and distance are display data and do not
    take part in equality.
    """

    handle: int
    swapped: bool
    left: int
    right: int
    label: Optional[str] = None
    distance: int = -1

    @property
    def key(self) -> Key:
        return (self.swapped, self.left, self.right)

    @property
    def discovered(self) -> bool:
        return self.distance >= 0


class ElementStore:
    """Hash-consing arena for Grigorchuk group elements.

    Every distinct element gets exactly one handle, so equality of elements is
    equality of handles. The five seeds encode the defining self-reference:

        I = (False, I, I)   a = (True, I, I)
        b = (False, a, c)   c = (False, a, d)   d = (False, I, b)
    """

    def __init__(self, max_elements: Optional[int] = None, mul_cache_limit: int = 200_000):
        self.max_elements = None if max_elements is None else int(max_elements)
        self.mul_cache_limit = int(mul_cache_limit)
        self._elements: List[Element] = []
        self._index: Dict[Key, int] = {}
        self._mul_cache: Dict[Tuple[int, int], int] = {}

        for swapped, left, right, label in [
            (False, I, I, None),
            (True, I, I, "a"),
            (False, A, C, "b"),
            (False, A, D, "c"),
            (False, I, B, "d"),
        ]:
            self._insert((swapped, left, right), label)

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, h: int) -> Element:
        return self._elements[h]

    def _insert(self, key: Key, label: Optional[str]) -> int:
        h = len(self._elements)
        self._elements.append(Element(h, key[0], key[1], key[2], label))
        self._index[key] = h
        return h

    def generator(self, g: str) -> int:
        if g not in GENERATOR_HANDLES:
            raise ValueError(f"Unknown generator: {g!r}")
        return GENERATOR_HANDLES[g]

    def canonicalize(self, swapped: bool, left: int, right: int, label: Optional[str] = None) -> int:
        """Return the unique handle for the triple, inserting it if it is new."""
        n = len(self._elements)
        assert 0 <= left < n and 0 <= right < n, f"non-canonical child in ({swapped}, {left}, {right})"
        key = (bool(swapped), int(left), int(right))
        h = self._index.get(key)
        if h is not None:
            return h
        if self.max_elements is not None and n >= self.max_elements:
            raise CacheExhaustedError(f"Intern table reached max_elements={self.max_elements}")
        return self._insert(key, label)

    def mul(self, x: int, y: int) -> int:
        """Canonical product x*y (x acts first on the left, branches follow y's swap)."""
        if x == I:
            return y
        if y == I:
            return x
        if x == y and x in (A, B, C, D):
            return I
        if B <= x <= D and B <= y <= D:
            # third element of {b, c, d}
            return B + C + D - x - y

        ck = (x, y)
        cached = self._mul_cache.get(ck)
        if cached is not None:
            return cached

        ex = self._elements[x]
        ey = self._elements[y]
        if not ey.swapped:
            out = self.canonicalize(ex.swapped, self.mul(ex.left, ey.left), self.mul(ex.right, ey.right), ey.label)
        else:
            out = self.canonicalize(not ex.swapped, self.mul(ex.right, ey.left), self.mul(ex.left, ey.right), ey.label)

        if len(self._mul_cache) < self.mul_cache_limit:
            self._mul_cache[ck] = out
        return out

    def element_of_word(self, word: str) -> int:
        h = I
        for g in word:
            h = self.mul(h, self.generator(g))
        return h

    def power(self, x: int, n: int) -> int:
        h = I
        for _ in range(int(n)):
            h = self.mul(h, x)
        return h

    def element_order(self, x: int, max_order: int = 4096) -> int:
        """Least n >= 1 with x^n = I. Every element of the group has finite order."""
        p = x
        n = 1
        while p != I:
            if n >= max_order:
                raise RuntimeError(f"Element {x} did not return to I within {max_order} steps")
            p = self.mul(p, x)
            n += 1
        return n

    def discover(self, h: int, label: Optional[str], distance: int) -> bool:
        """Fix label and structural distance of h on first discovery. Returns True if new."""
        e = self._elements[h]
        if e.discovered:
            return False
        if h != I:
            e.label = label
        e.distance = int(distance)
        return True

    def deform(self, x: int, max_steps: int = 100_000) -> str:
        """Reconstruct a display word for x by following originating labels back to I."""
        parts: List[str] = []
        steps = 0
        while x != I:
            label = self._elements[x].label
            if label not in _UNDO:
                raise ValueError(f"Element {x} has no originating label (label={label!r})")
            steps += 1
            if steps > max_steps:
                raise ValueError(f"Label chain of element {x} does not reach I within {max_steps} steps")
            undo = _UNDO[label]
            parts.append(undo)
            for g in undo:
                x = self.mul(x, GENERATOR_HANDLES[g])
        return "".join(parts)[::-1]

    def describe(self, x: int) -> str:
        """Nested triple notation, seeds b, c, d printed by name."""
        if x == I:
            return "I"
        if x in (B, C, D):
            return "bcd"[x - B]
        e = self._elements[x]
        return ("a" if e.swapped else "") + "(" + self.describe(e.left) + "," + self.describe(e.right) + ")"
