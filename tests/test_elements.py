"""
test_elements.py: canonical elements, multiplication and word reconstruction
"""

import numpy as np
import pytest
from grigorchuk_lab.elements import (
    ElementStore,
    CacheExhaustedError,
    I, A, B, C, D,
)
from grigorchuk_lab.precompute import precompute
from grigorchuk_lab.word_problem import is_identity
from grigorchuk_lab.words import inverse_word, reduce_word


@pytest.fixture
def store():
    return ElementStore()


def _random_word(rng, n):
    return "".join("abcd"[int(k)] for k in rng.integers(0, 4, size=n))


class TestSeeds:

    def test_seed_triples(self, store):
        assert store[I].key == (False, I, I)
        assert store[A].key == (True, I, I)
        assert store[B].key == (False, A, C)
        assert store[C].key == (False, A, D)
        assert store[D].key == (False, I, B)
        assert len(store) == 5

    def test_seeds_matched_by_value(self, store):
        assert store.canonicalize(False, A, C) == B
        assert store.canonicalize(False, I, I) == I
        assert store.canonicalize(True, I, I) == A
        assert len(store) == 5

    def test_malformed_triple(self, store):
        with pytest.raises(AssertionError):
            store.canonicalize(False, I, 999)


class TestGroupLaws:

    def test_involutions(self, store):
        for g in (A, B, C, D):
            assert store.mul(g, g) == I

    def test_klein_four(self, store):
        assert store.mul(B, C) == D
        assert store.mul(C, B) == D
        assert store.mul(C, D) == B
        assert store.mul(D, C) == B
        assert store.mul(B, D) == C
        assert store.mul(D, B) == C

    def test_identity_law(self, store):
        rng = np.random.default_rng(1)
        for _ in range(50):
            store.element_of_word(_random_word(rng, int(rng.integers(0, 12))))
        for h in range(len(store)):
            assert store.mul(I, h) == h
            assert store.mul(h, I) == h

    def test_associativity_sample(self, store):
        rng = np.random.default_rng(2)
        for _ in range(40):
            x, y, z = (store.element_of_word(_random_word(rng, 6)) for _ in range(3))
            assert store.mul(store.mul(x, y), z) == store.mul(x, store.mul(y, z))


class TestWordProblemCrossCheck:
    """is_identity agrees with multiplying the letters out from I."""

    def test_random_words(self, store):
        rng = np.random.default_rng(12345)
        for _ in range(300):
            w = _random_word(rng, int(rng.integers(0, 21)))
            assert is_identity(w) == (store.element_of_word(w) == I), w

    def test_constructed_identities(self, store):
        rng = np.random.default_rng(7)
        for _ in range(50):
            u = _random_word(rng, int(rng.integers(0, 10)))
            trivial = u + "ad" * 4 + inverse_word(u)
            nontrivial = u + "ad" * 2 + inverse_word(u)
            assert is_identity(trivial) and store.element_of_word(trivial) == I
            assert not is_identity(nontrivial) and store.element_of_word(nontrivial) != I


class TestCanonicalSharing:

    def test_same_element_same_handle(self, store):
        x = store.element_of_word("adad")
        y = store.element_of_word("dada")
        assert x == y
        assert store[x] is store[y]
        assert store[x].key == (False, B, B)

    def test_klein_word_is_seed(self, store):
        assert store.element_of_word("bc") == D
        assert store.element_of_word("abcdcba") == store.element_of_word("ada")

    def test_distinct_elements_distinct_handles(self, store):
        assert store.element_of_word("ab") != store.element_of_word("ba")


class TestOrders:

    def test_badad_has_finite_order(self, store):
        x = B
        for g in (A, D, A, D):
            x = store.mul(x, g)
        assert x == store.element_of_word("badad")
        n = store.element_order(x)
        assert n == 16
        assert store.power(x, n) == I
        assert store.power(x, 8) != I

    def test_generator_pair_orders(self, store):
        assert store.element_order(store.element_of_word("ad")) == 4
        assert store.element_order(store.element_of_word("ac")) == 8
        assert store.element_order(store.element_of_word("ab")) == 16

    def test_order_search_bound(self, store):
        with pytest.raises(RuntimeError):
            store.element_order(store.element_of_word("ab"), max_order=4)


class TestLimits:

    def test_intern_table_exhaustion(self):
        store = ElementStore(max_elements=5)
        with pytest.raises(CacheExhaustedError):
            store.mul(A, B)
        assert issubclass(CacheExhaustedError, MemoryError)

    def test_mul_cache_bounded(self):
        store = ElementStore(mul_cache_limit=3)
        store.element_of_word("abacabadabacaba")
        assert len(store._mul_cache) <= 3


class TestDeform:

    def test_seeds(self, store):
        assert store.deform(I) == ""
        for g, h in zip("abcd", (A, B, C, D)):
            assert store.deform(h) == g

    def test_round_trip_after_precompute(self, store):
        ac = store.mul(A, C)
        ca = store.mul(C, A)
        res = precompute(store, 300, ac, ca)
        for h in res.order:
            w = store.deform(h)
            assert store.element_of_word(reduce_word(w)) == h

    def test_composite_labels(self, store):
        ac = store.mul(A, C)
        ca = store.mul(C, A)
        precompute(store, 1, ac, ca)
        assert store[ac].label == "A"
        assert store.deform(ac) == "ac"
        assert store.deform(ca) == "ca"

    def test_unlabelled_element(self, store):
        x = store.canonicalize(True, B, B)
        with pytest.raises(ValueError):
            store.deform(x)


class TestDescribe:

    def test_nested_notation(self, store):
        assert store.describe(I) == "I"
        assert store.describe(A) == "a(I,I)"
        assert store.describe(D) == "d"
        assert store.describe(store.element_of_word("adad")) == "(b,b)"
