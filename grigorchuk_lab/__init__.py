"""Grigorchuk Lab: word problem, canonical elements and a lazy tiling for the Grigorchuk group.

This package implements:
- Free reduction of words over a, b, c, d and the self-similarity split
- A recursive solver for the word problem
- Hash-consed canonical elements with semidirect-product multiplication
- Breadth-first precompute of the <b, ac, ca> subgroup and its growth profile
- A lazily expanded {3,8} tiling whose tiles are group elements
- Bounded breadth-first rendering traversal with hyperbolic poses

Designed to support interactive exploration and reproducible experiments.
"""

__all__ = [
    "words",
    "word_problem",
    "elements",
    "precompute",
    "poses",
    "graph_map",
    "traversal",
]
