"""
Sparse tag-vector arithmetic over plain dicts.

Vectors map tag -> weight; a missing key is a zero weight. No function here
mutates its inputs except ``accumulate``, which updates its target in place.
"""
from __future__ import annotations

import math
from collections.abc import Mapping, MutableMapping

from ..errors import DegenerateNorm


def accumulate(
    target: MutableMapping[str, float],
    vector: Mapping[str, float],
    scale: float = 1.0,
) -> None:
    """Add ``scale * vector`` into *target*, starting absent tags at zero."""
    for tag, weight in vector.items():
        target[tag] = target.get(tag, 0.0) + scale * weight


def dot(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """Dot product, iterating the keys of *a* and looking them up in *b*."""
    total = 0.0
    for tag, weight in a.items():
        other = b.get(tag)
        if other is not None:
            total += weight * other
    return total


def norm_sq(v: Mapping[str, float]) -> float:
    return sum(w * w for w in v.values())


def cosine_from_parts(dot_product: float, a_norm_sq: float, b_norm_sq: float) -> float:
    """Cosine from a precomputed dot product and squared norms.

    Raises ``DegenerateNorm`` if either squared norm is exactly zero.
    The result is not clamped.
    """
    if a_norm_sq == 0.0 or b_norm_sq == 0.0:
        raise DegenerateNorm("cosine is undefined for a zero-magnitude vector")
    return dot_product / math.sqrt(a_norm_sq) / math.sqrt(b_norm_sq)


def cosine(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    return cosine_from_parts(dot(a, b), norm_sq(a), norm_sq(b))


def is_finite(v: Mapping[str, float]) -> bool:
    return all(math.isfinite(w) for w in v.values())
