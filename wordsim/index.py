from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from wordsim import config
from wordsim.errors import (
    DimensionMismatch,
    DuplicateLabel,
    EmptyIndex,
    UnknownLabel,
    ZeroMagnitude,
)

# Exact nearest-neighbour lookup by cosine similarity over a small labelled table.
# Zero-magnitude policy: "zero" scores any comparison with a zero vector as 0.0,
# "raise" raises ZeroMagnitude instead.


def _as_vector(v) -> np.ndarray:
    arr = np.asarray(v, dtype=np.float64)
    if arr.ndim != 1:
        raise DimensionMismatch(f"expected a 1-D vector, got shape {arr.shape}")
    return arr


def _check_policy(zero_magnitude: str) -> str:
    if zero_magnitude not in config.ZERO_MAGNITUDE_POLICIES:
        raise ValueError(
            f"zero_magnitude must be one of {config.ZERO_MAGNITUDE_POLICIES}, got {zero_magnitude!r}"
        )
    return zero_magnitude


def _unit_rows(X: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Rows of X scaled to unit length, plus a mask of all-zero rows.

    Each row is divided by its largest absolute entry before the norm is taken, so
    tiny or huge values neither underflow nor overflow. Zero rows stay zero.
    """
    if X.shape[0] == 0 or X.shape[1] == 0:
        return np.zeros_like(X), np.ones(X.shape[0], dtype=bool)
    scale = np.max(np.abs(X), axis=1, keepdims=True)
    zero = scale[:, 0] == 0.0
    scaled = X / np.where(scale == 0.0, 1.0, scale)
    norms = np.linalg.norm(scaled, axis=1, keepdims=True)
    return scaled / np.where(norms == 0.0, 1.0, norms), zero


def cosine_similarity(a, b, zero_magnitude: str = config.ZERO_MAGNITUDE) -> float:
    """Cosine similarity dot(a, b) / (||a|| * ||b||).

    Args:
        a: First vector.
        b: Second vector, same length as a.
        zero_magnitude: "zero" to return 0.0 when either norm is zero, "raise" to
            raise ZeroMagnitude. Defaults to config.ZERO_MAGNITUDE.

    Returns:
        Scalar in [-1, 1].

    Raises:
        DimensionMismatch: If a and b differ in length.
        ZeroMagnitude: If a norm is zero and the policy is "raise".
    """
    _check_policy(zero_magnitude)
    a = _as_vector(a)
    b = _as_vector(b)
    if a.shape != b.shape:
        raise DimensionMismatch(f"vector lengths differ: {a.shape[0]} != {b.shape[0]}")
    units, zero = _unit_rows(np.vstack([a, b]))
    if np.any(zero):
        if zero_magnitude == "raise":
            raise ZeroMagnitude("cosine similarity undefined for a zero vector")
        return 0.0
    return float(np.clip(np.dot(units[0], units[1]), -1.0, 1.0))


_OPS = {"add": np.add, "+": np.add, "subtract": np.subtract, "-": np.subtract}


def combine(vec_a, vec_b, op: str = "add") -> np.ndarray:
    """Elementwise sum or difference of two vectors (derived query construction).

    Args:
        vec_a: Left operand.
        vec_b: Right operand, same length.
        op: "add"/"+" or "subtract"/"-". Defaults to "add".

    Returns:
        New float64 vector.

    Raises:
        DimensionMismatch: If lengths differ.
        ValueError: If op is unknown.
    """
    if op not in _OPS:
        raise ValueError(f"unknown op {op!r}; expected one of {sorted(_OPS)}")
    a = _as_vector(vec_a)
    b = _as_vector(vec_b)
    if a.shape != b.shape:
        raise DimensionMismatch(f"vector lengths differ: {a.shape[0]} != {b.shape[0]}")
    return _OPS[op](a, b)


class SimilarityIndex:
    """Read-only label -> vector table with ranked cosine-similarity queries.

    Rows keep insertion order; that order breaks ties between equal scores.
    Use build() for validated construction; the constructor copies its inputs but
    does not check them.

    Attributes:
        labels (Tuple[str, ...]): Labels in insertion order.
        vectors (np.ndarray): Read-only (N, D) float64 matrix, row i for labels[i].
        dim (int): Dimensionality D (0 for an empty index).
        zero_magnitude (str): Zero-magnitude policy used by queries.
    """

    def __init__(self, labels: Sequence[str], vectors: np.ndarray, zero_magnitude: str):
        self._labels = tuple(labels)
        self._vectors = np.array(vectors, dtype=np.float64)
        self._vectors.setflags(write=False)
        self.dim = self._vectors.shape[1] if self._vectors.ndim == 2 else 0
        self.zero_magnitude = zero_magnitude
        self._row: Dict[str, int] = {w: i for i, w in enumerate(self._labels)}
        self._units, self._zero_rows = _unit_rows(
            self._vectors.reshape(len(self._labels), self.dim)
        )

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._labels

    @property
    def vectors(self) -> np.ndarray:
        return self._vectors

    @classmethod
    def build(
        cls,
        labels: Sequence[str],
        vectors: Sequence,
        zero_magnitude: str = config.ZERO_MAGNITUDE,
    ) -> "SimilarityIndex":
        """Build an index from parallel sequences of labels and vectors.

        Args:
            labels: Unique labels.
            vectors: One vector per label, all of the same length D > 0.
            zero_magnitude: Zero-magnitude policy. Defaults to config.ZERO_MAGNITUDE.

        Returns:
            A new SimilarityIndex. Zero entries give an empty index.

        Raises:
            DimensionMismatch: If the sequences differ in length, vectors differ in
                length, or D is 0.
            DuplicateLabel: If a label repeats.
        """
        _check_policy(zero_magnitude)
        labels = [str(w) for w in labels]
        rows = [_as_vector(v) for v in vectors]
        if len(labels) != len(rows):
            raise DimensionMismatch(f"{len(labels)} labels but {len(rows)} vectors")
        seen = set()
        for w in labels:
            if w in seen:
                raise DuplicateLabel(f"duplicate label {w!r}")
            seen.add(w)
        if not rows:
            return cls([], np.zeros((0, 0), dtype=np.float64), zero_magnitude)
        D = rows[0].shape[0]
        if D == 0:
            raise DimensionMismatch("vectors must have at least one dimension")
        for w, v in zip(labels, rows):
            if v.shape[0] != D:
                raise DimensionMismatch(f"vector for {w!r} has length {v.shape[0]}, expected {D}")
        return cls(labels, np.vstack(rows), zero_magnitude)

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Sequence], **kwargs) -> "SimilarityIndex":
        """Build from a {label: vector} dict, keeping its iteration order."""
        return cls.build(list(mapping.keys()), list(mapping.values()), **kwargs)

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label) -> bool:
        return label in self._row

    def vector(self, label: str) -> np.ndarray:
        """Return the (read-only) stored vector for label; UnknownLabel if absent."""
        if label not in self._row:
            raise UnknownLabel(f"label {label!r} is not in the index")
        return self._vectors[self._row[label]]

    def scores(self, query_vector) -> np.ndarray:
        """Cosine similarity of query_vector against every row, in insertion order.

        Raises:
            EmptyIndex: If the index has no entries.
            DimensionMismatch: If the query length differs from dim.
            ZeroMagnitude: If the policy is "raise" and the query or a row is zero.
        """
        if not self._labels:
            raise EmptyIndex("cannot query an empty index")
        q = _as_vector(query_vector)
        if q.shape[0] != self.dim:
            raise DimensionMismatch(f"query has length {q.shape[0]}, index dim is {self.dim}")
        q_unit, q_zero = _unit_rows(q.reshape(1, -1))
        if self.zero_magnitude == "raise":
            if q_zero[0]:
                raise ZeroMagnitude("query vector has zero magnitude")
            if np.any(self._zero_rows):
                w = self._labels[int(np.argmax(self._zero_rows))]
                raise ZeroMagnitude(f"stored vector for {w!r} has zero magnitude")
        if q_zero[0]:
            return np.zeros(len(self._labels), dtype=np.float64)
        # zero rows stay all-zero after scaling, so they score exactly 0.0
        return np.clip(self._units @ q_unit[0], -1.0, 1.0)

    def nearest(
        self,
        query_vector,
        k: int = config.TOP_K,
        exclude: Iterable[str] = (),
    ) -> List[Tuple[str, float]]:
        """Top-k (label, score) pairs by descending cosine similarity.

        Ties keep insertion order. k larger than the table returns every entry.

        Args:
            query_vector: Vector of length dim.
            k: Number of results; 0 returns an empty list. Defaults to config.TOP_K.
            exclude: Labels to leave out of the ranking. Defaults to ().

        Returns:
            List of (label, score), best first.

        Raises:
            ValueError: If k is negative.
            EmptyIndex, DimensionMismatch, ZeroMagnitude: See scores().
        """
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        sims = self.scores(query_vector)
        order = np.argsort(-sims, kind="stable")
        skip = {self._row[w] for w in exclude if w in self._row}
        out = []
        for i in order:
            if len(out) >= k:
                break
            if i in skip:
                continue
            out.append((self._labels[i], float(sims[i])))
        return out

    def most_similar(self, label: str, k: int = config.TOP_K) -> List[Tuple[str, float]]:
        """Neighbours of a stored label, excluding the label itself."""
        return self.nearest(self.vector(label), k, exclude=(label,))

    def analogy(self, a: str, b: str, c: str, k: int = 1) -> List[Tuple[str, float]]:
        """Solve "a is to b as c is to ?" with the offset b - a + c, excluding a, b, c."""
        offset = combine(self.vector(b), self.vector(a), "subtract")
        query = combine(offset, self.vector(c), "add")
        return self.nearest(query, k, exclude=(a, b, c))

    def __repr__(self) -> str:
        return f"SimilarityIndex(size={len(self)}, dim={self.dim})"
