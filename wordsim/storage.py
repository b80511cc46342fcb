import os

import numpy as np

from wordsim import config
from wordsim.errors import DimensionMismatch
from wordsim.index import SimilarityIndex

# Plain-text embedding table (word2vec text format): a "N D" header, then one line per
# entry with the label followed by D numbers.


def save_text(index: SimilarityIndex, path: str) -> str:
    """Write index to path in word2vec text format.

    Values are written with repr(), so every float64 reads back exactly.

    Args:
        index: Index to save.
        path: Output file path; parent directories are created.

    Returns:
        The path written.

    Raises:
        ValueError: If a label is empty or contains whitespace.
    """
    for w in index.labels:
        if not w or len(w.split()) != 1 or w != w.strip():
            raise ValueError(f"label {w!r} cannot be stored in text format")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{len(index)} {index.dim}\n")
        for w, row in zip(index.labels, index.vectors):
            nums = " ".join(repr(float(x)) for x in row)
            f.write(f"{w} {nums}\n")
    return path


def load_text(path: str, zero_magnitude: str = config.ZERO_MAGNITUDE) -> SimilarityIndex:
    """Read a word2vec text file into a SimilarityIndex.

    Args:
        path: File written by save_text (or any word2vec text file).
        zero_magnitude: Zero-magnitude policy for the index. Defaults to config.ZERO_MAGNITUDE.

    Returns:
        SimilarityIndex with rows in file order.

    Raises:
        ValueError: If the header or a number is malformed.
        DimensionMismatch: If the row count or a row length disagrees with the header.
        DuplicateLabel: If a label repeats.
    """
    with open(path, encoding="utf-8") as f:
        header = f.readline().split()
        if len(header) != 2:
            raise ValueError(f"{path}: expected header 'N D', got {' '.join(header)!r}")
        n, dim = int(header[0]), int(header[1])
        labels = []
        vectors = []
        for lineno, line in enumerate(f, start=2):
            parts = line.split()
            if not parts:
                continue
            if len(parts) - 1 != dim:
                raise DimensionMismatch(
                    f"{path}:{lineno}: {len(parts) - 1} values, header says {dim}"
                )
            labels.append(parts[0])
            vectors.append(np.array([float(x) for x in parts[1:]], dtype=np.float64))
    if len(labels) != n:
        raise DimensionMismatch(f"{path}: {len(labels)} rows, header says {n}")
    return SimilarityIndex.build(labels, vectors, zero_magnitude=zero_magnitude)
