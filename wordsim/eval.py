from typing import Iterable, List, Optional, Sequence, Tuple

from wordsim.index import SimilarityIndex

# Evaluation: k-NN neighbour listings and vector-offset analogies (b - a + c = ?).

# Small built-in set; only quadruples fully in the vocabulary are scored.
DEFAULT_ANALOGIES = [
    ("man", "king", "woman", "queen"),
    ("france", "paris", "germany", "berlin"),
    ("big", "biggest", "small", "smallest"),
    ("walk", "walking", "run", "running"),
]


def format_neighbours(word: str, neighbours: Sequence[Tuple[str, float]]) -> str:
    nn_str = ", ".join(f"{w}({s:.3f})" for w, s in neighbours)
    return f"  '{word}' -> {nn_str}"


def print_nearest(
    index: SimilarityIndex,
    query_words: Optional[Iterable[str]] = None,
    k: int = 5,
) -> List[str]:
    """Print the k nearest neighbours of each query word (itself excluded).

    Words not in the index are skipped.

    Args:
        index: Index to query.
        query_words: Words to look up. Defaults to the first 3 labels.
        k: Neighbours per word. Defaults to 5.

    Returns:
        The printed lines.
    """
    if query_words is None:
        query_words = index.labels[:3]
    lines = []
    for w in query_words:
        if w not in index:
            continue
        line = format_neighbours(w, index.most_similar(w, k))
        print(line)
        lines.append(line)
    return lines


def run_analogy_eval(
    index: SimilarityIndex,
    analogies: Optional[Sequence[Tuple[str, str, str, str]]] = None,
) -> Tuple[int, int]:
    """Score (a, b, c, expected) quadruples: a is to b as c is to expected.

    Args:
        index: Index to query.
        analogies: Quadruples to score. Defaults to DEFAULT_ANALOGIES.

    Returns:
        (correct, total) over quadruples whose four words are all in the index.
    """
    if analogies is None:
        analogies = DEFAULT_ANALOGIES
    correct = 0
    total = 0
    for a, b, c, expected in analogies:
        if not all(w in index for w in (a, b, c, expected)):
            continue
        preds = index.analogy(a, b, c, k=1)
        if not preds:
            continue
        total += 1
        if preds[0][0] == expected:
            correct += 1
        print(f"  {b} - {a} + {c} = {preds[0][0]} (expected {expected})")
    if total > 0:
        print(f"Analogy accuracy: {correct}/{total} = {100.0 * correct / total:.1f}%")
    else:
        print("  (no analogies in vocab; train on a larger corpus)")
    return correct, total
