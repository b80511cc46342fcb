import argparse
import re
import sys
from typing import List, Optional, Tuple

import numpy as np

from wordsim import config
from wordsim.errors import SimilarityError
from wordsim.eval import format_neighbours, print_nearest, run_analogy_eval
from wordsim.index import SimilarityIndex, combine
from wordsim.storage import load_text, save_text
from wordsim.text import read_sentences, remove_stopwords, split_sentences
from wordsim.trainer import SkipGramTrainer

# Entry point: train skip-gram embeddings (or load a saved table) and query neighbours.
# Usage: python -m wordsim.run [--file path] [--query united] [--combine united+states]

DEMO_TEXT = """
The United States of America is a country in North America.
The states of America are united under one federal government.
The United Kingdom is a country in Europe.
The kingdom and the states are allies.
America and the United Kingdom share a language.
The government of the United States is in Washington.
The government of the United Kingdom is in London.
Washington is the capital of the United States.
London is the capital of the United Kingdom.
"""

_TERM_RE = re.compile(r"\s*([+-]?)\s*([^\s+-]+)")


def parse_expression(expr: str) -> List[Tuple[str, str]]:
    """Split "a+b-c" into [("add", "a"), ("add", "b"), ("subtract", "c")].

    Raises:
        ValueError: If expr has no terms or contains text between terms.
    """
    terms = []
    pos = 0
    for m in _TERM_RE.finditer(expr):
        if m.start() != pos:
            break
        terms.append(("subtract" if m.group(1) == "-" else "add", m.group(2).lower()))
        pos = m.end()
    if not terms or expr[pos:].strip():
        raise ValueError(f"cannot parse expression {expr!r}")
    return terms


def evaluate_expression(index: SimilarityIndex, expr: str) -> Tuple[np.ndarray, List[str]]:
    """Vector for an add/subtract expression over stored labels, plus the labels used."""
    terms = parse_expression(expr)
    vec = np.zeros(index.dim, dtype=np.float64)
    for op, word in terms:
        vec = combine(vec, index.vector(word), op)
    return vec, [w for _, w in terms]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Train word embeddings and query nearest words")
    ap.add_argument("--text", type=str, default=None, help="Train on this string")
    ap.add_argument("--file", type=str, default=None, help="Train on a UTF-8 text file")
    ap.add_argument("--load", type=str, default=None, help="Query a saved table instead of training")
    ap.add_argument("--save", type=str, default=None, help="Write the trained table here")
    ap.add_argument("--epochs", type=int, default=config.EPOCHS)
    ap.add_argument("--dim", type=int, default=config.DIM)
    ap.add_argument("--lr", type=float, default=config.LR)
    ap.add_argument("--batch-size", type=int, default=config.BATCH_SIZE)
    ap.add_argument("--window", type=int, default=config.WINDOW)
    ap.add_argument("--negatives", type=int, default=config.NEGATIVES)
    ap.add_argument("--min-count", type=int, default=config.MIN_COUNT)
    ap.add_argument("--seed", type=int, default=config.SEED)
    ap.add_argument("--no-adagrad", action="store_true", help="Use vanilla SGD")
    ap.add_argument("--no-lr-decay", action="store_true", help="Disable linear LR decay")
    ap.add_argument("--no-subsample", action="store_true", help="Keep every token")
    ap.add_argument("--stopwords", action="store_true", help="Drop common English stop words")
    ap.add_argument("--query", action="append", default=[], help="Word to list neighbours for")
    ap.add_argument(
        "--combine",
        action="append",
        default=[],
        help="Expression like united+states or king-man+woman",
    )
    ap.add_argument("--k", type=int, default=config.TOP_K, help="Neighbours per query")
    ap.add_argument("--analogies", action="store_true", help="Run the built-in analogy check")
    ap.add_argument(
        "--zero-magnitude",
        choices=config.ZERO_MAGNITUDE_POLICIES,
        default=config.ZERO_MAGNITUDE,
    )
    ap.add_argument("--quiet", action="store_true", help="No training progress output")
    return ap


def train_index(args) -> SimilarityIndex:
    if args.file:
        sentences = read_sentences(args.file)
    else:
        sentences = split_sentences(args.text or DEMO_TEXT)
    if args.stopwords:
        sentences = remove_stopwords(sentences)
    trainer = SkipGramTrainer(
        dim=args.dim,
        window_size=args.window,
        num_negatives=args.negatives,
        lr=args.lr,
        batch_size=args.batch_size,
        min_count=args.min_count,
        use_adagrad=not args.no_adagrad,
        use_lr_decay=not args.no_lr_decay,
        subsample=not args.no_subsample,
        seed=args.seed,
        verbose=not args.quiet,
    )
    table = trainer.train(sentences, epochs=args.epochs)
    return SimilarityIndex.build(table.labels, table.vectors, zero_magnitude=args.zero_magnitude)


def main(argv: Optional[List[str]] = None) -> int:
    """Train or load a table, then print neighbours, combinations and analogies."""
    args = build_parser().parse_args(argv)
    try:
        if args.load:
            index = load_text(args.load, zero_magnitude=args.zero_magnitude)
            print(f"Loaded {len(index)} vectors of dim {index.dim} from {args.load}")
        else:
            index = train_index(args)
        if args.save:
            print(f"Saved {save_text(index, args.save)}")

        print("Nearest neighbours:")
        print_nearest(index, [w.lower() for w in args.query] or None, k=args.k)
        for expr in args.combine:
            vec, used = evaluate_expression(index, expr)
            print(format_neighbours(expr, index.nearest(vec, args.k, exclude=used)))
        if args.analogies:
            print("Analogy (b - a + c = ?):")
            run_analogy_eval(index)
    except (SimilarityError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
