from wordsim.data import Corpus, Vocabulary, skipgram_batches
from wordsim.errors import (
    DimensionMismatch,
    DuplicateLabel,
    EmptyIndex,
    SimilarityError,
    UnknownLabel,
    ZeroMagnitude,
)
from wordsim.index import SimilarityIndex, combine, cosine_similarity
from wordsim.model import SkipGramNegSampling
from wordsim.storage import load_text, save_text
from wordsim.trainer import EmbeddingTrainer, SkipGramTrainer, get_trainer

# Word embeddings in NumPy (skip-gram with negative sampling) and exact cosine
# nearest-neighbour lookup over the learned table.

__all__ = [
    "SimilarityIndex",
    "cosine_similarity",
    "combine",
    "EmbeddingTrainer",
    "SkipGramTrainer",
    "get_trainer",
    "SkipGramNegSampling",
    "Corpus",
    "Vocabulary",
    "skipgram_batches",
    "load_text",
    "save_text",
    "SimilarityError",
    "DimensionMismatch",
    "DuplicateLabel",
    "EmptyIndex",
    "UnknownLabel",
    "ZeroMagnitude",
]
