from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

# Vocabulary and skip-gram data pipeline over tokenized sentences. Subsampling keeps a
# token with P = sqrt(t/f) capped at 1; negatives come from unigram^0.75 and never
# repeat the row's center or positive word. Context windows stay inside a sentence.


class Vocabulary:
    """Word <-> id mapping with corpus counts, most frequent word first.

    Attributes:
        id_to_word (List[str]): Words by id.
        word2id (Dict[str, int]): Inverse of id_to_word.
        counts (np.ndarray): counts[i] is the corpus count of word i, float64.
    """

    def __init__(self, id_to_word: List[str], counts: Sequence[float]):
        self.id_to_word = list(id_to_word)
        self.word2id: Dict[str, int] = {w: i for i, w in enumerate(self.id_to_word)}
        self.counts = np.asarray(counts, dtype=np.float64)

    @classmethod
    def from_sentences(
        cls,
        sentences: Iterable[Sequence[str]],
        min_count: int = 1,
        max_size: Optional[int] = None,
    ) -> "Vocabulary":
        """Count tokens and keep those with count >= min_count, capped at max_size.

        Ties in count keep first-seen order.

        Args:
            sentences: Tokenized sentences.
            min_count: Minimum count to include a word. Defaults to 1.
            max_size: Maximum vocabulary size (by frequency). Defaults to None.

        Returns:
            Vocabulary instance.

        Raises:
            ValueError: If no word survives the filters.
        """
        cnt: Counter = Counter()
        for sent in sentences:
            cnt.update(sent)
        kept = [(w, c) for w, c in cnt.most_common() if c >= min_count]
        if max_size is not None:
            kept = kept[:max_size]
        if not kept:
            raise ValueError("Vocabulary is empty (no tokens, or min_count too high)")
        return cls([w for w, _ in kept], [c for _, c in kept])

    def __len__(self) -> int:
        return len(self.id_to_word)

    def __contains__(self, word) -> bool:
        return word in self.word2id

    def encode(self, sentences: Iterable[Sequence[str]]) -> List[np.ndarray]:
        """Map sentences to id arrays; out-of-vocabulary tokens are dropped."""
        out = []
        for sent in sentences:
            ids = [self.word2id[w] for w in sent if w in self.word2id]
            if ids:
                out.append(np.array(ids, dtype=np.int64))
        return out


class Corpus:
    """Encoded sentences with subsampling and skip-gram pair iteration.

    Attributes:
        word_ids (np.ndarray): All token ids, sentences concatenated.
        sentence_ids (np.ndarray): sentence_ids[i] is the sentence of token i.
        counts (np.ndarray): Vocabulary counts, length V.
        subsample_t (float): Subsampling threshold.
        n_tokens (int): Number of tokens.
    """

    def __init__(
        self,
        sentences: Sequence[np.ndarray],
        counts: np.ndarray,
        subsample_t: float = 1e-3,
    ):
        if sentences:
            self.word_ids = np.concatenate([np.asarray(s, dtype=np.int64) for s in sentences])
            self.sentence_ids = np.concatenate(
                [np.full(len(s), i, dtype=np.int64) for i, s in enumerate(sentences)]
            )
        else:
            self.word_ids = np.zeros(0, dtype=np.int64)
            self.sentence_ids = np.zeros(0, dtype=np.int64)
        self.counts = np.asarray(counts, dtype=np.float64)
        self.subsample_t = subsample_t
        self.n_tokens = len(self.word_ids)

    @classmethod
    def from_sentences(
        cls,
        sentences: Iterable[Sequence[str]],
        vocab: Vocabulary,
        subsample_t: float = 1e-3,
    ) -> "Corpus":
        return cls(vocab.encode(sentences), vocab.counts, subsample_t=subsample_t)

    def subsample(self, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Positions of tokens kept by frequent-word subsampling, in corpus order.

        Args:
            rng: Random generator. Defaults to None (fresh default_rng).

        Returns:
            Sorted token positions (not word ids).
        """
        if rng is None:
            rng = np.random.default_rng()
        total = self.counts.sum()
        if total <= 0 or self.n_tokens == 0:
            return np.arange(self.n_tokens)
        freqs = self.counts[self.word_ids] / total
        keep_prob = np.minimum(np.sqrt(self.subsample_t / np.clip(freqs, 1e-12, None)), 1.0)
        return np.where(rng.random(self.n_tokens) < keep_prob)[0]

    def iter_skipgram_pairs(
        self,
        window_size: int,
        subsample: bool = True,
        seed: Optional[int] = None,
    ) -> Iterator[Tuple[int, int]]:
        """Yield (center_id, context_id) pairs within each sentence.

        Dropped tokens are removed before windowing, so the window spans kept tokens.

        Args:
            window_size: Context words on each side of the center.
            subsample: Whether to subsample first. Defaults to True.
            seed: Seed for subsampling. Defaults to None.

        Yields:
            Tuples (center_id, context_id).
        """
        if subsample:
            kept = self.subsample(np.random.default_rng(seed))
        else:
            kept = np.arange(self.n_tokens)
        ids = self.word_ids[kept]
        sents = self.sentence_ids[kept]
        n = len(ids)
        for i in range(n):
            start = max(0, i - window_size)
            end = min(n, i + window_size + 1)
            for j in range(start, end):
                if j != i and sents[j] == sents[i]:
                    yield int(ids[i]), int(ids[j])

    def count_pairs(self, window_size: int) -> int:
        """Number of pairs one pass yields without subsampling."""
        return sum(1 for _ in self.iter_skipgram_pairs(window_size, subsample=False))


def negative_sampling_distribution(counts: np.ndarray, power: float = 0.75) -> np.ndarray:
    """Unigram distribution raised to power and normalized (power=0.75 is standard).

    Args:
        counts: Vocabulary counts.
        power: Exponent applied to counts. Defaults to 0.75.

    Returns:
        Probabilities summing to 1, same length as counts.
    """
    probs = np.power(np.maximum(np.asarray(counts, dtype=np.float64), 1e-10), power)
    return probs / probs.sum()


def _sample_negatives(
    rng: np.random.Generator,
    centers: np.ndarray,
    positives: np.ndarray,
    num_negatives: int,
    neg_probs: np.ndarray,
) -> np.ndarray:
    V = len(neg_probs)
    negs = rng.choice(V, size=(len(centers), num_negatives), p=neg_probs)
    if V <= 2:
        # no word is guaranteed to differ from both center and positive
        return negs
    for i in range(len(centers)):
        bad = (negs[i] == centers[i]) | (negs[i] == positives[i])
        while np.any(bad):
            negs[i, bad] = rng.choice(V, size=bad.sum(), p=neg_probs)
            bad = (negs[i] == centers[i]) | (negs[i] == positives[i])
    return negs


def skipgram_batches(
    corpus: Corpus,
    batch_size: int,
    window_size: int,
    num_negatives: int,
    neg_probs: np.ndarray,
    subsample: bool = True,
    seed: Optional[int] = None,
) -> Iterator[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """Yield (center, context_pos, context_neg) batches for skip-gram training.

    Args:
        corpus: Corpus to iterate over.
        batch_size: Pairs per batch; the last batch may be smaller.
        window_size: Context window size.
        num_negatives: Negatives per positive (K).
        neg_probs: Sampling distribution over the vocabulary.
        subsample: Whether to subsample the corpus. Defaults to True.
        seed: Random seed. Defaults to None.

    Yields:
        Arrays with shapes (B,), (B,), (B, K).
    """
    rng = np.random.default_rng(seed)
    centers: List[int] = []
    positives: List[int] = []
    for c, p in corpus.iter_skipgram_pairs(window_size, subsample=subsample, seed=seed):
        centers.append(c)
        positives.append(p)
        if len(centers) >= batch_size:
            c_arr = np.array(centers, dtype=np.int64)
            p_arr = np.array(positives, dtype=np.int64)
            yield c_arr, p_arr, _sample_negatives(rng, c_arr, p_arr, num_negatives, neg_probs)
            centers, positives = [], []
    if centers:
        c_arr = np.array(centers, dtype=np.int64)
        p_arr = np.array(positives, dtype=np.int64)
        yield c_arr, p_arr, _sample_negatives(rng, c_arr, p_arr, num_negatives, neg_probs)
