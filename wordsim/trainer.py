from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from wordsim import config
from wordsim.data import Corpus, Vocabulary
from wordsim.index import SimilarityIndex
from wordsim.model import SkipGramNegSampling
from wordsim.train import train as train_sgns


class EmbeddingTrainer(ABC):
    """
    Minimal embedding trainer interface.
    Turns tokenized sentences into a label -> vector table of dimension `dim`.
    """

    @property
    @abstractmethod
    def dim(self) -> int:
        ...

    @abstractmethod
    def build_vocabulary(self, sentences: Sequence[Sequence[str]]) -> Vocabulary:
        ...

    @abstractmethod
    def train(self, sentences: Sequence[Sequence[str]], epochs: int) -> SimilarityIndex:
        ...


class SkipGramTrainer(EmbeddingTrainer):
    """NumPy skip-gram with negative sampling behind the EmbeddingTrainer interface.

    Word vectors are the rows of the model's W_in after training.
    """

    def __init__(
        self,
        dim: int = config.DIM,
        window_size: int = config.WINDOW,
        num_negatives: int = config.NEGATIVES,
        lr: float = config.LR,
        batch_size: int = config.BATCH_SIZE,
        min_count: int = config.MIN_COUNT,
        max_vocab: Optional[int] = None,
        subsample_t: float = config.SUBSAMPLE_T,
        use_adagrad: bool = True,
        use_lr_decay: bool = True,
        subsample: bool = True,
        seed: int = config.SEED,
        log_every: int = 50,
        verbose: bool = False,
    ):
        if dim <= 0:
            raise ValueError(f"dim must be positive, got {dim}")
        if log_every < 1:
            raise ValueError(f"log_every must be at least 1, got {log_every}")
        self._dim = dim
        self.window_size = window_size
        self.num_negatives = num_negatives
        self.lr = lr
        self.batch_size = batch_size
        self.min_count = min_count
        self.max_vocab = max_vocab
        self.subsample_t = subsample_t
        self.use_adagrad = use_adagrad
        self.use_lr_decay = use_lr_decay
        self.subsample = subsample
        self.seed = seed
        self.log_every = log_every
        self.verbose = verbose
        self.vocab: Optional[Vocabulary] = None
        self.model: Optional[SkipGramNegSampling] = None
        self.history: List[dict] = []

    @property
    def dim(self) -> int:
        return self._dim

    def build_vocabulary(self, sentences: Sequence[Sequence[str]]) -> Vocabulary:
        self.vocab = Vocabulary.from_sentences(
            sentences, min_count=self.min_count, max_size=self.max_vocab
        )
        self.model = None
        return self.vocab

    def train(self, sentences: Sequence[Sequence[str]], epochs: int = config.EPOCHS) -> SimilarityIndex:
        """Train on sentences and return the learned table as a SimilarityIndex.

        Builds the vocabulary from these sentences if build_vocabulary was not called.
        Calling train again continues from the current weights.

        Args:
            sentences: Tokenized sentences.
            epochs: Passes over the corpus. Defaults to config.EPOCHS.

        Returns:
            SimilarityIndex over the vocabulary words, most frequent first.
        """
        if self.vocab is None:
            self.build_vocabulary(sentences)
        if self.model is None:
            self.model = SkipGramNegSampling(len(self.vocab), self._dim, seed=self.seed)
        corpus = Corpus.from_sentences(sentences, self.vocab, subsample_t=self.subsample_t)
        if self.verbose:
            print(f"Vocab size {len(self.vocab)}, corpus tokens {corpus.n_tokens}")
        self.history = train_sgns(
            self.model,
            corpus,
            num_epochs=epochs,
            batch_size=max(1, min(self.batch_size, corpus.n_tokens)),
            window_size=self.window_size,
            num_negatives=self.num_negatives,
            lr=self.lr,
            use_adagrad=self.use_adagrad,
            use_lr_decay=self.use_lr_decay,
            subsample=self.subsample,
            seed=self.seed,
            log_every=self.log_every,
            verbose=self.verbose,
        )
        return self.to_index()

    def to_index(self) -> SimilarityIndex:
        """Current weights as a SimilarityIndex; RuntimeError before training."""
        if self.model is None or self.vocab is None:
            raise RuntimeError("trainer has no model; call train() first")
        return SimilarityIndex.build(self.vocab.id_to_word, self.model.W_in)


_TRAINERS = {"sgns": SkipGramTrainer, "skipgram": SkipGramTrainer}


def get_trainer(name: str = "sgns", **kwargs) -> EmbeddingTrainer:
    """Trainer factory by name.

    Raises:
        ValueError: If name is unknown.
    """
    key = name.lower()
    if key not in _TRAINERS:
        raise ValueError(f"unknown trainer {name!r}; expected one of {sorted(_TRAINERS)}")
    return _TRAINERS[key](**kwargs)
