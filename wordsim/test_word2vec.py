import numpy as np
import pytest

from wordsim.data import Corpus, Vocabulary, negative_sampling_distribution, skipgram_batches
from wordsim.model import SkipGramNegSampling, _log_sigmoid, _sigmoid
from wordsim.train import train

# Unit tests: vocabulary, corpus windows, subsampling, gradients, training.

SENTENCES = [
    ["the", "cat", "sat", "on", "the", "mat"],
    ["the", "dog", "sat", "on", "the", "log"],
]


def test_sigmoid_stability():
    y = _sigmoid(np.array([-1000.0, 0.0, 1000.0]))
    assert np.all(y >= 0) and np.all(y <= 1)
    assert y[0] < 1e-100
    assert np.isclose(y[1], 0.5)
    assert y[2] >= 1.0 - 1e-10


def test_log_sigmoid_matches_log_of_sigmoid():
    x = np.linspace(-20, 20, 41)
    np.testing.assert_allclose(_log_sigmoid(x), np.log(_sigmoid(x)), atol=1e-9)
    assert np.all(np.isfinite(_log_sigmoid(np.array([-1000.0, 500.0]))))


def test_vocabulary_orders_by_frequency():
    vocab = Vocabulary.from_sentences([["b", "a", "a"], ["c", "b", "a"]])
    assert vocab.id_to_word == ["a", "b", "c"]
    np.testing.assert_array_equal(vocab.counts, [3.0, 2.0, 1.0])
    assert vocab.word2id["c"] == 2


def test_vocabulary_min_count_and_encode():
    vocab = Vocabulary.from_sentences([["b", "a", "a"], ["c", "b", "a"]], min_count=2)
    assert vocab.id_to_word == ["a", "b"]
    assert "c" not in vocab
    encoded = vocab.encode([["c", "a"], ["c"]])
    assert len(encoded) == 1
    np.testing.assert_array_equal(encoded[0], [0])


def test_vocabulary_empty_raises():
    with pytest.raises(ValueError):
        Vocabulary.from_sentences([["a"]], min_count=2)
    with pytest.raises(ValueError):
        Vocabulary.from_sentences([])


def test_windows_do_not_cross_sentences():
    corpus = Corpus([np.array([0, 1]), np.array([2, 3])], np.ones(4))
    pairs = list(corpus.iter_skipgram_pairs(window_size=5, subsample=False))
    assert pairs == [(0, 1), (1, 0), (2, 3), (3, 2)]
    assert corpus.count_pairs(5) == 4


def test_window_size_limits_context():
    corpus = Corpus([np.array([0, 1, 2, 3])], np.ones(4))
    pairs = list(corpus.iter_skipgram_pairs(window_size=1, subsample=False))
    assert pairs == [(0, 1), (1, 0), (1, 2), (2, 1), (2, 3), (3, 2)]


def test_subsample_deterministic_with_rng():
    corpus = Corpus([np.array([0, 1, 1, 2, 2, 2])], np.array([1.0, 2.0, 3.0]), subsample_t=1e-5)
    kept1 = corpus.subsample(np.random.default_rng(42))
    kept2 = corpus.subsample(np.random.default_rng(42))
    np.testing.assert_array_equal(kept1, kept2)


def test_subsampling_keeps_rare_drops_frequent():
    corpus = Corpus([np.array([0] + [1] * 100)], np.array([1.0, 100.0]), subsample_t=1e-3)
    keep_0 = 0
    keep_1 = 0
    for seed in range(100):
        kept = corpus.subsample(np.random.default_rng(seed))
        ids = corpus.word_ids[kept]
        keep_0 += int(np.sum(ids == 0))
        keep_1 += int(np.sum(ids == 1))
    assert keep_0 >= 15
    assert keep_1 < 5000


def test_negative_sampling_distribution():
    probs = negative_sampling_distribution(np.array([10.0, 1.0, 100.0]), power=0.75)
    assert np.isclose(probs.sum(), 1.0)
    assert np.all(probs > 0)
    assert probs[2] > probs[0] > probs[1]


def test_skipgram_batches_shapes_and_negatives():
    rng = np.random.default_rng(0)
    sentences = [rng.integers(0, 10, size=12) for _ in range(8)]
    counts = np.bincount(np.concatenate(sentences), minlength=10).astype(np.float64)
    corpus = Corpus(sentences, counts)
    neg_probs = negative_sampling_distribution(counts)
    batches = list(skipgram_batches(corpus, 8, 2, 3, neg_probs, subsample=False, seed=42))
    assert len(batches) >= 1
    total = 0
    for c, p, n in batches:
        assert c.shape[0] <= 8
        assert p.shape == c.shape
        assert n.shape == (c.shape[0], 3)
        assert not np.any(n == c[:, None])
        assert not np.any(n == p[:, None])
        total += c.shape[0]
    assert total == corpus.count_pairs(2)


def test_skipgram_batches_tiny_vocab_terminates():
    corpus = Corpus([np.array([0, 1, 0, 1])], np.array([2.0, 2.0]))
    neg_probs = negative_sampling_distribution(corpus.counts)
    batches = list(skipgram_batches(corpus, 4, 1, 2, neg_probs, subsample=False, seed=0))
    assert sum(c.shape[0] for c, _, _ in batches) == 6


def test_model_output_shapes():
    V, D, B, K = 100, 32, 8, 5
    model = SkipGramNegSampling(V, D, seed=42)
    rng = np.random.default_rng(1)
    loss, grad_in, grad_out = model.forward_backward(
        rng.integers(0, V, size=B), rng.integers(0, V, size=B), rng.integers(0, V, size=(B, K))
    )
    assert isinstance(loss, float)
    assert grad_in.shape == (V, D)
    assert grad_out.shape == (V, D)


def test_model_rejects_bad_sizes():
    with pytest.raises(ValueError):
        SkipGramNegSampling(0, 8)
    with pytest.raises(ValueError):
        SkipGramNegSampling(8, 0)


def test_initial_loss_near_log2_per_term():
    """Near-zero init puts every score near 0, so each of the 1 + K terms is ~log 2."""
    V, D, B, K = 50, 16, 32, 5
    model = SkipGramNegSampling(V, D, seed=123)
    rng = np.random.default_rng(2)
    loss, _, _ = model.forward_backward(
        rng.integers(0, V, size=B), rng.integers(0, V, size=B), rng.integers(0, V, size=(B, K))
    )
    assert np.isclose(loss, (1 + K) * np.log(2.0), atol=0.05)


def test_gradients_match_finite_differences():
    V, D = 15, 8
    model = SkipGramNegSampling(V, D, seed=0)
    model.W_in = np.random.default_rng(5).standard_normal((V, D)) * 0.3
    model.W_out = np.random.default_rng(6).standard_normal((V, D)) * 0.3
    center = np.array([0, 1])
    context_pos = np.array([1, 2])
    context_neg = np.array([[2, 3, 4], [5, 6, 0]])
    _, grad_in, grad_out = model.forward_backward(center, context_pos, context_neg)
    eps = 1e-6
    for W, grad, (i, j) in (
        (model.W_in, grad_in, (0, 3)),
        (model.W_in, grad_in, (1, 0)),
        (model.W_out, grad_out, (2, 1)),
        (model.W_out, grad_out, (6, 7)),
    ):
        W[i, j] += eps
        loss_plus = model.loss(center, context_pos, context_neg)
        W[i, j] -= 2 * eps
        loss_minus = model.loss(center, context_pos, context_neg)
        W[i, j] += eps
        fd = (loss_plus - loss_minus) / (2 * eps)
        assert np.isclose(grad[i, j], fd, atol=1e-7, rtol=1e-4), (i, j, grad[i, j], fd)


def test_sgd_steps_decrease_loss():
    vocab = Vocabulary.from_sentences(SENTENCES)
    corpus = Corpus.from_sentences(SENTENCES, vocab)
    model = SkipGramNegSampling(len(vocab), 16, seed=42)
    neg_probs = negative_sampling_distribution(corpus.counts)
    center, context_pos, context_neg = next(
        skipgram_batches(corpus, 32, 2, 3, neg_probs, subsample=False, seed=1)
    )
    loss0 = model.loss(center, context_pos, context_neg)
    for _ in range(50):
        _, grad_in, grad_out = model.forward_backward(center, context_pos, context_neg)
        model.W_in -= 0.5 * grad_in
        model.W_out -= 0.5 * grad_out
    assert model.loss(center, context_pos, context_neg) < loss0


def test_train_returns_history_and_lowers_loss():
    vocab = Vocabulary.from_sentences(SENTENCES * 5)
    corpus = Corpus.from_sentences(SENTENCES * 5, vocab)
    model = SkipGramNegSampling(len(vocab), 16, seed=42)
    history = train(
        model,
        corpus,
        num_epochs=20,
        batch_size=16,
        window_size=2,
        num_negatives=3,
        lr=0.05,
        subsample=False,
        seed=7,
        log_every=5,
        verbose=False,
    )
    assert history
    assert all(set(h) == {"step", "loss", "lr"} for h in history)
    steps = [h["step"] for h in history]
    assert steps == sorted(steps)
    assert history[-1]["loss"] < history[0]["loss"]
    assert history[-1]["lr"] <= history[0]["lr"]


def test_train_empty_corpus_returns_no_history():
    model = SkipGramNegSampling(3, 4)
    corpus = Corpus([], np.ones(3))
    assert train(model, corpus, num_epochs=2, verbose=False) == []


def test_train_rejects_non_positive_log_every():
    vocab = Vocabulary.from_sentences(SENTENCES)
    corpus = Corpus.from_sentences(SENTENCES, vocab)
    model = SkipGramNegSampling(len(vocab), 4, seed=0)
    before = model.W_in.copy()
    with pytest.raises(ValueError):
        train(model, corpus, log_every=0, verbose=False)
    np.testing.assert_array_equal(model.W_in, before)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
