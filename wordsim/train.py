from typing import List, Optional

import numpy as np

from wordsim.data import Corpus, negative_sampling_distribution, skipgram_batches
from wordsim.model import SkipGramNegSampling

# Training loop: Adagrad or SGD with optional linear LR decay over pairs processed.


def _estimate_pairs(corpus: Corpus, window_size: int, subsample: bool) -> int:
    pairs = corpus.n_tokens * 2 * max(1, window_size)
    return int(pairs * 0.5) if subsample else pairs


def train(
    model: SkipGramNegSampling,
    corpus: Corpus,
    *,
    num_epochs: int = 1,
    batch_size: int = 128,
    window_size: int = 5,
    num_negatives: int = 5,
    lr: float = 0.025,
    lr_min_ratio: float = 0.0001,
    use_adagrad: bool = True,
    use_lr_decay: bool = True,
    subsample: bool = True,
    seed: Optional[int] = None,
    log_every: int = 1000,
    verbose: bool = True,
) -> List[dict]:
    """Train model in place on corpus.

    With use_lr_decay the rate falls linearly from lr to lr * lr_min_ratio over the
    estimated number of pairs in the run.

    Args:
        model: SkipGramNegSampling instance (updated in place).
        corpus: Corpus to train on.
        num_epochs: Passes over the corpus. Defaults to 1.
        batch_size: Pairs per batch. Defaults to 128.
        window_size: Context window size. Defaults to 5.
        num_negatives: Negatives per positive. Defaults to 5.
        lr: Initial learning rate. Defaults to 0.025.
        lr_min_ratio: Floor of the decayed rate as a fraction of lr. Defaults to 0.0001.
        use_adagrad: Adagrad updates instead of plain SGD. Defaults to True.
        use_lr_decay: Linear LR decay. Defaults to True.
        subsample: Subsample frequent words each epoch. Defaults to True.
        seed: Random seed. Defaults to None.
        log_every: Record history (and print when verbose) every this many steps.
            Defaults to 1000.
        verbose: Print progress to stdout. Defaults to True.

    Returns:
        List of {"step", "loss", "lr"} dicts; includes the final step if any step ran.

    Raises:
        ValueError: If log_every is less than 1.
    """
    if log_every < 1:
        raise ValueError(f"log_every must be at least 1, got {log_every}")
    rng = np.random.default_rng(seed)
    neg_probs = negative_sampling_distribution(corpus.counts)
    total_pairs = _estimate_pairs(corpus, window_size, subsample) * num_epochs
    if verbose:
        steps_est = max(1, total_pairs // max(1, batch_size))
        print(f"Training: {num_epochs} epochs, ~{steps_est} steps total")

    if use_adagrad:
        G_in = np.zeros_like(model.W_in)
        G_out = np.zeros_like(model.W_out)

    history: List[dict] = []
    step = 0
    pairs_seen = 0
    loss = 0.0
    lr_current = lr
    for epoch in range(num_epochs):
        if verbose:
            print(f"Epoch {epoch + 1}/{num_epochs}")
        batches = skipgram_batches(
            corpus,
            batch_size,
            window_size,
            num_negatives,
            neg_probs,
            subsample=subsample,
            seed=int(rng.integers(0, 2**31)) if seed is not None else None,
        )
        for center, context_pos, context_neg in batches:
            if use_lr_decay and total_pairs > 0:
                lr_current = lr * max(lr_min_ratio, 1.0 - pairs_seen / (total_pairs + 1))
            loss, grad_in, grad_out = model.forward_backward(center, context_pos, context_neg)
            if use_adagrad:
                G_in += grad_in**2
                G_out += grad_out**2
                model.W_in -= lr_current * grad_in / (np.sqrt(G_in) + 1e-10)
                model.W_out -= lr_current * grad_out / (np.sqrt(G_out) + 1e-10)
            else:
                model.W_in -= lr_current * grad_in
                model.W_out -= lr_current * grad_out
            pairs_seen += center.shape[0]
            step += 1
            if step % log_every == 0:
                history.append({"step": step, "loss": loss, "lr": lr_current})
                if verbose:
                    print(f"step {step} loss {loss:.4f} lr {lr_current:.6f}")
    if step > 0 and (not history or history[-1]["step"] != step):
        history.append({"step": step, "loss": loss, "lr": lr_current})
    return history
