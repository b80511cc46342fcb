from typing import Tuple

import numpy as np

# Skip-gram with negative sampling in NumPy: loss and gradients without autograd.
# sigmoid/log_sigmoid clip their input and use -softplus(-x) to stay finite.


def _sigmoid(x: np.ndarray) -> np.ndarray:
    """Sigmoid with input clipped to [-500, 500] so exp cannot overflow."""
    x = np.clip(x, -500.0, 500.0)
    return 1.0 / (1.0 + np.exp(-x))


def _log_sigmoid(x: np.ndarray) -> np.ndarray:
    """log(sigmoid(x)) as -softplus(-x)."""
    x = np.clip(x, -500.0, 500.0)
    return -np.maximum(-x, 0) - np.log1p(np.exp(-np.abs(x)))


class SkipGramNegSampling:
    """Center (W_in) and context (W_out) embedding matrices for SGNS.

    The score of a (center w, context c) pair is W_out[c] @ W_in[w]; the per-pair loss is
    -log sigmoid(score_pos) - sum_k log sigmoid(-score_neg_k).

    Attributes:
        W_in (np.ndarray): Center embeddings, (V, D). These are the word vectors.
        W_out (np.ndarray): Context embeddings, (V, D).
        V (int): Vocabulary size.
        D (int): Embedding dimension.
    """

    def __init__(self, vocab_size: int, dim: int, seed: int = 42):
        """Random init: W_in uniform in +-0.5/D, W_out small normal.

        Args:
            vocab_size: Vocabulary size V.
            dim: Embedding dimension D (> 0).
            seed: Random seed. Defaults to 42.

        Raises:
            ValueError: If vocab_size or dim is not positive.
        """
        if vocab_size <= 0 or dim <= 0:
            raise ValueError(f"vocab_size and dim must be positive, got {vocab_size}, {dim}")
        rng = np.random.default_rng(seed)
        self.W_in = rng.uniform(-0.5 / dim, 0.5 / dim, size=(vocab_size, dim))
        self.W_out = rng.standard_normal((vocab_size, dim)) * 0.01
        self.V = vocab_size
        self.D = dim

    def loss(self, center: np.ndarray, context_pos: np.ndarray, context_neg: np.ndarray) -> float:
        """Mean loss over the batch, no gradients."""
        v_w = self.W_in[center]
        score_pos = np.sum(self.W_out[context_pos] * v_w, axis=1)
        score_neg = np.einsum("bkd,bd->bk", self.W_out[context_neg], v_w)
        total = -_log_sigmoid(score_pos).sum() - _log_sigmoid(-score_neg).sum()
        return float(total / center.shape[0])

    def forward_backward(
        self,
        center: np.ndarray,
        context_pos: np.ndarray,
        context_neg: np.ndarray,
    ) -> Tuple[float, np.ndarray, np.ndarray]:
        """Loss and gradients for one batch.

        Args:
            center: Center ids, (B,).
            context_pos: Positive context ids, (B,).
            context_neg: Negative context ids, (B, K).

        Returns:
            (loss, grad_in, grad_out). loss is the batch mean; grad_in and grad_out are
            (V, D) gradients of the mean loss, so W -= lr * grad descends.
        """
        B = center.shape[0]
        v_w = self.W_in[center]  # (B, D)
        u_c = self.W_out[context_pos]  # (B, D)
        u_neg = self.W_out[context_neg]  # (B, K, D)

        score_pos = np.sum(u_c * v_w, axis=1)  # (B,)
        score_neg = np.einsum("bkd,bd->bk", u_neg, v_w)  # (B, K)
        loss = (-_log_sigmoid(score_pos).sum() - _log_sigmoid(-score_neg).sum()) / B

        # d/dx -log sigmoid(x) = sigmoid(x) - 1;  d/dx -log sigmoid(-x) = sigmoid(x)
        g_pos = _sigmoid(score_pos) - 1.0  # (B,)
        g_neg = _sigmoid(score_neg)  # (B, K)

        d_v_w = g_pos[:, None] * u_c + np.einsum("bk,bkd->bd", g_neg, u_neg)
        d_u_c = g_pos[:, None] * v_w
        d_u_neg = g_neg[:, :, None] * v_w[:, None, :]

        grad_in = np.zeros_like(self.W_in)
        grad_out = np.zeros_like(self.W_out)
        np.add.at(grad_in, center, d_v_w)
        np.add.at(grad_out, context_pos, d_u_c)
        np.add.at(grad_out, context_neg.ravel(), d_u_neg.reshape(-1, self.D))
        grad_in /= B
        grad_out /= B
        return float(loss), grad_in, grad_out
