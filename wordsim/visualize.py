import argparse
import json
import os
from typing import List, Optional, Sequence

import numpy as np

from wordsim import config
from wordsim.index import SimilarityIndex
from wordsim.text import read_sentences, split_sentences
from wordsim.trainer import SkipGramTrainer

# Figures for a trained table: loss curve and 2D PCA of the word vectors.
# Run: python -m wordsim.visualize

# Repeated so a small run still logs enough steps for a visible curve
DEMO_TEXT = (
    "the united states of america. the states of america are united. "
    "america is a country. the united kingdom is a country. "
    "the kingdom and the states are countries. "
) * 8


def pca2(X: np.ndarray) -> np.ndarray:
    """Project rows of X onto the first 2 principal components (SVD).

    Args:
        X: Array of shape (n_samples, n_features).

    Returns:
        Array of shape (n_samples, 2); zero-padded when n_features < 2.
    """
    X = np.asarray(X, dtype=np.float64)
    Xc = X - X.mean(axis=0)
    _, _, Vt = np.linalg.svd(Xc, full_matrices=False)
    coords = Xc @ Vt[:2].T
    if coords.shape[1] < 2:
        coords = np.hstack([coords, np.zeros((coords.shape[0], 2 - coords.shape[1]))])
    return coords


def plot_loss(history: Sequence[dict], path: str) -> str:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    steps = [h["step"] for h in history]
    losses = [h["loss"] for h in history]
    plt.figure(figsize=(6, 4))
    if not steps:
        plt.text(0.5, 0.5, "No steps logged", ha="center", va="center")
    else:
        kwargs = {"color": "C0"}
        if len(steps) <= 20:
            kwargs["marker"] = "o"
            kwargs["markersize"] = 4
        plt.plot(steps, losses, **kwargs)
    plt.xlabel("Step")
    plt.ylabel("Loss")
    plt.title("SGNS training loss")
    plt.tight_layout()
    plt.savefig(path, dpi=120)
    plt.close()
    return path


def plot_embeddings(index: SimilarityIndex, path: str, max_labels: int = 50) -> str:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    coords = pca2(index.vectors)
    plt.figure(figsize=(8, 6))
    plt.scatter(coords[:, 0], coords[:, 1], alpha=0.7, s=20)
    for i, w in enumerate(index.labels[:max_labels]):
        plt.annotate(w, (coords[i, 0], coords[i, 1]), fontsize=7, alpha=0.9)
    plt.xlabel("PC1")
    plt.ylabel("PC2")
    plt.title("Word embeddings (PCA)")
    plt.tight_layout()
    plt.savefig(path, dpi=120)
    plt.close()
    return path


def main(argv: Optional[List[str]] = None) -> None:
    """Train on demo text or a file and write loss/PCA figures to save_dir."""
    ap = argparse.ArgumentParser()
    ap.add_argument("--save_dir", type=str, default="figures")
    ap.add_argument("--text", type=str, default=None)
    ap.add_argument("--file", type=str, default=None)
    ap.add_argument("--epochs", type=int, default=config.EPOCHS)
    ap.add_argument("--dim", type=int, default=config.DIM)
    ap.add_argument("--seed", type=int, default=config.SEED)
    args = ap.parse_args(argv)

    if args.file and os.path.isfile(args.file):
        sentences = read_sentences(args.file)
    else:
        sentences = split_sentences(args.text or DEMO_TEXT)

    # every step logged and no subsampling so tiny corpora still draw a curve
    trainer = SkipGramTrainer(dim=args.dim, seed=args.seed, subsample=False, log_every=1)
    index = trainer.train(sentences, epochs=args.epochs)

    os.makedirs(args.save_dir, exist_ok=True)
    print(f"Saved {plot_loss(trainer.history, os.path.join(args.save_dir, 'loss_curve.png'))}")
    with open(os.path.join(args.save_dir, "loss_history.json"), "w") as f:
        json.dump(trainer.history, f, indent=0)
    print(f"Saved {plot_embeddings(index, os.path.join(args.save_dir, 'embeddings_pca.png'))}")


if __name__ == "__main__":
    main()
