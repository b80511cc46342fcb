import re
from typing import Iterable, List, Optional

# Text preparation: raw text -> tokenized sentences for the trainer. Lowercase,
# letter/digit runs only, sentence breaks on terminal punctuation and newlines.

_TOKEN_RE = re.compile(r"[a-z0-9]+")
_SENTENCE_RE = re.compile(r"[.!?;\n]+")

# Small English stop-word list; pass your own set for anything serious.
STOPWORDS = frozenset(
    """
    a an and are as at be but by for from has have in is it its of on or that the
    their there these this to was were which with
    """.split()
)


def tokenize(text: str) -> List[str]:
    """Lowercase and keep letter/digit sequences; apostrophes join words ("don't" -> "dont").

    Args:
        text: Raw input string.

    Returns:
        List of token strings.
    """
    return _TOKEN_RE.findall(text.lower().replace("'", ""))


def split_sentences(text: str) -> List[List[str]]:
    """Split text into sentences and tokenize each; empty sentences are dropped."""
    sentences = []
    for chunk in _SENTENCE_RE.split(text):
        tokens = tokenize(chunk)
        if tokens:
            sentences.append(tokens)
    return sentences


def read_sentences(path: str) -> List[List[str]]:
    """Read a UTF-8 text file and return its tokenized sentences."""
    with open(path, encoding="utf-8") as f:
        return split_sentences(f.read())


def remove_stopwords(
    sentences: Iterable[List[str]],
    stopwords: Optional[Iterable[str]] = None,
) -> List[List[str]]:
    """Drop stop words from every sentence; sentences left empty are removed.

    Args:
        sentences: Tokenized sentences.
        stopwords: Words to drop. Defaults to STOPWORDS.

    Returns:
        Filtered sentences.
    """
    stop = STOPWORDS if stopwords is None else frozenset(stopwords)
    out = []
    for sent in sentences:
        kept = [w for w in sent if w not in stop]
        if kept:
            out.append(kept)
    return out
