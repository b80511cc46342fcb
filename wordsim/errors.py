# Error kinds for embedding tables and similarity queries. All are raised on
# malformed input and are not retryable.


class SimilarityError(ValueError):
    """Base class for errors raised by the similarity index and its helpers."""


class DimensionMismatch(SimilarityError):
    """Vectors (or a query) do not share the table dimensionality."""


class DuplicateLabel(SimilarityError):
    """A label appears more than once in the table."""


class EmptyIndex(SimilarityError):
    """Query on an index with no entries."""


class ZeroMagnitude(SimilarityError):
    """Cosine similarity is undefined because a vector has zero norm."""


class UnknownLabel(SimilarityError):
    """Lookup of a label that is not in the table."""
