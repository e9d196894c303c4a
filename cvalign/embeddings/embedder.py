"""
Text embeddings and cosine similarity for CV/job matching.

The default backend is a bag-of-hashed-tokens fingerprint: deterministic,
dependency-light and good enough to compare vocabulary overlap. A
sentence-transformers backend can be swapped in behind the same
``embed`` interface.
"""
import logging
import time
from typing import Any, List, Optional, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _sk_cosine_similarity

from ..errors import DimensionMismatch

logger = logging.getLogger(__name__)

DEFAULT_DIMENSION = 1536
DEFAULT_INCREMENT = 0.1


def string_hash(token: str) -> int:
    """
    Non-negative 32-bit hash, ``h = h * 31 + unit`` over UTF-16 code units.

    Stable across processes, unlike the built-in ``hash``.
    """
    encoded = token.encode('utf-16-le')
    value = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


class HashEmbedder:
    """Embed text as an L2-normalised histogram of hashed tokens."""

    def __init__(self, dimension: int = DEFAULT_DIMENSION, increment: float = DEFAULT_INCREMENT):
        if dimension < 1:
            raise ValueError("Embedding dimension must be positive")
        self.dimension = dimension
        self.increment = increment

    def embed(self, text: str) -> np.ndarray:
        vector = np.zeros(self.dimension, dtype=np.float64)

        for token in text.lower().split():
            vector[string_hash(token) % self.dimension] += self.increment

        magnitude = np.linalg.norm(vector)
        if magnitude > 0:
            vector = vector / magnitude
        return vector

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        return [self.embed(text) for text in texts]

    def get_embedding_dimension(self) -> int:
        return self.dimension


class SentenceTransformerEmbedder:
    """Compute semantic embeddings using a sentence-transformers model."""

    def __init__(self, model_name: str, batch_size: int = 16, model: Optional[Any] = None):
        """
        Initialize embedder with model.

        Args:
            model_name: Hugging Face model identifier
            batch_size: Batch size for ``embed_batch``
            model: Preloaded model object; loaded from ``model_name`` when omitted
        """
        self.model_name = model_name
        self.batch_size = batch_size
        self.model = model

        if self.model is None:
            self._load_model()

    def _load_model(self, retry_count: int = 0) -> None:
        from sentence_transformers import SentenceTransformer

        try:
            logger.info(f"Loading model: {self.model_name}")
            self.model = SentenceTransformer(self.model_name)
            logger.info(f"Model loaded successfully: {self.model_name}")

        except Exception as e:
            logger.error(f"Failed to load model {self.model_name}: {str(e)}")

            if retry_count < 2:
                logger.info(f"Retrying model load (attempt {retry_count + 1})")
                time.sleep(1)
                self._load_model(retry_count + 1)
            else:
                raise RuntimeError(f"Failed to load embedding model after retries: {str(e)}")

    def embed(self, text: str) -> np.ndarray:
        if not text or not text.strip():
            logger.warning("Empty text provided for encoding")
            return np.zeros(self.get_embedding_dimension())

        return np.asarray(self.model.encode(
            text,
            convert_to_numpy=True,
            show_progress_bar=False,
            normalize_embeddings=True
        ))

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        if not texts:
            return []

        embeddings = self.model.encode(
            list(texts),
            convert_to_numpy=True,
            show_progress_bar=False,
            batch_size=self.batch_size,
            normalize_embeddings=True
        )
        return [np.asarray(emb) for emb in embeddings]

    def get_embedding_dimension(self) -> int:
        return self.model.get_sentence_embedding_dimension()


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatch: If the vectors differ in length
    """
    vec_a = np.asarray(a, dtype=np.float64).ravel()
    vec_b = np.asarray(b, dtype=np.float64).ravel()

    if vec_a.shape != vec_b.shape:
        raise DimensionMismatch(
            f"Vectors must have the same length ({vec_a.shape[0]} != {vec_b.shape[0]})"
        )

    if not np.any(vec_a) or not np.any(vec_b):
        return 0.0

    return float(_sk_cosine_similarity(vec_a.reshape(1, -1), vec_b.reshape(1, -1))[0][0])


def create_embedder(config) -> Any:
    """Build the embedder selected by ``config.embedding_backend``."""
    backend = (config.embedding_backend or "hash").lower()

    if backend == "hash":
        return HashEmbedder(config.embedding_dimension, config.embedding_increment)
    if backend in ("sentence-transformers", "sentence_transformers"):
        return SentenceTransformerEmbedder(config.embedding_model, config.embedding_batch_size)

    raise ValueError(f"Unknown embedding backend: {config.embedding_backend}")
