"""Embedding backends and vector similarity."""
from .embedder import (
    HashEmbedder,
    SentenceTransformerEmbedder,
    cosine_similarity,
    create_embedder,
    string_hash,
)
