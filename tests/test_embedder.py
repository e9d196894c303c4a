"""Tests for embeddings and cosine similarity."""
from unittest.mock import MagicMock

import numpy as np
import pytest

from cvalign.embeddings.embedder import (
    HashEmbedder,
    SentenceTransformerEmbedder,
    cosine_similarity,
    create_embedder,
    string_hash,
)
from cvalign.errors import DimensionMismatch
from cvalign.utils.config import Config


class TestStringHash:

    @pytest.mark.parametrize("token,expected", [
        ("", 0),
        ("a", 97),
        ("ab", 3105),
    ])
    def test_known_values(self, token, expected):
        assert string_hash(token) == expected

    def test_wraps_to_32_bits_and_is_non_negative(self):
        value = string_hash("microservices-architecture-experience")

        assert 0 <= value <= 2 ** 31

    def test_stable(self):
        assert string_hash("python") == string_hash("python")


class TestHashEmbedder:

    def test_dimension_and_unit_norm(self):
        vector = HashEmbedder().embed("Senior React developer")

        assert vector.shape == (1536,)
        assert np.linalg.norm(vector) == pytest.approx(1.0)

    def test_empty_text_is_zero_vector(self):
        vector = HashEmbedder(dimension=8).embed("   ")

        assert not np.any(vector)

    def test_case_insensitive_tokens(self):
        embedder = HashEmbedder(dimension=64)

        np.testing.assert_allclose(embedder.embed("React Python"), embedder.embed("react python"))

    def test_token_lands_in_hash_bucket(self):
        vector = HashEmbedder(dimension=16).embed("a")

        assert vector[97 % 16] == pytest.approx(1.0)

    def test_embed_batch(self):
        embedder = HashEmbedder(dimension=16)

        vectors = embedder.embed_batch(["a", "b"])

        assert len(vectors) == 2
        assert embedder.get_embedding_dimension() == 16

    def test_invalid_dimension(self):
        with pytest.raises(ValueError):
            HashEmbedder(dimension=0)


class TestCosineSimilarity:

    def test_self_similarity_is_one(self):
        vector = HashEmbedder().embed("python docker aws")

        assert cosine_similarity(vector, vector) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)

    def test_zero_vector_gives_zero(self):
        assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch):
            cosine_similarity([1, 2], [1, 2, 3])

    def test_dimension_mismatch_is_a_value_error(self):
        with pytest.raises(ValueError):
            cosine_similarity([1], [1, 2])

    def test_shared_vocabulary_is_more_similar(self):
        embedder = HashEmbedder()
        job = embedder.embed("react typescript frontend developer")

        close = cosine_similarity(embedder.embed("react typescript developer"), job)
        far = cosine_similarity(embedder.embed("accountant payroll ledger"), job)

        assert close > far


class TestSentenceTransformerEmbedder:

    @pytest.fixture
    def model(self):
        model = MagicMock()
        model.encode.side_effect = lambda texts, **kwargs: (
            np.ones((len(texts), 4)) if isinstance(texts, list) else np.ones(4)
        )
        model.get_sentence_embedding_dimension.return_value = 4
        return model

    def test_embed_uses_model(self, model):
        embedder = SentenceTransformerEmbedder("fake-model", model=model)

        vector = embedder.embed("python developer")

        assert vector.shape == (4,)
        assert model.encode.call_args.kwargs['normalize_embeddings'] is True

    def test_empty_text_returns_zeros(self, model):
        embedder = SentenceTransformerEmbedder("fake-model", model=model)

        vector = embedder.embed("  ")

        assert not np.any(vector)
        assert vector.shape == (4,)
        model.encode.assert_not_called()

    def test_embed_batch_passes_batch_size(self, model):
        embedder = SentenceTransformerEmbedder("fake-model", batch_size=2, model=model)

        vectors = embedder.embed_batch(["a", "b", "c"])

        assert len(vectors) == 3
        assert model.encode.call_args.kwargs['batch_size'] == 2

    def test_embed_batch_empty(self, model):
        assert SentenceTransformerEmbedder("fake-model", model=model).embed_batch([]) == []


class TestCreateEmbedder:

    def test_hash_backend(self):
        config = Config(config_path=None)
        config.embedding_dimension = 32

        embedder = create_embedder(config)

        assert isinstance(embedder, HashEmbedder)
        assert embedder.get_embedding_dimension() == 32

    def test_unknown_backend(self):
        config = Config(config_path=None)
        config.embedding_backend = "word2vec"

        with pytest.raises(ValueError):
            create_embedder(config)
