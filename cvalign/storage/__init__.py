"""Persistence for jobs, candidates, rankings and embeddings."""
from .repository import InMemoryRepository, Repository
