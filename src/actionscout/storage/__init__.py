"""Persistence for classified actions."""

from actionscout.storage.action_storage import ActionStorage, StoredAction, StoredElement
from actionscout.storage.similarity import (
    InMemorySimilarityIndex,
    SimilarityHit,
    SimilarityIndex,
    cosine_similarity,
)

__all__ = [
    "ActionStorage",
    "InMemorySimilarityIndex",
    "SimilarityHit",
    "SimilarityIndex",
    "StoredAction",
    "StoredElement",
    "cosine_similarity",
]
