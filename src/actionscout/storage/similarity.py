"""Similarity search over stored actions."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class SimilarityHit:
    """A search hit: the id the vector was stored under and its score."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class SimilarityIndex(Protocol):
    """Stores text under opaque ids and finds the ids nearest to a query."""

    async def add(self, vector_id: str, text: str, metadata: dict[str, Any]) -> None: ...

    async def search(self, query: str, limit: int = 10) -> list[SimilarityHit]: ...


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 when either has zero length."""
    if len(a) != len(b):
        raise ValueError(f"Vector dimensions differ: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class InMemorySimilarityIndex:
    """Brute-force cosine search over vectors held in memory.

    Embedding is delegated to ``embed``, so any embedding model can be
    plugged in. This is a reference backend for embedding ``ActionStorage``
    in a long-lived process; vectors do not survive the process, so the CLI
    does not configure an index and its similarity searches return nothing.
    """

    def __init__(self, embed: Callable[[str], Sequence[float]]) -> None:
        self._embed = embed
        self._vectors: dict[str, tuple[list[float], dict[str, Any]]] = {}

    def __len__(self) -> int:
        return len(self._vectors)

    async def add(self, vector_id: str, text: str, metadata: dict[str, Any]) -> None:
        self._vectors[vector_id] = (list(self._embed(text)), dict(metadata))

    async def search(self, query: str, limit: int = 10) -> list[SimilarityHit]:
        query_vector = self._embed(query)
        hits = [
            SimilarityHit(
                id=vector_id,
                score=cosine_similarity(query_vector, vector),
                metadata=meta,
            )
            for vector_id, (vector, meta) in self._vectors.items()
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits[:limit]
