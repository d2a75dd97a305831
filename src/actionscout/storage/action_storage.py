"""Action storage — persist classified actions and query them back."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import logfire
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from actionscout.actions.models import Action
from actionscout.db.models import ActionElement, UserAction, Website
from actionscout.storage.similarity import SimilarityIndex


@dataclass
class StoredElement:
    """An element as persisted alongside an action."""

    selector: str
    type: str
    attributes: dict[str, Any] = field(default_factory=dict)
    text: str = ""
    position: dict[str, Any] = field(default_factory=dict)


@dataclass
class StoredAction:
    """An action read back from storage."""

    id: str
    type: str
    name: str
    description: str
    confidence: float
    url: str
    elements: list[StoredElement] = field(default_factory=list)
    score: float | None = None  # Similarity score, for similarity searches

    @classmethod
    def from_record(cls, record: UserAction, score: float | None = None) -> StoredAction:
        return cls(
            id=record.id,
            type=record.type,
            name=record.name,
            description=record.description or "",
            confidence=record.confidence,
            url=record.website.url,
            elements=[
                StoredElement(
                    selector=el.selector,
                    type=el.element_type,
                    attributes=el.attributes or {},
                    text=el.text or "",
                    position=el.position or {},
                )
                for el in record.elements
            ],
            score=score,
        )


class ActionStorage:
    """Stores actions relationally and indexes them for similarity search.

    Each action's owning website row is upserted by URL. The similarity
    index is optional; without one, similarity searches return nothing.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        similarity_index: SimilarityIndex | None = None,
        log: logfire.Logfire | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._index = similarity_index
        self._log = log or logfire.with_tags("action-storage")

    async def store_actions(self, actions: Sequence[Action]) -> list[str]:
        """Persist actions in one transaction and return their ids.

        Raises:
            SQLAlchemyError: If the transaction fails (nothing is stored)
        """
        if not actions:
            return []

        stored: list[tuple[str, Action]] = []
        try:
            async with self._session_factory() as session, session.begin():
                websites: dict[str, Website] = {}
                for action in actions:
                    website = websites.get(action.url)
                    if website is None:
                        website = await self._upsert_website(session, action.url)
                        websites[action.url] = website

                    record = UserAction(
                        id=str(uuid4()),
                        website=website,
                        type=str(action.type),
                        name=action.name,
                        description=action.description,
                        confidence=action.confidence,
                        elements=[
                            ActionElement(
                                selector=el.selector,
                                element_type=el.tag_type,
                                attributes=dict(el.attributes),
                                text=el.text,
                                position={"x": el.position.x, "y": el.position.y},
                            )
                            for el in action.elements
                        ],
                    )
                    session.add(record)
                    stored.append((record.id, action))
        except SQLAlchemyError as e:
            self._log.error("Error storing user actions", error=str(e), actions=len(actions))
            raise

        self._log.info("Stored user actions", actions=len(stored))

        for action_id, action in stored:
            await self._index_action(action_id, action)

        return [action_id for action_id, _ in stored]

    async def _upsert_website(self, session: AsyncSession, url: str) -> Website:
        website = await session.scalar(select(Website).where(Website.url == url))
        if website is None:
            website = Website(url=url)
            session.add(website)
            await session.flush()
        else:
            website.last_crawled = datetime.now(UTC)
        return website

    async def _index_action(self, action_id: str, action: Action) -> None:
        if self._index is None:
            return
        try:
            await self._index.add(
                action_id,
                f"{action.name}: {action.description}",
                {
                    "type": str(action.type),
                    "name": action.name,
                    "description": action.description,
                    "url": action.url,
                },
            )
        except Exception as e:
            self._log.error("Error indexing action", action_id=action_id, error=str(e))

    async def get_actions_by_url(self, url: str) -> list[StoredAction]:
        """All stored actions discovered on ``url``."""
        query = self._action_query().where(Website.url == url)
        return await self._fetch(query, context={"url": url})

    async def get_actions_by_type(self, action_type: str, limit: int = 10) -> list[StoredAction]:
        """Up to ``limit`` stored actions of one type."""
        query = self._action_query().where(UserAction.type == action_type).limit(limit)
        return await self._fetch(query, context={"type": action_type})

    async def find_similar_actions(self, query: str, limit: int = 10) -> list[StoredAction]:
        """Stored actions most similar to ``query``, best first."""
        if self._index is None:
            return []

        try:
            hits = await self._index.search(query, limit)
        except Exception as e:
            self._log.error("Error finding similar actions", query=query, error=str(e))
            return []

        if not hits:
            return []

        scores = {hit.id: hit.score for hit in hits}
        records = await self._fetch_records(
            self._action_query().where(UserAction.id.in_(list(scores))),
            context={"query": query},
        )
        by_id = {record.id: record for record in records}
        return [
            StoredAction.from_record(by_id[hit.id], score=hit.score)
            for hit in hits
            if hit.id in by_id
        ]

    @staticmethod
    def _action_query():
        return (
            select(UserAction)
            .join(Website)
            .options(selectinload(UserAction.elements), selectinload(UserAction.website))
            .order_by(UserAction.created_at)
        )

    async def _fetch(self, query, context: dict[str, str]) -> list[StoredAction]:
        records = await self._fetch_records(query, context)
        return [StoredAction.from_record(record) for record in records]

    async def _fetch_records(self, query, context: dict[str, str]) -> list[UserAction]:
        try:
            async with self._session_factory() as session:
                return list((await session.scalars(query)).all())
        except SQLAlchemyError as e:
            self._log.error("Error querying user actions", error=str(e), **context)
            return []
