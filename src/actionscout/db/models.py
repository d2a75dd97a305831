"""SQLAlchemy models for actionscout."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Website(Base):
    """A crawled page URL that owns discovered actions."""

    __tablename__ = "websites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    url: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    title: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # Timestamps
    last_crawled: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # Relationships
    actions: Mapped[list["UserAction"]] = relationship(
        "UserAction", back_populates="website", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Website {self.url}>"


class UserAction(Base):
    """A classified user action."""

    __tablename__ = "user_actions"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    website_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("websites.id"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    confidence: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # Relationships
    website: Mapped[Website] = relationship("Website", back_populates="actions")
    elements: Mapped[list["ActionElement"]] = relationship(
        "ActionElement",
        back_populates="action",
        cascade="all, delete-orphan",
        order_by="ActionElement.id",
    )

    def __repr__(self) -> str:
        return f"<UserAction {self.id} ({self.type})>"


class ActionElement(Base):
    """A page element that is part of a user action."""

    __tablename__ = "action_elements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    action_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user_actions.id"), nullable=False, index=True
    )
    selector: Mapped[str] = mapped_column(Text, nullable=False)
    element_type: Mapped[str] = mapped_column(String(50), nullable=False)
    attributes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    action: Mapped[UserAction] = relationship("UserAction", back_populates="elements")

    def __repr__(self) -> str:
        return f"<ActionElement {self.element_type} {self.selector}>"
