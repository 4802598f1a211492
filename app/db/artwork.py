from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import (
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    JSON,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Artwork(Base):
    __tablename__ = "artworks"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    author: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="Unknown Artist",
    )

    cover_image: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    extra_images: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    collocation: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    link: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    period_tags: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    type_tags: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    course = relationship(
        "Course",
        back_populates="artworks",
    )

    progress_entries = relationship(
        "ArtworkProgress",
        back_populates="artwork",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return (
            f"<Artwork(id={self.id}, title={self.title}, "
            f"order={self.order}, course_id={self.course_id})>"
        )
