from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, func
from .authz import Base


class Post(Base):
    __tablename__ = 'posts'
    TITLE_MAX = 200

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Owner for Own-scoped actions; never reassigned after creation.
    author_id: Mapped[int] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship('User', back_populates='posts')

    @property
    def owner_id(self) -> str:
        return str(self.author_id)

__all__ = ["Post"]
