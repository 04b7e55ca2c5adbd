"""
Snippetbox — Snippet SQLAlchemy Model
======================================

What:  ORM model for the `snippets` table.
Who:   Used by SnippetStore and by Alembic for schema management.

Table notes:
    - Integer autoincrement id: snippets are addressed as /snippet/view/{id}
    - expires: absolute UTC instant computed at insert (created + N days);
      rows past it are invisible to every read but not physically removed
    - Index on created: serves the "latest ten" home-page query
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class Snippet(Base):
    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_snippets_created", "created"),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', expires='{self.expires}')>"
