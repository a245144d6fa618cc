from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from shopfloor.db.base import Base

# production board columns, in flow order
ENTRY_STATUSES = ("PREPARATION", "IN PRODUCTION", "READY")
ENTRY_PRIORITIES = ("high", "normal", "low")


class Entry(Base):
    __tablename__ = "entries"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_entries_quantity_positive"),
        CheckConstraint(
            "status IN ('PREPARATION','IN PRODUCTION','READY')",
            name="ck_entries_status",
        ),
        sa.Index("entries_article_id_idx", "article_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    article_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PREPARATION")
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="normal")

    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    article = relationship("Article", back_populates="entries", lazy="selectin")
    values = relationship(
        "EntryValue",
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
