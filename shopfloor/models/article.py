from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor.db.base import Base

ARTICLE_STATUSES = ("draft", "active", "archived")


class Article(Base):
    __tablename__ = "articles"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft','active','archived')",
            name="ck_articles_status",
        ),
        Index("articles_name_idx", "name"),
        Index("articles_organization_idx", "organization"),
        Index("articles_status_idx", "status"),
        Index("articles_created_at_idx", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    organization: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    # ordered by position so the schema keeps its authored order
    fields = relationship(
        "FieldDefinition",
        back_populates="article",
        cascade="all, delete-orphan",
        order_by="FieldDefinition.position",
        lazy="selectin",
    )
    entries = relationship(
        "Entry",
        back_populates="article",
        cascade="all, delete-orphan",
    )
