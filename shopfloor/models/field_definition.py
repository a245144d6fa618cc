from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from shopfloor.db.base import Base

FIELD_TYPES = ("text", "number", "boolean", "select")
FIELD_SCOPES = ("attribute", "shop_floor")


class FieldDefinition(Base):
    __tablename__ = "field_definitions"
    __table_args__ = (
        CheckConstraint(
            "field_type IN ('text','number','boolean','select')",
            name="ck_field_definitions_type",
        ),
        CheckConstraint(
            "scope IN ('attribute','shop_floor')",
            name="ck_field_definitions_scope",
        ),
        UniqueConstraint("article_id", "key", name="uq_field_definitions_article_key"),
        sa.Index("field_definitions_article_id_idx", "article_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    article_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
    )

    # stable key used as the lookup key of submitted entry values
    key: Mapped[str] = mapped_column(String(120), nullable=False)

    label: Mapped[str] = mapped_column(String(200), nullable=False)
    field_type: Mapped[str] = mapped_column(String(20), nullable=False)
    scope: Mapped[str] = mapped_column(String(20), nullable=False)

    # authored order inside the article schema (both scopes share one sequence)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    article = relationship("Article", back_populates="fields")
    validation = relationship(
        "FieldValidation",
        back_populates="field",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    # submitted values go with the field when it leaves the schema
    values = relationship(
        "EntryValue",
        back_populates="field",
        cascade="all, delete-orphan",
    )
