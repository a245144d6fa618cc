from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from shopfloor.db.base import Base


class EntryValue(Base):
    __tablename__ = "entry_values"
    __table_args__ = (
        sa.Index("entry_values_entry_id_idx", "entry_id"),
        sa.Index("entry_values_field_definition_id_idx", "field_definition_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    entry_id: Mapped[int] = mapped_column(Integer, ForeignKey("entries.id", ondelete="CASCADE"), nullable=False)
    field_definition_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("field_definitions.id", ondelete="CASCADE"),
        nullable=False,
    )

    # exactly one of these is set, chosen by the field type
    value_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    value_number: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    value_boolean: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    entry = relationship("Entry", back_populates="values")
    field = relationship("FieldDefinition", back_populates="values", lazy="selectin")
