from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, JSON, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor.db.base import Base


class FieldValidation(Base):
    __tablename__ = "field_validations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    field_definition_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("field_definitions.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # number: bounds; select: allowed options (list of strings)
    min: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    max: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    options: Mapped[list | None] = mapped_column(JSON, nullable=True)

    field = relationship("FieldDefinition", back_populates="validation")
