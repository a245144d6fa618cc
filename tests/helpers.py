from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from shopfloor.models.article import Article
from shopfloor.models.entry import Entry
from shopfloor.models.entry_value import EntryValue
from shopfloor.models.field_definition import FieldDefinition
from shopfloor.models.field_validation import FieldValidation


def create_article(
    db: Session,
    *,
    name: str = "Steel Bracket 200",
    organization: str = "SteelWorks Manufacturing",
    status: str = "active",
) -> Article:
    now = datetime.utcnow()
    a = Article(name=name, organization=organization, status=status, created_at=now, updated_at=now)
    db.add(a)
    db.commit()
    db.refresh(a)
    return a


def add_field(
    db: Session,
    article: Article,
    *,
    key: str,
    label: str = "Question",
    field_type: str = "text",
    scope: str = "shop_floor",
    required: bool = False,
    min=None,
    max=None,
    options: list[str] | None = None,
) -> FieldDefinition:
    f = FieldDefinition(
        article_id=article.id,
        key=key,
        label=label,
        field_type=field_type,
        scope=scope,
        position=len(article.fields),
        created_at=datetime.utcnow(),
    )
    if required or min is not None or max is not None or options is not None:
        f.validation = FieldValidation(required=required, min=min, max=max, options=options)
    article.fields.append(f)
    db.commit()
    db.refresh(f)
    return f


def create_entry(db: Session, article: Article, *, status: str = "PREPARATION", quantity: int = 1, values=None) -> Entry:
    now = datetime.utcnow()
    e = Entry(article_id=article.id, quantity=quantity, status=status, priority="normal", created_at=now, updated_at=now)
    fields_by_key = {f.key: f for f in article.fields}
    for key, value in (values or {}).items():
        f = fields_by_key[key]
        row = EntryValue(field_definition_id=f.id)
        if f.field_type == "number":
            row.value_number = Decimal(str(value))
        elif f.field_type == "boolean":
            row.value_boolean = value
        else:
            row.value_text = value
        e.values.append(row)
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


def weight_article(db: Session) -> Article:
    """Article with a required numeric weight (10..100) and an optional quality select."""
    a = create_article(db)
    add_field(db, a, key="weight", label="Weight", field_type="number", required=True, min=10, max=100)
    add_field(db, a, key="quality", label="Quality", field_type="select", options=["Pass", "Fail"])
    add_field(db, a, key="supplier", label="Supplier", field_type="text", scope="attribute")
    db.refresh(a)
    return a
