import logging
import math
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from shopfloor.api.articles import get_article_or_404
from shopfloor.core.field_validation import (
    as_number,
    collect_field_errors,
    field_spec_from_row,
    format_number,
    is_empty,
)
from shopfloor.db.session import get_db
from shopfloor.models.article import Article
from shopfloor.models.entry import ENTRY_STATUSES, Entry
from shopfloor.models.entry_value import EntryValue
from shopfloor.models.field_definition import FieldDefinition
from shopfloor.schemas.entries import EntryCreate, EntryOut, EntryStats, EntryUpdate
from shopfloor.schemas.validation import FieldErrorOut, ValidationPreviewResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["entries"])

TRUE_STRINGS = {"true", "1", "yes", "on"}

# stages that can pile up; READY is the sink of the board
BOTTLENECK_STAGES = ("PREPARATION", "IN PRODUCTION")


def _shop_floor_fields(article: Article) -> list[FieldDefinition]:
    return [f for f in article.fields if f.scope == "shop_floor"]


def _value_out(v: EntryValue):
    if v.value_number is not None:
        n = float(v.value_number)
        return int(n) if n.is_integer() else n
    if v.value_text is not None:
        return v.value_text
    if v.value_boolean is not None:
        return v.value_boolean
    return None


def to_out(e: Entry) -> EntryOut:
    return EntryOut(
        id=e.id,
        article_id=e.article_id,
        article_name=e.article.name,
        quantity=e.quantity,
        status=e.status,
        priority=e.priority,
        started_at=e.started_at,
        completed_at=e.completed_at,
        values={v.field.key: _value_out(v) for v in e.values},
        created_at=e.created_at,
        updated_at=e.updated_at,
    )


def _text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def _boolean(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def _typed_value(f: FieldDefinition, value) -> EntryValue:
    """
    Store a validated value in the column matching the field type.
    """
    row = EntryValue(field_definition_id=f.id)
    if f.field_type == "number":
        row.value_number = Decimal(str(as_number(value)))
    elif f.field_type == "boolean":
        row.value_boolean = _boolean(value)
    else:
        row.value_text = _text(value)
    return row


def _percent(part: int, total: int) -> int:
    # halves round up (12.5 -> 13), not to even
    if not total:
        return 0
    return math.floor(part * 100 / total + 0.5)


def _validation_errors(article: Article, values: dict) -> list[FieldErrorOut]:
    schema = [field_spec_from_row(f) for f in _shop_floor_fields(article)]
    return [FieldErrorOut.from_error(e) for e in collect_field_errors(schema, values)]


@router.get("/entries", response_model=list[EntryOut])
def list_entries(
    article_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    query = db.query(Entry)
    if article_id is not None:
        query = query.filter(Entry.article_id == article_id)
    rows = query.order_by(Entry.created_at.desc(), Entry.id.desc()).all()
    return [to_out(e) for e in rows]


@router.get("/entries/stats", response_model=EntryStats)
def entry_stats(db: Session = Depends(get_db)):
    """
    Production board summary: jobs in flight, jobs done, the busiest
    pre-completion stage and the share of entries that are READY.
    """
    counts: dict[str, int] = {s: 0 for s in ENTRY_STATUSES}
    for s in db.query(Entry.status).all():
        counts[s[0]] = counts.get(s[0], 0) + 1

    total = sum(counts.values())
    completed = counts["READY"]

    bottleneck_stage = "None"
    bottleneck_count = 0
    for stage in BOTTLENECK_STAGES:
        if counts[stage] > bottleneck_count:
            bottleneck_count = counts[stage]
            bottleneck_stage = stage

    return EntryStats(
        active_jobs=counts["IN PRODUCTION"],
        completed_jobs=completed,
        bottleneck_stage=bottleneck_stage,
        efficiency=_percent(completed, total),
    )


@router.get("/entries/{entry_id}", response_model=EntryOut)
def get_entry(entry_id: int, db: Session = Depends(get_db)):
    e = db.get(Entry, entry_id)
    if not e:
        raise HTTPException(status_code=404, detail="Entry not found")
    return to_out(e)


@router.post("/entries", response_model=EntryOut, status_code=status.HTTP_201_CREATED)
def create_entry(payload: EntryCreate, db: Session = Depends(get_db)):
    article = get_article_or_404(db, payload.article_id)

    errors = _validation_errors(article, payload.values)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Validation failed", "errors": [e.message for e in errors]},
        )

    fields_by_key = {f.key: f for f in _shop_floor_fields(article)}
    unknown = [k for k in payload.values if k not in fields_by_key]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Unknown fields", "errors": [f"Field {k} not found in article schema" for k in unknown]},
        )

    now = datetime.utcnow()
    e = Entry(
        article_id=article.id,
        quantity=payload.quantity,
        status="PREPARATION",
        priority="normal",
        created_at=now,
        updated_at=now,
    )
    for key, value in payload.values.items():
        if is_empty(value):
            continue
        e.values.append(_typed_value(fields_by_key[key], value))

    db.add(e)
    db.flush()

    logger.info("Entry %s created for article %s (qty=%s)", e.id, article.id, e.quantity)

    db.commit()
    db.refresh(e)
    return to_out(e)


@router.patch("/entries/{entry_id}", response_model=EntryOut)
def update_entry(entry_id: int, payload: EntryUpdate, db: Session = Depends(get_db)):
    e = db.get(Entry, entry_id)
    if not e:
        raise HTTPException(status_code=404, detail="Entry not found")

    now = datetime.utcnow()

    if payload.quantity is not None:
        e.quantity = payload.quantity
    if payload.priority is not None:
        e.priority = payload.priority

    if payload.status is not None and payload.status != e.status:
        previous = e.status
        e.status = payload.status
        if payload.status == "IN PRODUCTION" and e.started_at is None:
            e.started_at = now
        elif payload.status == "READY":
            e.completed_at = now
        logger.info("Entry %s moved %s -> %s", e.id, previous, e.status)

    e.updated_at = now
    db.commit()
    db.refresh(e)
    return to_out(e)


@router.post("/articles/{article_id}/entries/validate", response_model=ValidationPreviewResponse)
def preview_entry_validation(
    article_id: int,
    values: dict[str, str | int | float | bool | None],
    db: Session = Depends(get_db),
):
    """
    Validate shop floor values against the article schema without saving.
    Keys outside the schema are reported as warnings.
    """
    article = get_article_or_404(db, article_id)
    errors = _validation_errors(article, values)
    known = {f.key for f in _shop_floor_fields(article)}
    warnings = [f"Field {k} is not part of the article schema" for k in values if k not in known]
    return ValidationPreviewResponse(valid=not errors, errors=errors, warnings=warnings)
