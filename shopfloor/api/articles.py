import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shopfloor.core.metrics import POSTGRES_SEARCH, MetricsRecorder, get_metrics
from shopfloor.db.session import get_db
from shopfloor.models.article import Article
from shopfloor.models.field_definition import FieldDefinition
from shopfloor.models.field_validation import FieldValidation
from shopfloor.schemas.articles import (
    ArticleCreate,
    ArticleOut,
    ArticleStatus,
    ArticleUpdate,
    FieldDefinitionIn,
    FieldDefinitionOut,
    FieldValidationOut,
)
from shopfloor.schemas.pagination import PaginatedResponse, PaginationMeta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["articles"])


def _num(n):
    return float(n) if n is not None else None


def _field_out(f: FieldDefinition) -> FieldDefinitionOut:
    v = f.validation
    return FieldDefinitionOut(
        id=f.id,
        key=f.key,
        label=f.label,
        field_type=f.field_type,
        scope=f.scope,
        validation=(
            FieldValidationOut(
                required=v.required,
                min=_num(v.min),
                max=_num(v.max),
                options=v.options,
            )
            if v is not None
            else None
        ),
    )


def to_out(a: Article) -> ArticleOut:
    return ArticleOut(
        id=a.id,
        name=a.name,
        organization=a.organization,
        status=a.status,
        attribute_fields=[_field_out(f) for f in a.fields if f.scope == "attribute"],
        shop_floor_fields=[_field_out(f) for f in a.fields if f.scope == "shop_floor"],
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


def get_article_or_404(db: Session, article_id: int) -> Article:
    a = db.get(Article, article_id)
    if not a:
        raise HTTPException(status_code=404, detail="Article not found")
    return a


def _assert_unique_keys(keys: list[str]) -> None:
    seen: set[str] = set()
    dupes: list[str] = []
    for key in keys:
        if key in seen:
            dupes.append(key)
        seen.add(key)
    if dupes:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "Duplicate field keys", "keys": sorted(set(dupes))},
        )


def _apply_field(f: FieldDefinition, payload: FieldDefinitionIn, scope: str, position: int) -> None:
    f.key = payload.key
    f.label = payload.label
    f.field_type = payload.field_type
    # the list a field arrives in decides its scope
    f.scope = scope
    f.position = position

    v = payload.validation
    if v is None:
        f.validation = None
        return
    # update in place: one validation row per field (unique FK)
    if f.validation is None:
        f.validation = FieldValidation()
    f.validation.required = v.required
    f.validation.min = v.min
    f.validation.max = v.max
    f.validation.options = v.options


def _drop_field(a: Article, f: FieldDefinition) -> None:
    # take stored values off their entries too, so loaded entries stop listing them
    values = list(f.values)
    for v in values:
        if v.entry is not None:
            v.entry.values.remove(v)
    a.fields.remove(f)
    if values:
        logger.info("Field %s removed from article %s with %d entry values", f.key, a.id, len(values))


def _flush_or_409(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Field key already exists for this article")


@router.get("", response_model=PaginatedResponse[ArticleOut])
def list_articles(
    organization: str | None = Query(default=None),
    status: ArticleStatus | None = Query(default=None),
    search: str | None = Query(default=None, description="Case-insensitive match on name"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    metrics: MetricsRecorder = Depends(get_metrics),
):
    query = db.query(Article)

    if organization:
        query = query.filter(Article.organization == organization)

    if status:
        query = query.filter(Article.status == status)

    if search:
        query = query.filter(Article.name.ilike(f"%{search}%"))

    def fetch():
        total = query.count()
        rows = (
            query.order_by(Article.created_at.desc(), Article.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return total, rows

    if search:
        with metrics.measure(POSTGRES_SEARCH, query=search):
            total, rows = fetch()
    else:
        total, rows = fetch()

    items = [to_out(a) for a in rows]
    return PaginatedResponse(
        items=items,
        pagination=PaginationMeta.for_page(total=total, limit=limit, offset=offset, returned=len(items)),
    )


@router.get("/{article_id}", response_model=ArticleOut)
def get_article(article_id: int, db: Session = Depends(get_db)):
    return to_out(get_article_or_404(db, article_id))


@router.post("", response_model=ArticleOut, status_code=status.HTTP_201_CREATED)
def create_article(payload: ArticleCreate, db: Session = Depends(get_db)):
    all_fields = [("attribute", fp) for fp in payload.attribute_fields] + [
        ("shop_floor", fp) for fp in payload.shop_floor_fields
    ]
    _assert_unique_keys([fp.key for _, fp in all_fields])

    now = datetime.utcnow()
    a = Article(
        name=payload.name,
        organization=payload.organization,
        status=payload.status,
        created_at=now,
        updated_at=now,
    )
    for position, (scope, fp) in enumerate(all_fields):
        f = FieldDefinition(created_at=now)
        _apply_field(f, fp, scope, position)
        a.fields.append(f)

    db.add(a)
    _flush_or_409(db)

    logger.info("Article %s created with %d fields", a.id, len(all_fields))

    db.commit()
    db.refresh(a)
    return to_out(a)


@router.patch("/{article_id}", response_model=ArticleOut)
def update_article(article_id: int, payload: ArticleUpdate, db: Session = Depends(get_db)):
    a = get_article_or_404(db, article_id)

    if payload.name is not None:
        a.name = payload.name
    if payload.organization is not None:
        a.organization = payload.organization
    if payload.status is not None:
        a.status = payload.status

    replaced = {
        scope: fields
        for scope, fields in (("attribute", payload.attribute_fields), ("shop_floor", payload.shop_floor_fields))
        if fields is not None
    }

    if replaced:
        kept = [f for f in a.fields if f.scope not in replaced]
        incoming = [(scope, fp) for scope, fields in replaced.items() for fp in fields]
        _assert_unique_keys([f.key for f in kept] + [fp.key for _, fp in incoming])

        by_id = {f.id: f for f in a.fields if f.scope in replaced}
        wanted_ids = {fp.id for _, fp in incoming if fp.id is not None}

        # drop removed fields first so a re-used key does not collide on insert
        for f in list(a.fields):
            if f.scope in replaced and f.id not in wanted_ids:
                _drop_field(a, f)
        _flush_or_409(db)

        position = max((f.position for f in kept), default=-1) + 1
        now = datetime.utcnow()
        for scope, fp in incoming:
            f = by_id.get(fp.id) if fp.id is not None else None
            if f is None:
                f = FieldDefinition(created_at=now)
                a.fields.append(f)
            _apply_field(f, fp, scope, position)
            position += 1
        _flush_or_409(db)

        logger.info("Article %s schema updated: %s", a.id, sorted(replaced))

    a.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(a)
    return to_out(a)


@router.delete("/{article_id}")
def delete_article(article_id: int, db: Session = Depends(get_db)):
    a = get_article_or_404(db, article_id)
    db.delete(a)
    db.commit()
    logger.info("Article %s deleted", article_id)
    return {"success": True}
