"""
SQLite document store.

Compiles ``Query`` objects to SQLAlchemy ORM queries. Each public coroutine
runs its blocking session work in a worker thread with its own session, so
independent calls issued together through ``asyncio.gather`` really overlap.
"""
import asyncio
import logging
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from sqlalchemy import func, literal_column, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from jobboard.database import init_db, make_session_factory
from jobboard.errors import NotFoundError, StoreError
from jobboard.models import Application, Category, Company, CompanyLocation, Follow, Job, User
from jobboard.schemas.application import (
    ApplicantInfo,
    Application as ApplicationDocument,
    ApplicationJobSummary,
)
from jobboard.schemas.category import Category as CategoryDocument
from jobboard.schemas.common import Coordinates, Location
from jobboard.schemas.company import Company as CompanyDocument
from jobboard.schemas.job import CategorySummary, CompanySummary, Job as JobDocument
from jobboard.schemas.user import Follow as FollowDocument, User as UserDocument
from jobboard.store.base import DocumentStore, Patch
from jobboard.store.query import AnyOf, Contains, Eq, Gt, Gte, In, Match, Ne, Query, Unexpired
from jobboard.utils.timestamps import to_iso, utcnow

logger = logging.getLogger(__name__)

_MODELS = {
    "job": Job,
    "company": Company,
    "category": Category,
    "application": Application,
    "user": User,
    "follow": Follow,
}

# Logical paths that do not map one-to-one onto a column of the queried model
_PATHS = {
    "job": {
        "company.name": Company.name,
        "category.slug": Category.slug,
        "location.city": Job.city,
        "location.county": Job.county,
        "location.zip_code": Job.zip_code,
    },
    "application": {
        "job.company_id": Job.company_id,
        "applicant_info.email": Application.applicant_email,
        "applicant_info.name": Application.applicant_name,
    },
}

_ARRAY_MEMBERSHIP = {
    ("company", "locations.city"): lambda value: Company.locations.any(CompanyLocation.city == value),
}

_APPLICANT_COLUMNS = {
    "name": "applicant_name",
    "email": "applicant_email",
    "phone": "applicant_phone",
    "resume_url": "resume_url",
    "linked_in": "linked_in",
}


def _db_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def _like_pattern(pattern: str) -> str:
    escaped = pattern.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "%")


# --- row -> document -----------------------------------------------------

def _location(city, county, zip_code, lat, lng) -> Location | None:
    if city is None:
        return None
    coords = Coordinates(lat=lat, lng=lng) if lat is not None and lng is not None else None
    return Location(city=city, county=county, zip_code=zip_code, coordinates=coords)


def _job_to_document(job: Job, db: Session) -> JobDocument:
    company = job.company
    category = job.category
    return JobDocument(
        id=job.id,
        title=job.title,
        slug=job.slug,
        company_id=job.company_id,
        category_id=job.category_id,
        description=job.description,
        requirements=job.requirements,
        responsibilities=job.responsibilities,
        salary_type=job.salary_type,
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        show_salary=job.show_salary,
        location=_location(job.city, job.county, job.zip_code, job.lat, job.lng),
        remote_options=job.remote_options,
        job_type=job.job_type,
        experience_level=job.experience_level,
        benefits=job.benefits or [],
        skills=job.skills or [],
        certifications=job.certifications or [],
        application_deadline=job.application_deadline,
        start_date=job.start_date,
        is_urgent=job.is_urgent,
        featured=job.featured,
        status=job.status,
        view_count=job.view_count or 0,
        application_count=job.application_count or 0,
        published_at=job.published_at,
        expires_at=job.expires_at,
        created_at=job.created_at,
        company=CompanySummary(
            id=company.id,
            name=company.name,
            slug=company.slug,
            logo_url=company.logo_url,
            verified=company.verified,
            size=company.size,
            website=company.website,
        ) if company else None,
        category=CategorySummary(id=category.id, name=category.name, slug=category.slug) if category else None,
    )


def _published_job_count(db: Session, column, parent_id: str) -> int:
    return db.query(func.count(Job.id)).filter(column == parent_id, Job.status == "published").scalar()


def _company_to_document(company: Company, db: Session) -> CompanyDocument:
    return CompanyDocument(
        id=company.id,
        name=company.name,
        slug=company.slug,
        logo_url=company.logo_url,
        description=company.description,
        website=company.website,
        email=company.email,
        phone=company.phone,
        size=company.size,
        locations=[
            _location(loc.city, loc.county, loc.zip_code, loc.lat, loc.lng) for loc in company.locations
        ],
        benefits_offered=company.benefits_offered or [],
        verified=company.verified,
        owner_id=company.owner_id,
        created_at=company.created_at,
        job_count=_published_job_count(db, Job.company_id, company.id),
    )


def _category_to_document(category: Category, db: Session) -> CategoryDocument:
    return CategoryDocument(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        order_rank=category.order_rank,
        job_count=_published_job_count(db, Job.category_id, category.id),
    )


def _application_to_document(app: Application, db: Session) -> ApplicationDocument:
    job = app.job
    return ApplicationDocument(
        id=app.id,
        job_id=app.job_id,
        applicant_info=ApplicantInfo(
            name=app.applicant_name,
            email=app.applicant_email,
            phone=app.applicant_phone,
            resume_url=app.resume_url,
            linked_in=app.linked_in,
        ),
        cover_message=app.cover_message,
        status=app.status,
        rating=app.rating,
        applied_date=app.applied_date,
        employer_notes=app.employer_notes,
        interview_date=app.interview_date,
        job=ApplicationJobSummary(
            id=job.id, title=job.title, slug=job.slug, company_id=job.company_id
        ) if job else None,
    )


def _user_to_document(user: User, db: Session) -> UserDocument:
    return UserDocument.model_validate(user, from_attributes=True)


def _follow_to_document(follow: Follow, db: Session) -> FollowDocument:
    return FollowDocument.model_validate(follow, from_attributes=True)


_TO_DOCUMENT = {
    "job": _job_to_document,
    "company": _company_to_document,
    "category": _category_to_document,
    "application": _application_to_document,
    "user": _user_to_document,
    "follow": _follow_to_document,
}


# --- document fields -> row ----------------------------------------------

def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def _apply_fields(row, doc_type: str, fields: dict[str, Any]) -> None:
    model = _MODELS[doc_type]
    columns = model.__table__.columns
    for key, value in fields.items():
        value = _plain(value)
        if key == "id":
            continue
        if key == "location" and doc_type == "job":
            value = value or {}
            coords = _plain(value.get("coordinates")) or {}
            row.city = value.get("city")
            row.county = value.get("county")
            row.zip_code = value.get("zip_code")
            row.lat = coords.get("lat")
            row.lng = coords.get("lng")
        elif key == "applicant_info" and doc_type == "application":
            for src, column in _APPLICANT_COLUMNS.items():
                setattr(row, column, (value or {}).get(src))
        elif key == "locations" and doc_type == "company":
            row.locations = [
                CompanyLocation(
                    city=loc["city"],
                    county=loc.get("county"),
                    zip_code=loc.get("zip_code"),
                    lat=(_plain(loc.get("coordinates")) or {}).get("lat"),
                    lng=(_plain(loc.get("coordinates")) or {}).get("lng"),
                )
                for loc in (_plain(item) for item in (value or []))
            ]
        elif key in columns:
            setattr(row, key, _db_value(value))
        else:
            raise ValueError(f"Unknown field '{key}' for {doc_type}")


class SqlDocumentStore(DocumentStore):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @classmethod
    def from_path(cls, db_path: Path | None = None) -> "SqlDocumentStore":
        init_db(db_path)
        return cls(make_session_factory(db_path))

    # --- async surface ---

    async def fetch(self, query: Query) -> list:
        return await asyncio.to_thread(self._run, self._fetch, query)

    async def count(self, query: Query) -> int:
        return await asyncio.to_thread(self._run, self._count, query)

    async def get(self, doc_type: str, doc_id: str):
        return await asyncio.to_thread(self._run, self._get, doc_type, doc_id)

    async def create(self, doc_type: str, fields: dict[str, Any]):
        return await asyncio.to_thread(self._run, self._create, doc_type, fields)

    async def commit_patch(self, patch: Patch):
        return await asyncio.to_thread(self._run, self._commit_patch, patch)

    async def delete(self, doc_type: str, doc_id: str) -> None:
        await asyncio.to_thread(self._run, self._delete, doc_type, doc_id)

    async def close(self) -> None:
        self._session_factory.kw["bind"].dispose()

    # --- sync implementation ---

    def _run(self, fn, *args):
        try:
            with self._session_factory() as db:
                return fn(db, *args)
        except SQLAlchemyError as exc:
            logger.error("SQLite store operation %s failed: %s", fn.__name__, exc)
            raise StoreError(f"Document store error: {exc.__class__.__name__}") from exc

    def _base_query(self, db: Session, doc_type: str):
        model = _MODELS[doc_type]
        query = db.query(model)
        if doc_type == "job":
            query = query.outerjoin(Company, Job.company_id == Company.id).outerjoin(
                Category, Job.category_id == Category.id
            )
        elif doc_type == "application":
            query = query.join(Job, Application.job_id == Job.id)
        return query

    def _column(self, doc_type: str, path: str):
        mapped = _PATHS.get(doc_type, {}).get(path)
        if mapped is not None:
            return mapped
        column = getattr(_MODELS[doc_type], path, None)
        if column is None:
            raise ValueError(f"Unknown field '{path}' for {doc_type}")
        return column

    def _condition(self, doc_type: str, clause):
        if isinstance(clause, Eq):
            column = self._column(doc_type, clause.field)
            if clause.value is None:
                return column.is_(None)
            return column == _db_value(clause.value)
        if isinstance(clause, Ne):
            return self._column(doc_type, clause.field) != _db_value(clause.value)
        if isinstance(clause, Gt):
            return self._column(doc_type, clause.field) > _db_value(clause.value)
        if isinstance(clause, Gte):
            return self._column(doc_type, clause.field) >= _db_value(clause.value)
        if isinstance(clause, In):
            return self._column(doc_type, clause.field).in_([_db_value(v) for v in clause.values])
        if isinstance(clause, Contains):
            membership = _ARRAY_MEMBERSHIP.get((doc_type, clause.field))
            if membership is None:
                raise ValueError(f"Unsupported array field '{clause.field}' for {doc_type}")
            return membership(clause.value)
        if isinstance(clause, Match):
            like = _like_pattern(clause.pattern)
            return or_(*(self._column(doc_type, f).ilike(like, escape="\\") for f in clause.fields))
        if isinstance(clause, AnyOf):
            return or_(*(self._condition(doc_type, c) for c in clause.clauses))
        if isinstance(clause, Unexpired):
            column = self._column(doc_type, clause.field)
            return or_(column.is_(None), column > to_iso(clause.at))
        raise TypeError(f"Unsupported clause {clause!r}")

    def _filtered(self, db: Session, query: Query):
        conditions = [self._condition(query.doc_type, c) for c in query.where]
        return self._base_query(db, query.doc_type).filter(*conditions)

    def _fetch(self, db: Session, query: Query) -> list:
        q = self._filtered(db, query)
        order = []
        for key in query.order:
            column = self._column(query.doc_type, key.field)
            order.append(column.desc() if key.descending else column.asc())
        # Ties fall back to insertion order
        order.append(literal_column(f"{_MODELS[query.doc_type].__tablename__}.rowid").asc())
        q = q.order_by(*order)
        if query.offset:
            q = q.offset(query.offset)
        if query.limit is not None:
            q = q.limit(query.limit)
        convert = _TO_DOCUMENT[query.doc_type]
        return [convert(row, db) for row in q.all()]

    def _count(self, db: Session, query: Query) -> int:
        return self._filtered(db, query).count()

    def _get(self, db: Session, doc_type: str, doc_id: str):
        row = db.get(_MODELS[doc_type], doc_id)
        return _TO_DOCUMENT[doc_type](row, db) if row else None

    def _create(self, db: Session, doc_type: str, fields: dict[str, Any]):
        model = _MODELS[doc_type]
        row = model(id=fields.get("id") or str(uuid.uuid4()))
        _apply_fields(row, doc_type, fields)
        if "created_at" in model.__table__.columns and row.created_at is None:
            row.created_at = to_iso(utcnow())
        db.add(row)
        db.commit()
        db.refresh(row)
        return _TO_DOCUMENT[doc_type](row, db)

    def _commit_patch(self, db: Session, patch: Patch):
        model = _MODELS[patch.doc_type]
        row = db.get(model, patch.doc_id)
        if row is None:
            raise NotFoundError(f"{patch.doc_type} {patch.doc_id} not found")
        _apply_fields(row, patch.doc_type, patch.set_fields)
        if patch.inc_fields:
            # Single UPDATE so concurrent increments cannot lose counts
            db.query(model).filter(model.id == patch.doc_id).update(
                {getattr(model, name): getattr(model, name) + n for name, n in patch.inc_fields.items()},
                synchronize_session=False,
            )
        db.commit()
        db.refresh(row)
        return _TO_DOCUMENT[patch.doc_type](row, db)

    def _delete(self, db: Session, doc_type: str, doc_id: str) -> None:
        row = db.get(_MODELS[doc_type], doc_id)
        if row is None:
            raise NotFoundError(f"{doc_type} {doc_id} not found")
        db.delete(row)
        db.commit()
