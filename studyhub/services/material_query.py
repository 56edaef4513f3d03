"""
Resource library query: visibility, filters, sorting and pagination over materials.

Every filter is a SQL predicate and the page is cut with LIMIT/OFFSET, so a
request never loads the whole materials table. Query-string values arrive
raw: malformed paging values fall back to defaults and malformed filter
values simply match nothing, so this module never rejects a request.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import false, func, or_
from sqlalchemy.orm import Session

from studyhub.core.config import get_settings
from studyhub.models.engagement import MaterialRating, MaterialReview
from studyhub.models.material import Material, MaterialType, ModerationStatus
from studyhub.models.user import User, UserRole

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("newest", "oldest", "highest_rated", "most_reviewed", "alphabetical")
UPLOADER_ROLES = (UserRole.student.value, UserRole.instructor.value)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Range of the INTEGER columns the numeric filters compare against
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


@dataclass
class MaterialFilters:
    """Raw query-string parameters of the resource library."""
    course_id: Optional[str] = None
    level: Optional[str] = None
    semester: Optional[str] = None
    topic: Optional[str] = None
    material_type: Optional[str] = None
    uploader_role: Optional[str] = None
    search: Optional[str] = None
    sort_by: Optional[str] = None
    page: Optional[str] = None
    limit: Optional[str] = None


@dataclass
class MaterialStats:
    average_rating: float = 0.0
    rating_count: int = 0
    review_count: int = 0


@dataclass
class MaterialPage:
    items: List[Tuple[Material, MaterialStats]]
    page: int
    limit: int
    total: int
    total_pages: int
    topics: List[str] = field(default_factory=list)


def parse_int(value: Optional[str]) -> Optional[int]:
    """Read the leading integer of a query value ("200", " 3", "12abc" -> 12); None if there is none."""
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def column_int(value: Optional[str]) -> Optional[int]:
    """Like parse_int, but None when the number cannot be stored in an INTEGER column."""
    number = parse_int(value)
    if number is None or not INT_MIN <= number <= INT_MAX:
        return None
    return number


def resolve_page(value: Optional[str]) -> int:
    return max(1, parse_int(value) or 1)


def resolve_limit(value: Optional[str], default: Optional[int] = None, maximum: Optional[int] = None) -> int:
    """Clamp the page size into [1, maximum]; zero or garbage means the default."""
    settings = get_settings()
    default = default or settings.default_page_size
    maximum = maximum or settings.max_page_size
    return max(1, min(maximum, parse_int(value) or default))


def _stats_subqueries(db: Session):
    ratings = (
        db.query(
            MaterialRating.material_id.label("material_id"),
            func.avg(MaterialRating.rating).label("average_rating"),
            func.count(MaterialRating.id).label("rating_count"),
        )
        .group_by(MaterialRating.material_id)
        .subquery()
    )
    reviews = (
        db.query(
            MaterialReview.material_id.label("material_id"),
            func.count(MaterialReview.id).label("review_count"),
        )
        .group_by(MaterialReview.material_id)
        .subquery()
    )
    return ratings, reviews


def visible_materials(db: Session, role: Optional[UserRole]):
    """Base query of the materials a caller may see; admins see every moderation status."""
    query = db.query(Material)
    if role != UserRole.admin:
        query = query.filter(Material.moderation_status == ModerationStatus.approved)
    return query


def apply_filters(query, filters: MaterialFilters):
    """AND together every supplied filter. Empty strings count as not supplied."""
    if filters.course_id:
        course_id = filters.course_id.strip()
        course_id = column_int(course_id) if course_id.isdigit() else None
        query = query.filter(Material.course_id == course_id) if course_id is not None else query.filter(false())

    if filters.level:
        level = column_int(filters.level)
        query = query.filter(Material.level == level) if level is not None else query.filter(false())

    if filters.semester:
        semester = column_int(filters.semester)
        query = query.filter(Material.semester == semester) if semester is not None else query.filter(false())

    if filters.topic:
        query = query.filter(Material.topic.icontains(filters.topic, autoescape=True))

    if filters.material_type:
        if filters.material_type in MaterialType.__members__:
            query = query.filter(Material.material_type == MaterialType(filters.material_type))
        else:
            query = query.filter(false())

    if filters.search:
        query = query.filter(
            or_(
                Material.title.icontains(filters.search, autoescape=True),
                Material.description.icontains(filters.search, autoescape=True),
            )
        )

    if filters.uploader_role:
        # One join resolves each distinct uploader once, however many materials they own
        if filters.uploader_role in UserRole.__members__:
            query = query.join(User, Material.uploaded_by_id == User.id).filter(
                User.role == UserRole(filters.uploader_role)
            )
        else:
            query = query.filter(false())

    return query


def _order_by(sort_by: Optional[str], average_rating, review_count):
    # Ties fall back to newest first, the library's natural order
    newest = (Material.created_at.desc(), Material.id.desc())
    if sort_by == "oldest":
        return (Material.created_at.asc(), Material.id.asc())
    if sort_by == "highest_rated":
        return (average_rating.desc(),) + newest
    if sort_by == "most_reviewed":
        return (review_count.desc(),) + newest
    if sort_by == "alphabetical":
        return (func.lower(Material.title).asc(), Material.title.asc()) + newest
    return newest


def distinct_topics(db: Session, role: Optional[UserRole]) -> List[str]:
    """Distinct non-empty topics over everything the caller can see, ignoring the other filters."""
    rows = (
        visible_materials(db, role)
        .with_entities(Material.topic)
        .filter(Material.topic.isnot(None), Material.topic != "")
        .distinct()
        .all()
    )
    return sorted((row[0] for row in rows), key=lambda topic: (topic.lower(), topic))


def _page_rows(db: Session, filtered, sort_by: Optional[str], offset: int, limit: int):
    ratings, reviews = _stats_subqueries(db)
    average_rating = func.coalesce(ratings.c.average_rating, 0)
    rating_count = func.coalesce(ratings.c.rating_count, 0)
    review_count = func.coalesce(reviews.c.review_count, 0)

    return (
        filtered.outerjoin(ratings, ratings.c.material_id == Material.id)
        .outerjoin(reviews, reviews.c.material_id == Material.id)
        .add_columns(
            average_rating.label("average_rating"),
            rating_count.label("rating_count"),
            review_count.label("review_count"),
        )
        .order_by(*_order_by(sort_by, average_rating, review_count))
        .offset(offset)
        .limit(limit)
        .all()
    )


def query_materials(db: Session, role: Optional[UserRole], filters: MaterialFilters) -> MaterialPage:
    """Run the resource library query for a caller with the given role."""
    page = resolve_page(filters.page)
    limit = resolve_limit(filters.limit)

    filtered = apply_filters(visible_materials(db, role), filters)
    total = filtered.order_by(None).count()

    offset = (page - 1) * limit
    rows = []
    # Pages past the end are empty; their offset may not even fit a bind parameter
    if offset < total:
        rows = _page_rows(db, filtered, filters.sort_by, offset, limit)

    items = [
        (
            material,
            MaterialStats(
                average_rating=float(avg or 0),
                rating_count=int(n_ratings or 0),
                review_count=int(n_reviews or 0),
            ),
        )
        for material, avg, n_ratings, n_reviews in rows
    ]

    logger.debug(
        f"Material query role={getattr(role, 'value', role)} sort={filters.sort_by} page={page} limit={limit} total={total}"
    )
    return MaterialPage(
        items=items,
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit),
        topics=distinct_topics(db, role),
    )


def material_stats(db: Session, material_id: int) -> MaterialStats:
    """Aggregate rating and review figures for a single material."""
    average, count = (
        db.query(func.coalesce(func.avg(MaterialRating.rating), 0), func.count(MaterialRating.id))
        .filter(MaterialRating.material_id == material_id)
        .one()
    )
    reviews = db.query(func.count(MaterialReview.id)).filter(MaterialReview.material_id == material_id).scalar()
    return MaterialStats(average_rating=float(average or 0), rating_count=int(count or 0), review_count=int(reviews or 0))
