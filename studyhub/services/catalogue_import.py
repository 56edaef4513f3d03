"""
Bulk imports for the catalogue (institutions, courses, programmes).

Institution and course imports are row-by-row: duplicates and rows that
fail to insert are counted as skipped and the rest still land. Programme
imports are all-or-nothing: every row is validated before any is written.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyhub.models.course import Course
from studyhub.models.institution import Institution, Programme
from studyhub.schemas.course import CourseCreate
from studyhub.schemas.institution import InstitutionCreate, ProgrammeCreate

logger = logging.getLogger(__name__)

# Spreadsheet headers accepted for each programme field, first non-empty wins
CSV_COLUMNS = {
    "name": ("name", "Name", "programme_name"),
    "code": ("code", "Code", "programme_code"),
    "degree": ("degree", "Degree"),
    "duration": ("duration", "Duration"),
    "description": ("description", "Description"),
}


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def import_summary(added: int, skipped: int, noun: str) -> str:
    """E.g. "2 courses added successfully, 1 duplicate skipped." """
    message = f"{_plural(added, noun)} added successfully"
    if skipped > 0:
        message += f", {_plural(skipped, 'duplicate')} skipped"
    return message + "."


def _insert_each(db: Session, rows: Iterable, exists, build) -> Tuple[int, int]:
    added = 0
    skipped = 0
    for row in rows:
        if exists(row):
            skipped += 1
            continue
        try:
            # Savepoint per row so one failed insert does not undo the others
            with db.begin_nested():
                db.add(build(row))
            added += 1
        except SQLAlchemyError as e:
            logger.error(f"Skipping row {row!r}: {str(e)}")
            skipped += 1
    db.commit()
    return added, skipped


def bulk_create_institutions(db: Session, rows: List[InstitutionCreate]) -> Tuple[int, int]:
    """Insert institutions, skipping any whose name already exists."""
    return _insert_each(
        db,
        rows,
        exists=lambda row: db.query(Institution.id).filter(Institution.name == row.name).first() is not None,
        build=lambda row: Institution(**row.model_dump()),
    )


def bulk_create_courses(db: Session, rows: List[CourseCreate]) -> Tuple[int, int]:
    """Insert courses, skipping any with the same title in the same institution."""
    return _insert_each(
        db,
        rows,
        exists=lambda row: db.query(Course.id)
        .filter(Course.title == row.title, Course.institution_id == row.institution_id)
        .first()
        is not None,
        build=lambda row: Course(**row.model_dump()),
    )


def _first_present(row: Dict[str, Any], keys: Iterable[str]) -> Optional[Any]:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def normalize_programme_row(row: Dict[str, Any], institution_id: int, fmt: str = "json") -> Dict[str, Any]:
    """Map one uploaded row onto programme fields and force the target institution."""
    if fmt == "csv":
        normalized = {field: _first_present(row, keys) for field, keys in CSV_COLUMNS.items()}
    else:
        normalized = {key: value for key, value in row.items() if key not in ("institutionId", "institution_id")}
    normalized["institution_id"] = institution_id
    return normalized


def validate_programme_rows(rows: List[Dict[str, Any]], institution_id: int, fmt: str = "json") -> List[ProgrammeCreate]:
    """Validate every row up front; raises ValueError naming the first bad row."""
    validated = []
    for index, row in enumerate(rows, start=1):
        try:
            validated.append(ProgrammeCreate.model_validate(normalize_programme_row(row, institution_id, fmt)))
        except ValidationError as e:
            raise ValueError(f"Invalid data at row {index}: {e.errors()[0]['msg']}")
    return validated


def bulk_create_programmes(db: Session, programmes: List[ProgrammeCreate]) -> List[Programme]:
    created = [Programme(**programme.model_dump()) for programme in programmes]
    db.add_all(created)
    db.commit()
    for programme in created:
        db.refresh(programme)
    return created
