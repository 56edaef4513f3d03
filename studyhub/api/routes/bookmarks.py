from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from typing import List
from studyhub.core.auth import require_onboarding
from studyhub.core.database import get_db
from studyhub.models.engagement import Bookmark
from studyhub.models.material import Material
from studyhub.models.user import User
from studyhub.schemas.engagement import (
    BookmarkCreate,
    BookmarkResponse,
    BookmarkCheckResponse,
    MessageResponse,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[BookmarkResponse])
def list_bookmarks(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return (
        db.query(Bookmark)
        .filter(Bookmark.user_id == user.id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .all()
    )


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
def create_bookmark(bookmark: BookmarkCreate, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    if not db.query(Material.id).filter(Material.id == bookmark.material_id).first():
        raise HTTPException(status_code=404, detail="Material not found")

    existing = (
        db.query(Bookmark)
        .filter(Bookmark.user_id == user.id, Bookmark.material_id == bookmark.material_id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=400, detail="Material already bookmarked")

    try:
        db_bookmark = Bookmark(user_id=user.id, material_id=bookmark.material_id)
        db.add(db_bookmark)
        db.commit()
        db.refresh(db_bookmark)
        return db_bookmark
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Material already bookmarked")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.get("/check/{material_id}", response_model=BookmarkCheckResponse)
def check_bookmark(material_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    bookmark = (
        db.query(Bookmark)
        .filter(Bookmark.user_id == user.id, Bookmark.material_id == material_id)
        .first()
    )
    return BookmarkCheckResponse(
        bookmarked=bookmark is not None,
        bookmark=BookmarkResponse.model_validate(bookmark) if bookmark else None,
    )


@router.delete("/by-material/{material_id}", response_model=MessageResponse)
def remove_bookmark_for_material(material_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    try:
        db.query(Bookmark).filter(
            Bookmark.user_id == user.id, Bookmark.material_id == material_id
        ).delete(synchronize_session=False)
        db.commit()
        return MessageResponse(message="Bookmark removed")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.delete("/{bookmark_id}", response_model=MessageResponse)
def delete_bookmark(bookmark_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """Delete one of the caller's bookmarks."""
    bookmark = db.query(Bookmark).filter(Bookmark.id == bookmark_id).first()
    if not bookmark or bookmark.user_id != user.id:
        raise HTTPException(status_code=404, detail="Bookmark not found")

    try:
        db.delete(bookmark)
        db.commit()
        return MessageResponse(message="Bookmark deleted")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
