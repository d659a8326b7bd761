"""
Team notes API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import desc
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User, View
from stockflow.models.note import Note
from stockflow.auth.dependencies import require_view
from stockflow.utils.dates import now_ms
from stockflow.utils.response_models import NoteCreate
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)
router = APIRouter()


@router.get("/")
async def list_notes(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.NOTES)),
):
    notes = db.query(Note).order_by(desc(Note.created_at)).all()
    return {"status": "success", "notes": [n.to_dict() for n in notes]}


@router.post("/", status_code=201)
async def create_note(
    note_data: NoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.NOTES)),
):
    note = Note(
        content=note_data.content,
        author=current_user.name,
        color=note_data.color,
        image_url=note_data.image_url,
        created_at=now_ms(),
    )
    db.add(note)
    db.commit()
    db.refresh(note)
    logger.info(f"Note posted by {note.author}")
    return {"status": "success", "data": note.to_dict()}


@router.delete("/{note_id}")
async def delete_note(
    note_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.NOTES)),
):
    note = db.query(Note).filter(Note.id == note_id).first()
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    db.delete(note)
    db.commit()
    return {"status": "success", "message": "Note deleted"}
