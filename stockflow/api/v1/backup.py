"""
Backup API endpoints (Admin only)
Full JSON export, restore and data reset
"""
import json
from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User
from stockflow.auth.dependencies import require_admin
from stockflow.modules.backup import backup_filename, export_bundle, reset_data, restore_bundle
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)
router = APIRouter()


@router.get("/export")
async def export_backup(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Download every collection as one JSON file"""
    bundle = export_bundle(db)
    logger.info(f"Backup exported by {current_user.username}")
    return JSONResponse(
        content=bundle,
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/restore")
async def restore_backup(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Upsert every document of an exported backup file"""
    raw = await file.read()
    try:
        bundle = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Invalid backup file: not JSON")
    if not isinstance(bundle, dict):
        raise HTTPException(status_code=400, detail="Invalid backup file: expected an object")

    try:
        counts = restore_bundle(db, bundle)
    except (KeyError, ValueError, TypeError, IntegrityError) as e:
        db.rollback()
        # IntegrityError text carries the bound parameters (password hashes)
        reason = getattr(e, "orig", None) or e
        logger.error(f"Backup restore failed: {type(e).__name__}: {reason}")
        raise HTTPException(
            status_code=400,
            detail="Restore failed: the backup file is incomplete or conflicts with existing data.",
        )

    logger.info(f"Backup restored by {current_user.username}")
    return {"status": "success", "message": "Restore successful", "restored": counts}


@router.post("/reset")
async def reset_database(
    confirm: Optional[bool] = Query(False, description="Must be true"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Delete inventory, schedule, notes and employees. Users are kept."""
    if not confirm:
        raise HTTPException(status_code=400, detail="Reset requires confirm=true")

    counts = reset_data(db)
    logger.warning(f"Database reset by {current_user.username}")
    return {"status": "success", "message": "Database reset", "deleted": counts}
