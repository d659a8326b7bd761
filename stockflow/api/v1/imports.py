"""
Ledger import API endpoints
Standard or AI parsing in three modes: add stock, calculate usage, audit
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User, View
from stockflow.models.inventory import StockItem, TransactionType
from stockflow.auth.dependencies import get_current_user
from stockflow.core.ai_selector import AIServiceError, parse_stock_text
from stockflow.modules import ledger
from stockflow.modules.import_parser import ImportParseError, normalize_ai_rows, parse_manual
from stockflow.utils.response_models import ImportRequest
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)
router = APIRouter()

# audit compares against reports; the other modes write to the list
MODE_VIEWS = {
    ledger.ImportMode.ADD_STOCK: View.LIST,
    ledger.ImportMode.CALCULATE_USAGE: View.LIST,
    ledger.ImportMode.AUDIT_SYSTEM: View.REPORTS,
}


def _parse_rows(request: ImportRequest):
    if request.use_ai:
        try:
            raw_rows = parse_stock_text(request.text)
        except AIServiceError as e:
            logger.error(f"AI import parse failed: {e}")
            raise HTTPException(
                status_code=502,
                detail="AI Parsing failed. Please check your API key or input format.",
            )
        rows = normalize_ai_rows(raw_rows, request.import_date)
        if not rows:
            raise HTTPException(status_code=400, detail="AI could not find any records in the text.")
        return rows

    try:
        return parse_manual(request.text, request.mode, request.import_date)
    except ImportParseError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/")
async def run_import(
    request: ImportRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Parse pasted records and apply them

    - ADD_STOCK: IN postings for codes whose account is closed
    - CALCULATE_USAGE: OUT/IN corrections for open accounts
    - AUDIT_SYSTEM: comparison only, nothing is saved
    """
    if not current_user.can_access(MODE_VIEWS[request.mode]):
        raise HTTPException(
            status_code=403,
            detail="Access Denied: You do not have permission for that page.",
        )

    rows = _parse_rows(request)
    items = db.query(StockItem).all()
    logger.info(f"Import {request.mode}: {len(rows)} rows (ai={request.use_ai}) by {current_user.username}")

    if request.mode == ledger.ImportMode.AUDIT_SYSTEM:
        return {
            "status": "success",
            "mode": request.mode,
            "parsed": len(rows),
            "audit": ledger.run_audit(items, rows),
        }

    postings = ledger.plan_import(items, rows, request.mode)
    for posting in postings:
        db.add(StockItem(
            date=posting["date"],
            code=posting["code"],
            provider=posting["provider"],
            phone_number=posting["phone_number"],
            amount=posting["amount"],
            type=TransactionType(posting["type"]),
            created_at=posting["created_at"],
            created_by=current_user.username,
        ))
    if postings:
        db.commit()

    message = f"Synced {len(postings)} records" if postings else "No new records to sync."
    return {
        "status": "success",
        "mode": request.mode,
        "parsed": len(rows),
        "created": len(postings),
        "message": message,
        "records": postings,
    }
