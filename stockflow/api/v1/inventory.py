"""
Inventory ledger API endpoints
Records list, TEMP_USE entry, dashboard and AI insights
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy import desc, or_
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User, View
from stockflow.models.inventory import StockItem, TransactionType
from stockflow.auth.dependencies import get_current_user, require_view
from stockflow.core.ai_selector import generate_data_insights
from stockflow.modules import ledger
from stockflow.modules.excel_export import XLSX_MEDIA_TYPE, ledger_workbook
from stockflow.utils.dates import format_display_date, now_ms
from stockflow.utils.response_models import TransactionRequest
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)
router = APIRouter()


def _with_status(items, status_map):
    return [
        {**item.to_dict(), "status": ledger.status_of(status_map, item.code)}
        for item in items
    ]


@router.get("/")
async def list_records(
    search: Optional[str] = None,
    type: Optional[TransactionType] = None,
    status: Optional[str] = Query(None, pattern="^(OPEN|CLOSED)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.LIST)),
):
    """List ledger records, newest first, with each code's account status"""
    status_map = ledger.account_status_map(db.query(StockItem).all())

    query = db.query(StockItem)
    if search:
        query = query.filter(
            or_(
                StockItem.code.contains(search),
                StockItem.provider.contains(search),
                StockItem.phone_number.contains(search),
            )
        )
    if type:
        query = query.filter(StockItem.type == type)

    rows = _with_status(query.order_by(desc(StockItem.created_at)).all(), status_map)
    if status:
        rows = [r for r in rows if r["status"] == status]

    return {
        "status": "success",
        "total": len(rows),
        "items": rows,
    }


@router.get("/dashboard")
async def dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.DASHBOARD)),
):
    """KPI totals, provider distribution and top usage"""
    items = db.query(StockItem).all()
    return {"status": "success", "data": ledger.dashboard_stats(items)}


@router.get("/codes")
async def list_codes(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.TRANSACTION_ENTRY)),
):
    """Known account codes with status and balances (TEMP_USE entry picker)"""
    items = db.query(StockItem).all()
    status_map = ledger.account_status_map(items)
    official = ledger.official_balances(items)
    physical = ledger.physical_balances(items)

    return {
        "status": "success",
        "codes": [
            {
                "code": code,
                "status": status_map[code],
                "official_balance": official.get(code, 0),
                "physical_balance": physical.get(code, 0),
            }
            for code in sorted(status_map)
        ],
    }


@router.post("/transactions", status_code=201)
async def create_transaction(
    request: TransactionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.TRANSACTION_ENTRY)),
):
    """Record a pending order (TEMP_USE) against a code"""
    item = StockItem(
        date=format_display_date(request.date),
        code=request.code,
        provider=ledger.TEMP_PROVIDER,
        phone_number="",
        amount=request.amount,
        type=TransactionType.TEMP_USE,
        order_number=request.order_number.strip(),
        created_at=now_ms(),
        created_by=current_user.username,
    )
    db.add(item)
    db.commit()
    db.refresh(item)

    logger.info(f"TEMP_USE recorded: {item.code} {item.amount} (order {item.order_number}) by {current_user.username}")

    return {
        "status": "success",
        "message": "Transaction recorded",
        "data": item.to_dict(),
    }


@router.delete("/{item_id}")
async def delete_record(
    item_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.LIST, View.TRANSACTION_REPORT)),
):
    """Delete a ledger record (admin or the record's creator)"""
    item = db.query(StockItem).filter(StockItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Record not found")

    if not current_user.is_admin and item.created_by != current_user.username:
        raise HTTPException(status_code=403, detail="Only admins or the record's creator can delete it")

    summary = f"{item.code} {item.type.value} {item.amount}"
    db.delete(item)
    db.commit()
    logger.info(f"Record deleted: {summary} by {current_user.username}")
    return {"status": "success", "message": "Record deleted"}


@router.post("/insights")
async def insights(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Short AI summary of the ledger"""
    items = db.query(StockItem).order_by(desc(StockItem.created_at)).all()
    if not items:
        return {"status": "success", "insight": "No records to analyse yet."}
    text = generate_data_insights([i.to_dict() for i in items])
    return {"status": "success", "insight": text}


@router.get("/export")
async def export_records(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.LIST)),
):
    """Download all records as an Excel workbook"""
    items = db.query(StockItem).order_by(desc(StockItem.created_at)).all()
    status_map = ledger.account_status_map(items)
    content = ledger_workbook(_with_status(items, status_map))
    filename = f"StockFlow_Inventory_{format_display_date()}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
