"""
Transaction report API endpoints
TEMP_USE postings with running balances, plus Excel download
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User, View
from stockflow.models.inventory import StockItem
from stockflow.auth.dependencies import require_view
from stockflow.modules.ledger import transaction_report
from stockflow.modules.excel_export import XLSX_MEDIA_TYPE, report_workbook
from stockflow.utils.dates import format_display_date

router = APIRouter()


@router.get("/transactions")
async def get_transaction_report(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.TRANSACTION_REPORT)),
):
    """TEMP_USE transactions, newest first, with opening and closing balance"""
    report = transaction_report(db.query(StockItem).all())
    return {"status": "success", **report}


@router.get("/transactions/export")
async def export_transaction_report(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.TRANSACTION_REPORT)),
):
    report = transaction_report(db.query(StockItem).all())
    filename = f"StockFlow_Transactions_{format_display_date()}.xlsx"
    return Response(
        content=report_workbook(report["transactions"]),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
