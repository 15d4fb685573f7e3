"""
Ledger Controller
Handles ledger and stock item master endpoints
"""

from typing import Optional

from fastapi import APIRouter

from ..exceptions import LedgerbookError
from ..models.master import Ledger, StockItem
from ..services.ledger_service import ledger_service
from ..views.json_view import JsonView

router = APIRouter()


@router.get("")
async def list_ledgers(group: Optional[str] = None, company: Optional[str] = None):
    """Get ledgers, optionally for one group"""
    try:
        ledgers = await ledger_service.list_ledgers(company, group)
        return {"total": len(ledgers), "data": ledgers}
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.post("")
async def save_ledger(ledger: Ledger, company: Optional[str] = None):
    """Create or update a ledger"""
    try:
        saved = await ledger_service.save_ledger(ledger, company)
        return JsonView.success(f"Ledger {saved.name} saved", saved.model_dump())
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.post("/defaults")
async def ensure_defaults(company: Optional[str] = None):
    """Create the standard ledgers if they are missing"""
    try:
        added = await ledger_service.ensure_defaults(company)
        message = "Default ledgers created" if added else "Default ledgers already present"
        return JsonView.success(message, {"added": added})
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.get("/stock-items")
async def list_stock_items(company: Optional[str] = None):
    """Get stock items with current valuation"""
    try:
        items = await ledger_service.list_stock_items(company)
        return {"total": len(items), "data": items}
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.post("/stock-items")
async def save_stock_item(item: StockItem, company: Optional[str] = None):
    """Create or update a stock item"""
    try:
        saved = await ledger_service.save_stock_item(item, company)
        return JsonView.success(f"Stock item {saved.name} saved", saved.model_dump())
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
