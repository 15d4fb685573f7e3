"""
Report Controller
Ledger statements, stock summary, trial balance, group summaries and tax returns
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from ..exceptions import LedgerbookError
from ..services.report_service import report_service
from ..utils.logger import logger
from ..views.json_view import JsonView

router = APIRouter()


@router.get("/ledger/{ledger_id}")
async def ledger_statement(
    ledger_id: str,
    from_date: str,
    to_date: str,
    company: Optional[str] = None
):
    """Date-ranged ledger statement with opening and running balance"""
    try:
        return await report_service.ledger_statement(ledger_id, from_date, to_date, company)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/stock-summary")
async def stock_summary(
    from_date: str,
    to_date: str,
    company: Optional[str] = None
):
    """Opening, inward, outward and closing stock per item"""
    try:
        return await report_service.stock_summary(from_date, to_date, company)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/trial-balance")
async def trial_balance(company: Optional[str] = None):
    """Trial balance from current ledger balances"""
    try:
        return await report_service.trial_balance(company)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.get("/group-summary")
async def group_summary(
    groups: List[str] = Query(..., description="Group names, repeat the parameter for more"),
    company: Optional[str] = None
):
    """Balance totals per ledger group"""
    try:
        return await report_service.group_summary(groups, company)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.get("/gstr1")
async def gstr1(
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    company: Optional[str] = None
):
    """Outward supply summary by category, rate, HSN and document range"""
    try:
        return await report_service.gstr1(from_date, to_date, company)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to build GSTR-1 summary: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/gstr3b")
async def gstr3b(
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    company: Optional[str] = None
):
    """Net tax liability: outward tax less eligible input credit"""
    try:
        return await report_service.gstr3b(from_date, to_date, company)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to build GSTR-3B summary: {e}")
        raise HTTPException(status_code=500, detail=str(e))
