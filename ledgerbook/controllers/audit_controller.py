"""
Audit Trail Controller
=======================
API endpoints for viewing audit trail data.

ENDPOINTS:
----------
GET  /api/audit/history              - Audit history with filters
GET  /api/audit/record/{entity_id}   - History of one voucher, ledger or item
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..services.audit_service import audit_service
from ..utils.logger import logger

router = APIRouter()


@router.get("/history")
async def get_audit_history(
    action: Optional[str] = Query(None, description="Filter by action (CREATE/UPDATE/DELETE)"),
    entity_type: Optional[str] = Query(None, description="Filter by entity (VOUCHER/LEDGER/STOCK_ITEM)"),
    entity_id: Optional[str] = Query(None, description="Filter by entity id"),
    company: Optional[str] = Query(None, description="Company scope"),
    limit: int = Query(100, ge=1, le=1000, description="Max records to return"),
    offset: int = Query(0, ge=0, description="Offset for pagination")
):
    """
    Get audit history with optional filters, newest first.
    
    Examples:
    - /api/audit/history?action=DELETE - All deletes
    - /api/audit/history?entity_type=LEDGER - All ledger changes
    """
    try:
        records = await audit_service.get_logs(
            scope=company,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            limit=limit,
            offset=offset
        )
        return {
            "count": len(records),
            "limit": limit,
            "offset": offset,
            "records": records
        }
    except Exception as e:
        logger.error(f"Error getting audit history: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/record/{entity_id}")
async def get_record_history(entity_id: str, company: Optional[str] = None):
    """Complete history of one record"""
    try:
        records = await audit_service.get_logs(scope=company, entity_id=entity_id, limit=1000)
        return {
            "entity_id": entity_id,
            "history_count": len(records),
            "history": records
        }
    except Exception as e:
        logger.error(f"Error getting record history: {e}")
        raise HTTPException(status_code=500, detail=str(e))
