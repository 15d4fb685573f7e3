"""
Voucher Controller
==================
API endpoints for posting, replacing and removing vouchers.

ENDPOINTS:
----------
GET    /api/vouchers                  - Voucher history with filters
GET    /api/vouchers/next-number      - Suggested number for a voucher type
GET    /api/vouchers/{id}             - Single voucher
POST   /api/vouchers                  - Post a new voucher
PUT    /api/vouchers/{id}             - Replace a voucher (posts if missing)
DELETE /api/vouchers/{id}             - Remove a voucher
POST   /api/vouchers/bulk-delete      - Best-effort removal of many vouchers

Every endpoint takes an optional `company` query parameter selecting the
company scope of the document store.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ..exceptions import LedgerbookError
from ..models.transaction import Voucher
from ..services.voucher_service import voucher_service
from ..utils.helpers import parse_voucher_date
from ..utils.logger import logger
from ..views.json_view import JsonView

router = APIRouter()


class BulkDeleteRequest(BaseModel):
    voucher_ids: List[str]


@router.get("")
async def list_vouchers(
    voucher_type: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    company: Optional[str] = None,
    limit: int = Query(default=100, le=1000),
    offset: int = Query(default=0, ge=0)
):
    """Get vouchers with filters"""
    try:
        vouchers = await voucher_service.load_vouchers(company)

        if voucher_type:
            vouchers = [v for v in vouchers if v.type == voucher_type]
        if from_date:
            start = parse_voucher_date(from_date)
            vouchers = [v for v in vouchers if v.date >= start]
        if to_date:
            end = parse_voucher_date(to_date)
            vouchers = [v for v in vouchers if v.date <= end]

        vouchers.sort(key=lambda v: v.date, reverse=True)
        page = [v.model_dump() for v in vouchers[offset:offset + limit]]
        return JsonView.paginated(page, len(vouchers), limit, offset)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to get vouchers: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/next-number")
async def next_number(voucher_type: str, company: Optional[str] = None):
    """Suggested number for the next voucher of a type"""
    try:
        number = await voucher_service.next_number(voucher_type, company)
        return {"voucher_type": voucher_type, "voucher_no": number}
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.get("/{voucher_id}")
async def get_voucher(voucher_id: str, company: Optional[str] = None):
    """Get a single voucher"""
    try:
        return await voucher_service.get(voucher_id, company)
    except LedgerbookError as e:
        raise JsonView.http_exception(e)


@router.post("", status_code=201)
async def post_voucher(voucher: Voucher, company: Optional[str] = None):
    """Post a new voucher"""
    try:
        posted = await voucher_service.post(voucher, company)
        return JsonView.success(f"Voucher #{posted.voucher_no} posted", posted.model_dump())
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except Exception as e:
        logger.error(f"Failed to post voucher: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{voucher_id}")
async def replace_voucher(voucher_id: str, voucher: Voucher, company: Optional[str] = None):
    """Replace a stored voucher"""
    if voucher.id != voucher_id:
        voucher = voucher.model_copy(update={"id": voucher_id})
    try:
        replaced = await voucher_service.replace(voucher, company)
        return JsonView.success(f"Voucher #{replaced.voucher_no} updated", replaced.model_dump())
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except Exception as e:
        logger.error(f"Failed to replace voucher {voucher_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{voucher_id}")
async def remove_voucher(voucher_id: str, company: Optional[str] = None):
    """Remove a voucher and reverse its impact"""
    try:
        removed = await voucher_service.remove(voucher_id, company)
        return JsonView.success(f"Voucher #{removed.voucher_no} deleted", {"id": removed.id})
    except LedgerbookError as e:
        raise JsonView.http_exception(e)
    except Exception as e:
        logger.error(f"Failed to remove voucher {voucher_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/bulk-delete")
async def bulk_delete(request: BulkDeleteRequest, company: Optional[str] = None):
    """Remove many vouchers; partial completion is reported, not rolled back"""
    result = await voucher_service.remove_many(request.voucher_ids, company)
    status = "success" if result.completed == result.total else "partial"
    return {"status": status, "message": result.message, **result.model_dump()}
