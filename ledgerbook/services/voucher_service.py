"""
Voucher Service Module
======================
Posts, replaces and removes vouchers against a company-scoped document
store, keeping ledger balances and stock valuation in step.

OPERATIONS:
----------
post(voucher)         - append to history, apply impact (+1); ids are unique
remove(voucher_id)    - reverse impact (-1), delete from history
replace(voucher)      - reverse old version (if any), store and apply new
remove_many(ids)      - sequential remove, best effort, no rollback

WRITE ORDER:
-----------
Each operation reads the full tables, computes every change in memory and
only then writes ledgers, stock items and vouchers. An error raised before
the first write leaves that voucher's state untouched.

ISOLATION:
---------
None. Two concurrent operations on the same company scope can overwrite
each other's table writes (last write wins). Run one writer per scope.
"""

from typing import List, Optional, Tuple

from ..config import config, PostingConfig
from ..exceptions import (
    DuplicateVoucherError,
    LedgerbookError,
    StoreNotInitializedError,
    VoucherNotFoundError,
)
from ..models.master import Ledger, StockItem
from ..models.report import BulkFailure, BulkResult
from ..models.transaction import Voucher
from ..utils.constants import (
    AuditAction,
    AuditEntity,
    ErrorCode,
    TABLE_LEDGERS,
    TABLE_STOCK_ITEMS,
    TABLE_VOUCHERS,
)
from ..utils.decorators import timed
from ..utils.logger import logger
from .audit_service import AuditService, audit_service
from .document_store import DocumentStore, document_store
from .numbering import next_voucher_number
from .posting_engine import apply_voucher, validate_balanced


def _touches_inventory(*vouchers: Voucher) -> bool:
    return any(row.inventory for voucher in vouchers for row in voucher.rows)


class VoucherService:
    """Service for voucher posting"""

    def __init__(
        self,
        store: Optional[DocumentStore],
        audit: Optional[AuditService] = None,
        posting: Optional[PostingConfig] = None
    ):
        self.store = store
        self.audit = audit or AuditService(store)
        self.posting = posting or config.posting

    def _require_store(self) -> DocumentStore:
        if self.store is None:
            raise StoreNotInitializedError("Document store not initialized")
        return self.store

    async def load_vouchers(self, scope: Optional[str] = None) -> List[Voucher]:
        records = await self._require_store().read(TABLE_VOUCHERS, scope) or []
        return [Voucher.model_validate(record) for record in records]

    async def _load_masters(self, scope: Optional[str]) -> Tuple[List[Ledger], List[StockItem]]:
        store = self._require_store()
        ledgers = await store.read(TABLE_LEDGERS, scope) or []
        stock_items = await store.read(TABLE_STOCK_ITEMS, scope) or []
        return (
            [Ledger.model_validate(record) for record in ledgers],
            [StockItem.model_validate(record) for record in stock_items],
        )

    async def _persist(
        self,
        scope: Optional[str],
        ledgers: List[Ledger],
        stock_items: Optional[List[StockItem]],
        vouchers: List[Voucher]
    ) -> None:
        store = self._require_store()
        await store.write(TABLE_LEDGERS, [ledger.model_dump() for ledger in ledgers], scope)
        if stock_items is not None:
            await store.write(TABLE_STOCK_ITEMS, [item.model_dump() for item in stock_items], scope)
        await store.write(TABLE_VOUCHERS, [voucher.model_dump() for voucher in vouchers], scope)

    def _check_balanced(self, voucher: Voucher) -> None:
        if self.posting.enforce_balanced:
            validate_balanced(voucher, self.posting.balance_tolerance)

    async def get(self, voucher_id: str, scope: Optional[str] = None) -> Voucher:
        vouchers = await self.load_vouchers(scope)
        for voucher in vouchers:
            if voucher.id == voucher_id:
                return voucher
        raise VoucherNotFoundError(voucher_id)

    async def next_number(self, voucher_type: str, scope: Optional[str] = None) -> str:
        """Suggested document number for a new voucher of this type"""
        return next_voucher_number(await self.load_vouchers(scope), voucher_type)

    @timed
    async def post(self, voucher: Voucher, scope: Optional[str] = None) -> Voucher:
        """Append a voucher and apply its impact"""
        self._check_balanced(voucher)
        vouchers = await self.load_vouchers(scope)

        if any(v.id == voucher.id for v in vouchers):
            logger.warning(f"Voucher id {voucher.id} already present in history, rejected")
            raise DuplicateVoucherError(voucher.id)
        if not voucher.voucher_no:
            voucher = voucher.model_copy(update={"voucher_no": next_voucher_number(vouchers, voucher.type)})

        ledgers, stock_items = await self._load_masters(scope)
        ledgers, stock_items = apply_voucher(ledgers, stock_items, voucher, 1)

        vouchers.append(voucher)
        await self._persist(scope, ledgers, stock_items if _touches_inventory(voucher) else None, vouchers)

        logger.info(f"Posted {voucher.type} voucher #{voucher.voucher_no} ({voucher.id})")
        await self.audit.log(
            scope, AuditAction.CREATE, AuditEntity.VOUCHER, voucher.id,
            f"Voucher {voucher.type} #{voucher.voucher_no} created"
        )
        return voucher

    @timed
    async def remove(self, voucher_id: str, scope: Optional[str] = None) -> Voucher:
        """Reverse a voucher's impact and delete it from history"""
        vouchers = await self.load_vouchers(scope)
        index = next((i for i, v in enumerate(vouchers) if v.id == voucher_id), None)
        if index is None:
            raise VoucherNotFoundError(voucher_id)

        existing = vouchers.pop(index)
        ledgers, stock_items = await self._load_masters(scope)
        ledgers, stock_items = apply_voucher(ledgers, stock_items, existing, -1)

        await self._persist(scope, ledgers, stock_items if _touches_inventory(existing) else None, vouchers)

        logger.info(f"Removed {existing.type} voucher #{existing.voucher_no} ({existing.id})")
        await self.audit.log(
            scope, AuditAction.DELETE, AuditEntity.VOUCHER, existing.id,
            f"Voucher {existing.type} #{existing.voucher_no} deleted"
        )
        return existing

    @timed
    async def replace(self, voucher: Voucher, scope: Optional[str] = None) -> Voucher:
        """Reverse the stored version (if any) and apply the new one in its place"""
        self._check_balanced(voucher)
        vouchers = await self.load_vouchers(scope)
        index = next((i for i, v in enumerate(vouchers) if v.id == voucher.id), None)
        if index is None:
            logger.info(f"Voucher {voucher.id} not in history, posting as new")
            return await self.post(voucher, scope)

        old = vouchers[index]
        ledgers, stock_items = await self._load_masters(scope)
        ledgers, stock_items = apply_voucher(ledgers, stock_items, old, -1)
        ledgers, stock_items = apply_voucher(ledgers, stock_items, voucher, 1)

        vouchers[index] = voucher
        await self._persist(
            scope, ledgers, stock_items if _touches_inventory(old, voucher) else None, vouchers
        )

        changes = {
            field: {"old": getattr(old, field), "new": getattr(voucher, field)}
            for field in ("voucher_no", "date", "type", "narration")
            if getattr(old, field) != getattr(voucher, field)
        }
        if old.rows != voucher.rows:
            changes["rows"] = {"old": len(old.rows), "new": len(voucher.rows)}

        logger.info(f"Replaced {voucher.type} voucher #{voucher.voucher_no} ({voucher.id})")
        await self.audit.log(
            scope, AuditAction.UPDATE, AuditEntity.VOUCHER, voucher.id,
            f"Voucher {voucher.type} #{voucher.voucher_no} updated",
            changes=changes or None
        )
        return voucher

    async def remove_many(self, voucher_ids: List[str], scope: Optional[str] = None) -> BulkResult:
        """Remove vouchers one by one; failures are reported, not rolled back"""
        result = BulkResult(total=len(voucher_ids))

        for voucher_id in voucher_ids:
            try:
                await self.remove(voucher_id, scope)
            except LedgerbookError as e:
                logger.warning(f"Bulk remove: {voucher_id} failed: {e}")
                result.failed.append(BulkFailure(voucher_id=voucher_id, code=e.code, message=e.message))
                continue
            except Exception as e:
                logger.error(f"Bulk remove: {voucher_id} failed: {e}")
                result.failed.append(BulkFailure(
                    voucher_id=voucher_id, code=ErrorCode.STORE_ERROR, message=str(e)
                ))
                continue
            result.completed += 1
            result.removed.append(voucher_id)

        logger.info(f"Bulk remove: {result.message}")
        return result


# Global service instance
voucher_service = VoucherService(document_store, audit_service)
