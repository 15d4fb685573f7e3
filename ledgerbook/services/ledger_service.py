"""
Ledger Service Module
Master data reads/writes and default ledger provisioning
"""

from typing import List, Optional

from ..exceptions import StoreNotInitializedError
from ..models.master import Ledger, StockItem
from ..utils.constants import (
    AuditAction,
    AuditEntity,
    DEFAULT_LEDGERS,
    TABLE_LEDGERS,
    TABLE_STOCK_ITEMS,
)
from ..utils.logger import logger
from .audit_service import AuditService, audit_service
from .document_store import DocumentStore, document_store


class LedgerService:
    """Service for ledger and stock item masters"""

    def __init__(self, store: Optional[DocumentStore], audit: Optional[AuditService] = None):
        self.store = store
        self.audit = audit or AuditService(store)

    def _require_store(self) -> DocumentStore:
        if self.store is None:
            raise StoreNotInitializedError("Document store not initialized")
        return self.store

    async def list_ledgers(self, scope: Optional[str] = None, group: Optional[str] = None) -> List[Ledger]:
        records = await self._require_store().read(TABLE_LEDGERS, scope) or []
        ledgers = [Ledger.model_validate(record) for record in records]
        if group:
            ledgers = [ledger for ledger in ledgers if ledger.group == group]
        return sorted(ledgers, key=lambda l: l.name.lower())

    async def list_stock_items(self, scope: Optional[str] = None) -> List[StockItem]:
        records = await self._require_store().read(TABLE_STOCK_ITEMS, scope) or []
        return [StockItem.model_validate(record) for record in records]

    async def save_ledger(self, ledger: Ledger, scope: Optional[str] = None) -> Ledger:
        """Create or update a ledger by id"""
        store = self._require_store()
        records = await store.read(TABLE_LEDGERS, scope) or []
        index = next((i for i, record in enumerate(records) if record.get("id") == ledger.id), None)

        if index is None:
            records.append(ledger.model_dump())
            action = AuditAction.CREATE
        else:
            records[index] = ledger.model_dump()
            action = AuditAction.UPDATE

        await store.write(TABLE_LEDGERS, records, scope)
        await self.audit.log(scope, action, AuditEntity.LEDGER, ledger.id, f"Ledger {ledger.name} saved")
        return ledger

    async def save_stock_item(self, item: StockItem, scope: Optional[str] = None) -> StockItem:
        """Create or update a stock item by id"""
        store = self._require_store()
        records = await store.read(TABLE_STOCK_ITEMS, scope) or []
        index = next((i for i, record in enumerate(records) if record.get("id") == item.id), None)

        if index is None:
            records.append(item.model_dump())
            action = AuditAction.CREATE
        else:
            records[index] = item.model_dump()
            action = AuditAction.UPDATE

        await store.write(TABLE_STOCK_ITEMS, records, scope)
        await self.audit.log(scope, action, AuditEntity.STOCK_ITEM, item.id, f"Stock item {item.name} saved")
        return item

    async def ensure_defaults(self, scope: Optional[str] = None) -> bool:
        """Create the standard ledgers a company needs; True when anything was added"""
        store = self._require_store()
        records = await store.read(TABLE_LEDGERS, scope) or []
        existing = {str(record.get("name", "")).lower() for record in records}

        added = []
        for default in DEFAULT_LEDGERS:
            if default["name"].lower() in existing:
                continue
            ledger = Ledger(name=default["name"], group=default["group"], type=default["type"])
            records.append(ledger.model_dump())
            added.append(ledger.name)

        if not added:
            return False

        await store.write(TABLE_LEDGERS, records, scope)
        logger.info(f"Default ledgers added for scope '{scope or 'default'}': {', '.join(added)}")
        return True


# Global service instance
ledger_service = LedgerService(document_store, audit_service)
