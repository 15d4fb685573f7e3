"""
Audit Trail Service
====================
Records CREATE, UPDATE and DELETE actions on vouchers, ledgers and stock
items.

STORAGE:
-------
Entries live in the `audit_logs` document of each company scope, newest
first, capped at `audit.max_entries`.

FAILURES:
--------
Audit logging never breaks the operation being audited: write errors are
logged and swallowed.

USAGE:
------
await audit_service.log(scope, AuditAction.CREATE, AuditEntity.VOUCHER,
                        voucher.id, "Voucher Sales #101 created")
"""

from typing import Any, Dict, List, Optional

from ..config import config
from ..utils.constants import TABLE_AUDIT_LOGS
from ..utils.helpers import get_current_timestamp, new_record_id
from ..utils.logger import logger
from .document_store import DocumentStore, document_store


class AuditService:
    """Service for audit trail logging"""

    def __init__(self, store: Optional[DocumentStore], max_entries: Optional[int] = None,
                 enabled: Optional[bool] = None):
        self.store = store
        self._max_entries = max_entries
        self._enabled = enabled

    # Without an override both settings follow config.audit, which
    # PUT /api/config may change while the service is running
    @property
    def max_entries(self) -> int:
        return self._max_entries or config.audit.max_entries

    @property
    def enabled(self) -> bool:
        return config.audit.enabled if self._enabled is None else self._enabled

    async def log(
        self,
        scope: Optional[str],
        action: str,
        entity_type: str,
        entity_id: str,
        details: str,
        changes: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None
    ) -> None:
        """Prepend an audit entry"""
        if not self.enabled or self.store is None:
            return

        entry = {
            "id": new_record_id("A"),
            "timestamp": get_current_timestamp(),
            "user_id": user_id or config.audit.user,
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "details": details,
            "changes": changes
        }

        try:
            logs = await self.store.read(TABLE_AUDIT_LOGS, scope) or []
            logs.insert(0, entry)
            await self.store.write(TABLE_AUDIT_LOGS, logs[:self.max_entries], scope)
        except Exception as e:
            logger.error(f"Failed to log audit action {action} {entity_type} {entity_id}: {e}")

    async def get_logs(
        self,
        scope: Optional[str] = None,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        """Audit history with optional filters, newest first"""
        if self.store is None:
            return []

        logs = await self.store.read(TABLE_AUDIT_LOGS, scope) or []

        if action:
            logs = [entry for entry in logs if entry.get("action") == action.upper()]
        if entity_type:
            logs = [entry for entry in logs if entry.get("entity_type") == entity_type.upper()]
        if entity_id:
            logs = [entry for entry in logs if entry.get("entity_id") == entity_id]

        return logs[offset:offset + limit]


# Global service instance
audit_service = AuditService(document_store)
