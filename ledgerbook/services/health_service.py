"""
Health Service Module
Handles health checks for system components
"""

from datetime import datetime

from ..models.health import HealthCheckResponse, StoreHealth
from ..utils.constants import HealthStatus
from ..utils.logger import logger
from .document_store import DocumentStore, SqliteDocumentStore, document_store


class HealthService:
    """Service for health monitoring"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def check_all(self) -> HealthCheckResponse:
        """Check health of all components"""
        store_health = await self.check_store()

        return HealthCheckResponse(
            status=store_health.status,
            timestamp=datetime.now().isoformat(),
            components={"store": store_health}
        )

    async def check_store(self) -> StoreHealth:
        """Check document store health"""
        try:
            await self.store.connect()
            documents = await self.store.list_documents()
            health = StoreHealth(
                status=HealthStatus.HEALTHY,
                backend=self.store.backend,
                documents=len(documents),
                message="Connected"
            )
            if isinstance(self.store, SqliteDocumentStore):
                health.path = self.store.db_path
                health.size_bytes = await self.store.get_database_size()
            return health
        except Exception as e:
            logger.error(f"Store health check failed: {e}")
            return StoreHealth(
                status=HealthStatus.UNHEALTHY,
                backend=self.store.backend,
                message=str(e)
            )


# Global service instance
health_service = HealthService(document_store)
