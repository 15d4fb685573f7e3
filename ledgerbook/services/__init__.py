# Services Package
# Business Logic Layer

from .document_store import DocumentStore, MemoryDocumentStore, SqliteDocumentStore, document_store
from .voucher_service import VoucherService
from .ledger_service import LedgerService
from .report_service import ReportService
from .tax_service import TaxAggregator, TaxCategorizer
from .audit_service import AuditService
from .health_service import HealthService

__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "SqliteDocumentStore",
    "document_store",
    "VoucherService",
    "LedgerService",
    "ReportService",
    "TaxAggregator",
    "TaxCategorizer",
    "AuditService",
    "HealthService"
]
