# Controllers Package
# MVC Controller Layer

from .voucher_controller import router as voucher_router
from .report_controller import router as report_router
from .ledger_controller import router as ledger_router
from .audit_controller import router as audit_router
from .config_controller import router as config_router
from .health_controller import router as health_router

__all__ = [
    "voucher_router",
    "report_router",
    "ledger_router",
    "audit_router",
    "config_router",
    "health_router"
]
