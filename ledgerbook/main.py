"""
Ledgerbook Accounting Core
Main Application Entry Point
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import config
from .utils.constants import APP_NAME, APP_VERSION
from .utils.logger import setup_logger, logger
from .services.document_store import document_store
from .controllers import (
    voucher_router,
    report_router,
    ledger_router,
    audit_router,
    config_router,
    health_router,
)


# Setup logging
setup_logger(
    level=config.logging.level,
    log_file=config.logging.file,
    max_size=config.logging.max_size,
    backup_count=config.logging.backup_count,
    console=config.logging.console,
    colorize=config.logging.colorize
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{APP_NAME} starting...")
    await document_store.connect()
    logger.info(f"Document store: {document_store.backend}")
    logger.info(f"API running on http://{config.api.host}:{config.api.port}")
    yield
    await document_store.disconnect()
    logger.info(f"{APP_NAME} shutting down...")


# Create FastAPI application
app = FastAPI(
    title=APP_NAME,
    description="Voucher posting, inventory valuation, ledger statements and GST summaries",
    version=APP_VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(voucher_router, prefix="/api/vouchers", tags=["Vouchers"])
app.include_router(report_router, prefix="/api/reports", tags=["Reports"])
app.include_router(ledger_router, prefix="/api/ledgers", tags=["Ledgers"])
app.include_router(audit_router, prefix="/api/audit", tags=["Audit Trail"])
app.include_router(config_router, prefix="/api/config", tags=["Config"])
app.include_router(health_router, prefix="/api/health", tags=["Health"])


@app.get("/")
async def root():
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs"
    }


@app.get("/api/info")
async def info():
    """System information"""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "store": {
            "backend": config.store.backend,
            "path": config.store.path
        },
        "posting": config.posting.model_dump(),
        "audit": {
            "enabled": config.audit.enabled,
            "max_entries": config.audit.max_entries
        }
    }
