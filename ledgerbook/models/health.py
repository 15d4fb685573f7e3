"""
Health Models
Pydantic models for health checks
"""

from typing import Dict
from pydantic import BaseModel


class ComponentHealth(BaseModel):
    status: str
    message: str = ""


class StoreHealth(ComponentHealth):
    backend: str
    documents: int = 0
    path: str = ""
    size_bytes: int = 0


class HealthCheckResponse(BaseModel):
    status: str
    timestamp: str
    components: Dict[str, StoreHealth]
