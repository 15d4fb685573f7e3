"""
Master Data Models
Pydantic models for ledgers and stock items
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

from ..utils.helpers import new_record_id, to_signed


class Ledger(BaseModel):
    """Account with a non-negative balance magnitude and a Dr/Cr tag"""
    id: str = Field(default_factory=lambda: new_record_id("L"))
    name: str
    group: str = ""
    balance: float = Field(default=0.0, ge=0)
    type: Literal["Dr", "Cr"] = "Dr"
    gstin: str = ""
    registration_type: str = ""
    state: str = ""
    country: str = ""
    is_home_state: Optional[bool] = None

    @property
    def signed_balance(self) -> float:
        return to_signed(self.balance, self.type)


class StockItem(BaseModel):
    """Stock item valued at moving-average cost"""
    id: str = Field(default_factory=lambda: new_record_id("S"))
    name: str
    group: str = ""
    unit: str = ""
    opening_stock: float = 0.0
    opening_rate: float = 0.0
    opening_value: Optional[float] = None
    hsn_code: str = ""
    gst_rate: float = 0.0

    # Running state, None until a posting first touches the item
    current_balance: Optional[float] = None
    current_rate: Optional[float] = None
    current_value: Optional[float] = None

    @model_validator(mode="after")
    def _fill_opening_value(self) -> "StockItem":
        if self.opening_value is None:
            self.opening_value = self.opening_stock * self.opening_rate
        return self

    @property
    def is_initialized(self) -> bool:
        return self.current_balance is not None
