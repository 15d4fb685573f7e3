"""
Transaction Data Models
Pydantic models for vouchers, rows and inventory allocations
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..utils.constants import VOUCHER_TYPES
from ..utils.helpers import new_record_id, parse_voucher_date


class InventoryAllocation(BaseModel):
    item_id: str = ""
    item_name: str = ""
    quantity: float = 0.0
    unit: str = ""
    rate: float = 0.0
    amount: Optional[float] = None
    batch: str = ""
    expiry: Optional[str] = None

    @model_validator(mode="after")
    def _fill_amount(self) -> "InventoryAllocation":
        if self.amount is None:
            self.amount = self.quantity * self.rate
        return self


class VoucherRow(BaseModel):
    type: Literal["Dr", "Cr"]
    account: str = ""
    debit: float = 0.0
    credit: float = 0.0
    inventory: List[InventoryAllocation] = []

    @property
    def amount(self) -> float:
        return self.debit or self.credit or 0.0


class Voucher(BaseModel):
    id: str = Field(default_factory=lambda: new_record_id("V"))
    voucher_no: str = ""
    date: str
    type: str
    narration: str = ""
    place_of_supply: str = ""
    rows: List[VoucherRow] = []

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return parse_voucher_date(value)

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in VOUCHER_TYPES:
            raise ValueError(f"Unknown voucher type: {value}")
        return value

    @property
    def total_debit(self) -> float:
        return sum(row.debit for row in self.rows)

    @property
    def total_credit(self) -> float:
        return sum(row.credit for row in self.rows)
