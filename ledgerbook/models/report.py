"""
Report Models
Pydantic models for ledger statements, group and stock summaries and bulk results
"""

from typing import List, Literal
from pydantic import BaseModel


class StatementRow(BaseModel):
    voucher_id: str
    voucher_no: str = ""
    date: str
    voucher_type: str = ""
    particulars: str = ""
    narration: str = ""
    debit: float = 0.0
    credit: float = 0.0
    running_signed: float = 0.0
    balance: float = 0.0
    balance_type: Literal["Dr", "Cr"] = "Dr"


class LedgerStatement(BaseModel):
    ledger_id: str
    ledger_name: str
    range_start: str
    range_end: str
    opening_balance: float = 0.0
    opening_type: Literal["Dr", "Cr"] = "Dr"
    rows: List[StatementRow] = []
    total_debit: float = 0.0
    total_credit: float = 0.0
    closing_balance: float = 0.0
    closing_type: Literal["Dr", "Cr"] = "Dr"


class GroupSummary(BaseModel):
    group_name: str
    total: float = 0.0
    ledgers: List[str] = []


class TrialBalanceLine(BaseModel):
    ledger_name: str
    group: str = ""
    family: str = ""
    debit: float = 0.0
    credit: float = 0.0


class TrialBalance(BaseModel):
    lines: List[TrialBalanceLine] = []
    total_debit: float = 0.0
    total_credit: float = 0.0
    difference: float = 0.0


class StockSummaryRow(BaseModel):
    item_id: str
    item_name: str
    unit: str = ""
    opening_quantity: float = 0.0
    opening_value: float = 0.0
    inward_quantity: float = 0.0
    inward_value: float = 0.0
    outward_quantity: float = 0.0
    outward_value: float = 0.0
    closing_quantity: float = 0.0
    closing_value: float = 0.0


class StockSummary(BaseModel):
    range_start: str
    range_end: str
    rows: List[StockSummaryRow] = []
    total_closing_value: float = 0.0


class BulkFailure(BaseModel):
    voucher_id: str
    code: str
    message: str


class BulkResult(BaseModel):
    total: int = 0
    completed: int = 0
    removed: List[str] = []
    failed: List[BulkFailure] = []

    @property
    def message(self) -> str:
        return f"{self.completed} of {self.total} completed"
