"""
Tax Report Models
Pydantic models for voucher tax classification and return aggregation
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class TaxFigures(BaseModel):
    taxable_value: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0
    cess: float = 0.0
    total_tax: float = 0.0
    invoice_value: float = 0.0

    def add(self, other: "TaxFigures", sign: int = 1) -> None:
        """Accumulate (sign=1) or deduct (sign=-1) another set of figures"""
        for field in TaxFigures.model_fields:
            setattr(self, field, getattr(self, field) + sign * getattr(other, field))


class HsnLine(BaseModel):
    hsn_code: str = ""
    quantity: float = 0.0
    taxable_value: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0
    cess: float = 0.0
    total_tax: float = 0.0


class VoucherTaxSummary(TaxFigures):
    voucher_id: str = ""
    voucher_no: str = ""
    voucher_type: str = ""
    category: str = "B2CS"
    party: Optional[str] = None
    place_of_supply: str = ""
    is_interstate: bool = False
    hsn: Dict[str, HsnLine] = {}

    @property
    def effective_rate(self) -> float:
        if not self.taxable_value:
            return 0.0
        return round(self.total_tax / self.taxable_value * 100, 2)


class CategoryBucket(TaxFigures):
    count: int = 0
    vouchers: List[str] = []


class RateWiseLine(TaxFigures):
    place_of_supply: str = ""
    rate: float = 0.0
    count: int = 0


class DocumentRange(BaseModel):
    voucher_type: str
    first: str = ""
    last: str = ""
    count: int = 0


class VoucherCounts(BaseModel):
    total: int = 0
    included: int = 0
    not_relevant: int = 0
    uncertain: int = 0


class Gstr1Summary(BaseModel):
    b2b: CategoryBucket = Field(default_factory=CategoryBucket)
    b2cl: CategoryBucket = Field(default_factory=CategoryBucket)
    b2cs: CategoryBucket = Field(default_factory=CategoryBucket)
    cdnr: CategoryBucket = Field(default_factory=CategoryBucket)
    cdnur: CategoryBucket = Field(default_factory=CategoryBucket)
    exp: CategoryBucket = Field(default_factory=CategoryBucket)
    nil: CategoryBucket = Field(default_factory=CategoryBucket)
    b2cs_rate_wise: List[RateWiseLine] = []
    hsn: Dict[str, HsnLine] = {}
    docs: Dict[str, DocumentRange] = {}
    counts: VoucherCounts = Field(default_factory=VoucherCounts)
    total: TaxFigures = Field(default_factory=TaxFigures)

    def bucket(self, category: str) -> CategoryBucket:
        return getattr(self, category.lower())


class LiabilitySummary(BaseModel):
    outward_taxable: float = 0.0
    outward_tax: float = 0.0
    eligible_itc: float = 0.0
    net_tax_payable: float = 0.0
    outward: TaxFigures = Field(default_factory=TaxFigures)
    inward: TaxFigures = Field(default_factory=TaxFigures)
