"""
Tax Service Module
==================
Classifies voucher lines into taxable value, tax components and a return
category, and folds many vouchers into return-level summaries.

RULE TABLE:
----------
Recognition is lexical and driven by `TaxConfig` (config.yaml `tax:`):
- tax_tokens:        account names containing any token are tax lines
- component_tokens:  ordered token -> component (cgst/sgst/igst/cess)
- taxable_groups:    only these ledger groups contribute taxable value
- party_groups:      groups identifying the customer / supplier row

SIDES:
-----
Sales and Debit Notes carry tax on the credit side; Purchases and Credit
Notes carry it on the debit side. Non-tax lines on the opposite side make
up the invoice value.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ..config import config, TaxConfig
from ..models.master import Ledger, StockItem
from ..models.tax import (
    DocumentRange,
    Gstr1Summary,
    HsnLine,
    LiabilitySummary,
    RateWiseLine,
    TaxFigures,
    VoucherTaxSummary,
)
from ..models.transaction import Voucher, VoucherRow
from ..utils.constants import (
    BalanceSide,
    NOTE_TYPES,
    TAX_RELEVANT_TYPES,
    TaxCategory,
    VoucherKind,
)
from ..utils.helpers import contains_any, natural_sort_key
from ..utils.logger import logger

POSITIVE_SIDE = {
    VoucherKind.SALES: BalanceSide.CREDIT,
    VoucherKind.DEBIT_NOTE: BalanceSide.CREDIT,
    VoucherKind.PURCHASE: BalanceSide.DEBIT,
    VoucherKind.CREDIT_NOTE: BalanceSide.DEBIT,
}

TAX_COMPONENTS = ("cgst", "sgst", "igst", "cess")

# Registration types that make a party unregistered whatever its gstin holds
UNREGISTERED_TYPES = ("consumer", "unregistered")


class TaxCategorizer:
    """Classifies a single voucher"""

    def __init__(self, rules: Optional[TaxConfig] = None):
        self.rules = rules or config.tax

    def is_tax_line(self, account: str) -> bool:
        return contains_any(account, self.rules.tax_tokens)

    def component_for(self, account: str) -> str:
        """First matching component token wins; generic tax lines fall back to the default"""
        lowered = account.lower()
        for rule in self.rules.component_tokens:
            if rule["token"].lower() in lowered:
                return rule["component"]
        return self.rules.default_component

    def find_party(self, voucher: Voucher, ledgers: Dict[str, Ledger]) -> Optional[Ledger]:
        for row in voucher.rows:
            ledger = ledgers.get(row.account)
            if ledger is not None and ledger.group in self.rules.party_groups:
                return ledger
        return None

    def classify(
        self,
        voucher: Voucher,
        ledgers: Iterable[Ledger],
        stock_items: Iterable[StockItem]
    ) -> VoucherTaxSummary:
        ledger_map = {ledger.name: ledger for ledger in ledgers}
        summary = VoucherTaxSummary(
            voucher_id=voucher.id,
            voucher_no=voucher.voucher_no,
            voucher_type=voucher.type
        )

        positive = POSITIVE_SIDE.get(voucher.type)
        if positive is None:
            summary.category = ""
            return summary

        taxable_rows: List[VoucherRow] = []
        for row in voucher.rows:
            amount = row.amount
            is_tax = self.is_tax_line(row.account)

            if row.type == positive:
                if is_tax:
                    component = self.component_for(row.account)
                    setattr(summary, component, getattr(summary, component) + amount)
                    summary.total_tax += amount
                else:
                    ledger = ledger_map.get(row.account)
                    if ledger is not None and ledger.group in self.rules.taxable_groups:
                        summary.taxable_value += amount
                        taxable_rows.append(row)
            elif not is_tax:
                summary.invoice_value += amount

        party = self.find_party(voucher, ledger_map)
        summary.party = party.name if party else None
        summary.place_of_supply = (
            voucher.place_of_supply or (party.state if party else "") or self.rules.home_state
        )
        summary.is_interstate = self._is_interstate(voucher, party, summary)
        summary.category = self._category(voucher, party, summary)
        summary.hsn = self._hsn_breakdown(taxable_rows, stock_items, summary)
        return summary

    def _is_interstate(self, voucher: Voucher, party: Optional[Ledger], summary: VoucherTaxSummary) -> bool:
        home_state = self.rules.home_state.strip().lower()
        if party is not None:
            if party.is_home_state is not None:
                return not party.is_home_state
            if party.state and home_state:
                return party.state.strip().lower() != home_state
        if voucher.place_of_supply and home_state:
            return voucher.place_of_supply.strip().lower() != home_state
        # No location info: integrated tax implies an inter-state supply
        return summary.igst > 0

    def is_registered(self, party: Optional[Ledger]) -> bool:
        """A party holds a usable tax id unless classified as consumer or unregistered"""
        if party is None or not party.gstin.strip():
            return False
        return party.registration_type.strip().lower() not in UNREGISTERED_TYPES

    def _category(self, voucher: Voucher, party: Optional[Ledger], summary: VoucherTaxSummary) -> str:
        registered = self.is_registered(party)
        if voucher.type in NOTE_TYPES:
            return TaxCategory.CDNR if registered else TaxCategory.CDNUR

        if party is None:
            return TaxCategory.B2CS

        if party.country and party.country.strip().lower() != self.rules.home_country.strip().lower():
            return TaxCategory.EXP
        if registered:
            return TaxCategory.B2B
        if summary.taxable_value > 0 and summary.total_tax == 0:
            return TaxCategory.NIL
        if summary.is_interstate and summary.invoice_value > self.rules.b2cl_threshold:
            return TaxCategory.B2CL
        return TaxCategory.B2CS

    def _hsn_breakdown(
        self,
        taxable_rows: List[VoucherRow],
        stock_items: Iterable[StockItem],
        summary: VoucherTaxSummary
    ) -> Dict[str, HsnLine]:
        items_by_id = {}
        items_by_name = {}
        for item in stock_items:
            items_by_id[item.id] = item
            items_by_name[item.name] = item

        hsn: Dict[str, HsnLine] = {}
        for row in taxable_rows:
            for allocation in row.inventory:
                item = items_by_id.get(allocation.item_id) or items_by_name.get(allocation.item_name)
                code = item.hsn_code if item is not None else ""
                line = hsn.setdefault(code, HsnLine(hsn_code=code))
                line.quantity += allocation.quantity
                line.taxable_value += allocation.amount

                if not summary.taxable_value:
                    continue
                share = allocation.amount / summary.taxable_value
                line.total_tax += share * summary.total_tax
                for component in TAX_COMPONENTS:
                    setattr(line, component, getattr(line, component) + share * getattr(summary, component))
        return hsn


class TaxAggregator:
    """Folds many vouchers into return summaries"""

    def __init__(self, rules: Optional[TaxConfig] = None):
        self.categorizer = TaxCategorizer(rules)

    def aggregate(
        self,
        vouchers: Iterable[Voucher],
        ledgers: Iterable[Ledger],
        stock_items: Iterable[StockItem]
    ) -> Gstr1Summary:
        ledgers = list(ledgers)
        stock_items = list(stock_items)
        report = Gstr1Summary()
        rate_wise: Dict[Tuple[str, float], RateWiseLine] = {}

        for voucher in sorted(vouchers, key=lambda v: natural_sort_key(v.voucher_no)):
            report.counts.total += 1
            if voucher.type not in TAX_RELEVANT_TYPES:
                report.counts.not_relevant += 1
                continue

            summary = self.categorizer.classify(voucher, ledgers, stock_items)
            report.counts.included += 1
            if summary.party is None:
                report.counts.uncertain += 1

            bucket = report.bucket(summary.category)
            bucket.add(summary)
            bucket.count += 1
            bucket.vouchers.append(voucher.id)
            report.total.add(summary)

            if summary.category == TaxCategory.B2CS:
                key = (summary.place_of_supply, summary.effective_rate)
                line = rate_wise.setdefault(
                    key, RateWiseLine(place_of_supply=key[0], rate=key[1])
                )
                line.add(summary)
                line.count += 1

            for code, hsn_line in summary.hsn.items():
                merged = report.hsn.setdefault(code, HsnLine(hsn_code=code))
                for field in HsnLine.model_fields:
                    if field != "hsn_code":
                        setattr(merged, field, getattr(merged, field) + getattr(hsn_line, field))

            docs = report.docs.setdefault(voucher.type, DocumentRange(voucher_type=voucher.type))
            if not docs.count:
                docs.first = voucher.voucher_no
            docs.last = voucher.voucher_no
            docs.count += 1

        report.b2cs_rate_wise = sorted(rate_wise.values(), key=lambda l: (l.place_of_supply, l.rate))
        logger.debug(
            f"Aggregated {report.counts.total} vouchers: {report.counts.included} included, "
            f"{report.counts.not_relevant} not relevant, {report.counts.uncertain} uncertain"
        )
        return report

    def liability(
        self,
        vouchers: Iterable[Voucher],
        ledgers: Iterable[Ledger],
        stock_items: Iterable[StockItem]
    ) -> LiabilitySummary:
        """Outward tax less eligible input credit; notes reduce their parent flow"""
        ledgers = list(ledgers)
        stock_items = list(stock_items)
        outward = TaxFigures()
        inward = TaxFigures()

        for voucher in vouchers:
            if voucher.type not in TAX_RELEVANT_TYPES:
                continue
            summary = self.categorizer.classify(voucher, ledgers, stock_items)
            if voucher.type == VoucherKind.SALES:
                outward.add(summary)
            elif voucher.type == VoucherKind.CREDIT_NOTE:
                outward.add(summary, sign=-1)
            elif voucher.type == VoucherKind.PURCHASE:
                inward.add(summary)
            else:
                inward.add(summary, sign=-1)

        return LiabilitySummary(
            outward_taxable=outward.taxable_value,
            outward_tax=outward.total_tax,
            eligible_itc=inward.total_tax,
            net_tax_payable=outward.total_tax - inward.total_tax,
            outward=outward,
            inward=inward
        )
