"""
Report Service Module
=====================
Ledger statements, stock and group summaries, trial balance and tax returns.

OPENING BALANCE:
---------------
Only the CURRENT balance of a ledger is stored. The opening balance of a
statement range is back-calculated:

    closing_signed = stored balance as signed amount (Dr +, Cr -)
    net_movement   = sum(debit - credit) of the ledger's rows in range
    opening_signed = closing_signed - net_movement

Rows then run forward from opening_signed, so the last running balance
always equals closing_signed.
"""

from typing import Iterable, List, Optional, Tuple

from ..exceptions import LedgerNotFoundError, StoreNotInitializedError
from ..models.master import Ledger, StockItem
from ..models.report import (
    GroupSummary,
    LedgerStatement,
    StatementRow,
    StockSummary,
    StockSummaryRow,
    TrialBalance,
    TrialBalanceLine,
)
from ..models.tax import Gstr1Summary, LiabilitySummary
from ..models.transaction import Voucher
from ..utils.constants import (
    ACCOUNT_GROUPS,
    BalanceSide,
    TABLE_LEDGERS,
    TABLE_STOCK_ITEMS,
    TABLE_VOUCHERS,
    VoucherKind,
)
from ..utils.decorators import timed
from ..utils.helpers import parse_voucher_date, round_amount, split_signed, to_signed
from ..utils.logger import logger
from .document_store import DocumentStore, document_store
from .posting_engine import resolve_item, value_allocation
from .tax_service import TaxAggregator


def _parse_range(range_start: str, range_end: str) -> Tuple[str, str]:
    start = parse_voucher_date(range_start)
    end = parse_voucher_date(range_end)
    if start is None or end is None:
        raise ValueError("Report range needs both a start and an end date")
    if start > end:
        raise ValueError(f"Report range starts after it ends: {start} > {end}")
    return start, end


def build_ledger_statement(
    ledger: Ledger,
    vouchers: Iterable[Voucher],
    range_start: str,
    range_end: str
) -> LedgerStatement:
    """Date-ranged statement with back-calculated opening balance"""
    start, end = _parse_range(range_start, range_end)

    entries = []
    for voucher in vouchers:
        if not start <= voucher.date <= end:
            continue
        for row in voucher.rows:
            if row.account != ledger.name:
                continue
            counter = [r.account for r in voucher.rows if r.account and r.account != ledger.name]
            entries.append((voucher, row, ", ".join(dict.fromkeys(counter))))

    # sorted() is stable: same-day rows keep voucher history order
    entries.sort(key=lambda entry: entry[0].date)

    closing_signed = to_signed(ledger.balance, ledger.type)
    net_movement = sum(row.debit - row.credit for _, row, _ in entries)
    opening_signed = closing_signed - net_movement

    running = opening_signed
    rows: List[StatementRow] = []
    total_debit = 0.0
    total_credit = 0.0
    for voucher, row, particulars in entries:
        running += row.debit - row.credit
        total_debit += row.debit
        total_credit += row.credit
        balance, balance_type = split_signed(running)
        rows.append(StatementRow(
            voucher_id=voucher.id,
            voucher_no=voucher.voucher_no,
            date=voucher.date,
            voucher_type=voucher.type,
            particulars=particulars,
            narration=voucher.narration,
            debit=row.debit,
            credit=row.credit,
            running_signed=running,
            balance=balance,
            balance_type=balance_type
        ))

    opening_balance, opening_type = split_signed(opening_signed)
    closing_balance, closing_type = split_signed(closing_signed)

    return LedgerStatement(
        ledger_id=ledger.id,
        ledger_name=ledger.name,
        range_start=start,
        range_end=end,
        opening_balance=opening_balance,
        opening_type=opening_type,
        rows=rows,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=closing_balance,
        closing_type=closing_type
    )


def _stock_movements(vouchers: Iterable[Voucher]):
    """(voucher, allocation) pairs of stock-moving vouchers in date order"""
    for voucher in sorted(vouchers, key=lambda v: v.date):
        if voucher.type not in (VoucherKind.PURCHASE, VoucherKind.SALES):
            continue
        for row in voucher.rows:
            for allocation in row.inventory:
                yield voucher, allocation


def stock_summary(
    stock_items: Iterable[StockItem],
    vouchers: Iterable[Voucher],
    range_start: str,
    range_end: str
) -> StockSummary:
    """Per-item opening, inward, outward and closing figures for a date range.

    Valuation is replayed from each item's opening figures through the
    moving-average rules of the posting engine, in voucher date order.
    Inward and outward values are the amounts recorded on the vouchers;
    opening and closing values are at average cost.
    """
    start, end = _parse_range(range_start, range_end)

    items = [
        item.model_copy(update={
            "current_balance": item.opening_stock,
            "current_rate": item.opening_rate,
            "current_value": item.opening_value,
        })
        for item in stock_items
    ]
    by_id = {item.id: item for item in items}
    by_name = {item.name: item for item in items}
    lines = {item.id: StockSummaryRow(item_id=item.id, item_name=item.name, unit=item.unit) for item in items}

    movements = [(v, a) for v, a in _stock_movements(vouchers) if v.date <= end]
    for voucher, allocation in movements:
        if voucher.date < start:
            item = resolve_item(allocation, by_id, by_name)
            if item is not None:
                value_allocation(item, allocation, voucher.type, 1)

    for item in items:
        lines[item.id].opening_quantity = item.current_balance
        lines[item.id].opening_value = item.current_value

    for voucher, allocation in movements:
        if voucher.date < start:
            continue
        item = resolve_item(allocation, by_id, by_name)
        if item is None:
            continue
        line = lines[item.id]
        if voucher.type == VoucherKind.PURCHASE:
            line.inward_quantity += allocation.quantity
            line.inward_value += allocation.amount
        else:
            line.outward_quantity += allocation.quantity
            line.outward_value += allocation.amount
        value_allocation(item, allocation, voucher.type, 1)

    summary = StockSummary(range_start=start, range_end=end)
    for item in items:
        line = lines[item.id]
        line.closing_quantity = item.current_balance
        line.closing_value = item.current_value
        summary.rows.append(line)
        summary.total_closing_value += line.closing_value
    return summary


def group_summary(ledgers: Iterable[Ledger], groups: List[str]) -> List[GroupSummary]:
    """Total balance magnitude per group, in the order requested"""
    ledgers = list(ledgers)
    summaries = []
    for group in groups:
        members = [ledger for ledger in ledgers if ledger.group == group]
        summaries.append(GroupSummary(
            group_name=group,
            total=sum(ledger.balance for ledger in members),
            ledgers=[ledger.name for ledger in members]
        ))
    return summaries


def trial_balance(ledgers: Iterable[Ledger]) -> TrialBalance:
    family_of = {group: family for family, groups in ACCOUNT_GROUPS.items() for group in groups}
    result = TrialBalance()

    for ledger in sorted(ledgers, key=lambda l: (l.group, l.name)):
        if not ledger.balance:
            continue
        line = TrialBalanceLine(
            ledger_name=ledger.name,
            group=ledger.group,
            family=family_of.get(ledger.group, "")
        )
        if ledger.type == BalanceSide.DEBIT:
            line.debit = ledger.balance
        else:
            line.credit = ledger.balance
        result.lines.append(line)
        result.total_debit += line.debit
        result.total_credit += line.credit

    result.difference = round_amount(result.total_debit - result.total_credit)
    return result


class ReportService:
    """Store-backed report entry points"""

    def __init__(self, store: Optional[DocumentStore], aggregator: Optional[TaxAggregator] = None):
        self.store = store
        self.aggregator = aggregator or TaxAggregator()

    def _require_store(self) -> DocumentStore:
        if self.store is None:
            raise StoreNotInitializedError("Document store not initialized")
        return self.store

    async def load_ledgers(self, scope: Optional[str] = None) -> List[Ledger]:
        records = await self._require_store().read(TABLE_LEDGERS, scope) or []
        return [Ledger.model_validate(record) for record in records]

    async def load_vouchers(self, scope: Optional[str] = None) -> List[Voucher]:
        records = await self._require_store().read(TABLE_VOUCHERS, scope) or []
        return [Voucher.model_validate(record) for record in records]

    async def load_stock_items(self, scope: Optional[str] = None) -> List[StockItem]:
        records = await self._require_store().read(TABLE_STOCK_ITEMS, scope) or []
        return [StockItem.model_validate(record) for record in records]

    async def _vouchers_between(self, start: Optional[str], end: Optional[str],
                                scope: Optional[str]) -> List[Voucher]:
        vouchers = await self.load_vouchers(scope)
        start = parse_voucher_date(start) if start else None
        end = parse_voucher_date(end) if end else None
        return [
            v for v in vouchers
            if (start is None or v.date >= start) and (end is None or v.date <= end)
        ]

    @timed
    async def ledger_statement(self, ledger_id: str, range_start: str, range_end: str,
                               scope: Optional[str] = None) -> LedgerStatement:
        ledgers = await self.load_ledgers(scope)
        ledger = next((l for l in ledgers if l.id == ledger_id), None)
        if ledger is None:
            raise LedgerNotFoundError(ledger_id)

        vouchers = await self.load_vouchers(scope)
        statement = build_ledger_statement(ledger, vouchers, range_start, range_end)
        logger.info(
            f"Ledger statement for {ledger.name} ({statement.range_start}..{statement.range_end}): "
            f"{len(statement.rows)} rows"
        )
        return statement

    @timed
    async def gstr1(self, start: Optional[str] = None, end: Optional[str] = None,
                    scope: Optional[str] = None) -> Gstr1Summary:
        vouchers = await self._vouchers_between(start, end, scope)
        return self.aggregator.aggregate(
            vouchers, await self.load_ledgers(scope), await self.load_stock_items(scope)
        )

    @timed
    async def gstr3b(self, start: Optional[str] = None, end: Optional[str] = None,
                     scope: Optional[str] = None) -> LiabilitySummary:
        vouchers = await self._vouchers_between(start, end, scope)
        return self.aggregator.liability(
            vouchers, await self.load_ledgers(scope), await self.load_stock_items(scope)
        )

    @timed
    async def stock_summary(self, range_start: str, range_end: str,
                            scope: Optional[str] = None) -> StockSummary:
        summary = stock_summary(
            await self.load_stock_items(scope), await self.load_vouchers(scope), range_start, range_end
        )
        logger.info(
            f"Stock summary ({summary.range_start}..{summary.range_end}): {len(summary.rows)} items"
        )
        return summary

    async def trial_balance(self, scope: Optional[str] = None) -> TrialBalance:
        return trial_balance(await self.load_ledgers(scope))

    async def group_summary(self, groups: List[str], scope: Optional[str] = None) -> List[GroupSummary]:
        return group_summary(await self.load_ledgers(scope), groups)


# Global service instance
report_service = ReportService(document_store)
