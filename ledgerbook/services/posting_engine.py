"""
Posting Engine Module
=====================
Applies or reverses a voucher's effect on ledger balances and stock
valuation.

MULTIPLIER:
----------
+1 applies a voucher, -1 reverses it. Applying a voucher and then its
reversal restores every touched ledger to its prior signed balance, as
long as nothing else touched those ledgers in between.

SNAPSHOTS:
---------
Functions here never mutate their inputs. They return new lists of
Ledger / StockItem models so the caller decides when (and whether) to
persist them.

LENIENCY:
--------
Rows naming an unknown ledger and allocations naming an unknown stock
item are skipped without error; remaining rows are still applied.
"""

from typing import Dict, List, Tuple

from ..exceptions import UnbalancedVoucherError
from ..models.master import Ledger, StockItem
from ..models.transaction import InventoryAllocation, Voucher
from ..utils.constants import BalanceSide, VoucherKind
from ..utils.helpers import split_signed, to_signed
from ..utils.logger import logger


def validate_balanced(voucher: Voucher, tolerance: float = 0.005) -> None:
    """Raise UnbalancedVoucherError when debit and credit totals differ"""
    total_debit = voucher.total_debit
    total_credit = voucher.total_credit
    if abs(total_debit - total_credit) > tolerance:
        raise UnbalancedVoucherError(voucher.id, total_debit, total_credit)


def row_change(side: str, debit: float, credit: float, multiplier: int) -> float:
    """Signed impact of one row: Dr rows add their debit, Cr rows subtract their credit"""
    change = debit if side == BalanceSide.DEBIT else -credit
    return change * multiplier


def apply_ledger_impact(ledgers: List[Ledger], voucher: Voucher, multiplier: int) -> List[Ledger]:
    """Return a new ledger list with the voucher's rows applied"""
    updated = [ledger.model_copy() for ledger in ledgers]
    by_name: Dict[str, Ledger] = {ledger.name: ledger for ledger in updated}

    for row in voucher.rows:
        if not row.account:
            continue

        ledger = by_name.get(row.account)
        if ledger is None:
            logger.debug(f"Voucher {voucher.id}: ledger '{row.account}' not found, row skipped")
            continue

        signed = to_signed(ledger.balance, ledger.type)
        signed += row_change(row.type, row.debit, row.credit, multiplier)
        ledger.balance, ledger.type = split_signed(signed)

    return updated


def _initialize_item(item: StockItem) -> None:
    """Seed running figures from opening figures on first touch"""
    if item.is_initialized:
        return
    item.current_balance = item.opening_stock
    item.current_rate = item.opening_rate
    item.current_value = item.opening_value


def resolve_item(allocation: InventoryAllocation, by_id: Dict[str, StockItem],
                  by_name: Dict[str, StockItem]):
    if allocation.item_id and allocation.item_id in by_id:
        return by_id[allocation.item_id]
    if allocation.item_name:
        return by_name.get(allocation.item_name)
    return None


def value_allocation(item: StockItem, allocation: InventoryAllocation, voucher_type: str,
                     multiplier: int) -> None:
    """Moving-average valuation of a single allocation (mutates item)"""
    _initialize_item(item)

    if voucher_type == VoucherKind.PURCHASE:
        item.current_balance += allocation.quantity * multiplier
        item.current_value += allocation.amount * multiplier
    elif voucher_type == VoucherKind.SALES:
        # Outgoing stock is costed at the average rate in effect before the sale
        item.current_balance -= allocation.quantity * multiplier
        item.current_value = item.current_balance * item.current_rate
    else:
        return

    # At zero or negative stock the last computed rate is kept
    if item.current_balance > 0:
        item.current_rate = item.current_value / item.current_balance


def apply_inventory_impact(stock_items: List[StockItem], voucher: Voucher, multiplier: int) -> List[StockItem]:
    """Return a new stock item list with the voucher's allocations valued"""
    updated = [item.model_copy() for item in stock_items]

    if voucher.type not in (VoucherKind.PURCHASE, VoucherKind.SALES):
        return updated

    by_id = {item.id: item for item in updated}
    by_name = {item.name: item for item in updated}

    for row in voucher.rows:
        for allocation in row.inventory:
            item = resolve_item(allocation, by_id, by_name)
            if item is None:
                logger.debug(
                    f"Voucher {voucher.id}: stock item '{allocation.item_name or allocation.item_id}' "
                    f"not found, allocation skipped"
                )
                continue
            value_allocation(item, allocation, voucher.type, multiplier)

    return updated


def apply_voucher(
    ledgers: List[Ledger],
    stock_items: List[StockItem],
    voucher: Voucher,
    multiplier: int
) -> Tuple[List[Ledger], List[StockItem]]:
    """Apply (+1) or reverse (-1) a voucher against ledger and stock snapshots"""
    if multiplier not in (1, -1):
        raise ValueError(f"Multiplier must be +1 or -1, got {multiplier}")

    new_ledgers = apply_ledger_impact(ledgers, voucher, multiplier)
    new_items = apply_inventory_impact(stock_items, voucher, multiplier)
    return new_ledgers, new_items
