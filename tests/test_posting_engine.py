"""
Posting engine: ledger impact, reversal and moving-average valuation
"""

import pytest

from ledgerbook.exceptions import UnbalancedVoucherError
from ledgerbook.models import InventoryAllocation, StockItem, Voucher
from ledgerbook.services.posting_engine import (
    apply_voucher,
    row_change,
    validate_balanced,
    value_allocation,
)

from conftest import sales_voucher


def by_name(ledgers):
    return {ledger.name: ledger for ledger in ledgers}


def purchase(quantity, amount, voucher_id="V-P"):
    return Voucher(
        id=voucher_id,
        date="2025-04-01",
        type="Purchase",
        rows=[
            {"type": "Dr", "account": "Purchase", "debit": amount, "inventory": [
                {"item_id": "S-LAPTOP", "item_name": "Laptop", "quantity": quantity, "amount": amount}
            ]},
            {"type": "Cr", "account": "Supplier", "credit": amount},
        ]
    )


def sale(quantity, amount, voucher_id="V-S"):
    return Voucher(
        id=voucher_id,
        date="2025-04-02",
        type="Sales",
        rows=[
            {"type": "Dr", "account": "Cash", "debit": amount},
            {"type": "Cr", "account": "Sales", "credit": amount, "inventory": [
                {"item_name": "Laptop", "quantity": quantity, "amount": amount}
            ]},
        ]
    )


def test_row_change_signs():
    assert row_change("Dr", 50, 0, 1) == 50
    assert row_change("Cr", 0, 50, 1) == -50
    assert row_change("Dr", 50, 0, -1) == -50


def test_post_sales_voucher_updates_balances(ledgers, stock_items):
    new_ledgers, _ = apply_voucher(ledgers, stock_items, sales_voucher(), 1)
    after = by_name(new_ledgers)

    assert (after["Customer"].balance, after["Customer"].type) == (118, "Dr")
    assert (after["Sales"].balance, after["Sales"].type) == (100, "Cr")
    assert (after["Output-CGST"].balance, after["Output-CGST"].type) == (9, "Cr")
    assert (after["Output-SGST"].balance, after["Output-SGST"].type) == (9, "Cr")


def test_inputs_are_not_mutated(ledgers, stock_items):
    apply_voucher(ledgers, stock_items, sales_voucher(), 1)
    assert by_name(ledgers)["Customer"].balance == 0


def test_reversal_restores_prior_balances(ledgers, stock_items):
    ledgers[0].balance = 500
    ledgers[0].type = "Cr"
    before = {ledger.name: ledger.signed_balance for ledger in ledgers}

    posted, items = apply_voucher(ledgers, stock_items, sales_voucher(), 1)
    reversed_ledgers, _ = apply_voucher(posted, items, sales_voucher(), -1)

    assert {ledger.name: ledger.signed_balance for ledger in reversed_ledgers} == before


def test_balance_flips_side_when_crossing_zero(ledgers, stock_items):
    voucher = Voucher(
        date="2025-04-01",
        type="Payment",
        rows=[
            {"type": "Cr", "account": "Cash", "credit": 250},
            {"type": "Dr", "account": "Supplier", "debit": 250},
        ]
    )
    new_ledgers, _ = apply_voucher(ledgers, stock_items, voucher, 1)
    cash = by_name(new_ledgers)["Cash"]
    assert (cash.balance, cash.type) == (250, "Cr")


def test_unknown_ledger_is_skipped(ledgers, stock_items):
    voucher = Voucher(
        date="2025-04-01",
        type="Journal",
        rows=[
            {"type": "Dr", "account": "Cash", "debit": 40},
            {"type": "Cr", "account": "No Such Ledger", "credit": 40},
        ]
    )
    new_ledgers, _ = apply_voucher(ledgers, stock_items, voucher, 1)

    assert by_name(new_ledgers)["Cash"].balance == 40
    assert len(new_ledgers) == len(ledgers)


def test_invalid_multiplier_rejected(ledgers, stock_items):
    with pytest.raises(ValueError):
        apply_voucher(ledgers, stock_items, sales_voucher(), 2)


def test_purchase_then_sale_moving_average(ledgers, stock_items):
    _, items = apply_voucher(ledgers, stock_items, purchase(10, 1000), 1)
    laptop = items[0]
    assert (laptop.current_balance, laptop.current_value, laptop.current_rate) == (10, 1000, 100)

    _, items = apply_voucher(ledgers, items, sale(4, 480), 1)
    laptop = items[0]
    assert laptop.current_balance == 6
    assert laptop.current_value == pytest.approx(600)
    assert laptop.current_rate == pytest.approx(100)


def test_second_purchase_blends_rate(ledgers, stock_items):
    _, items = apply_voucher(ledgers, stock_items, purchase(10, 1000, "V-P1"), 1)
    _, items = apply_voucher(ledgers, items, purchase(10, 1200, "V-P2"), 1)
    assert items[0].current_rate == pytest.approx(110)


def test_sell_down_then_purchase_resets_rate(ledgers, stock_items):
    _, items = apply_voucher(ledgers, stock_items, purchase(5, 500, "V-P1"), 1)
    _, items = apply_voucher(ledgers, items, sale(5, 700), 1)
    laptop = items[0]
    assert laptop.current_balance == 0
    assert laptop.current_value == 0
    # rate is kept at the last computed value
    assert laptop.current_rate == pytest.approx(100)

    _, items = apply_voucher(ledgers, items, purchase(2, 300, "V-P2"), 1)
    assert items[0].current_rate == pytest.approx(150)


def test_reversing_purchase_restores_stock(ledgers, stock_items):
    _, items = apply_voucher(ledgers, stock_items, purchase(10, 1000), 1)
    _, items = apply_voucher(ledgers, items, purchase(10, 1000), -1)
    assert items[0].current_balance == 0
    assert items[0].current_value == 0


def test_notes_do_not_move_stock(ledgers, stock_items):
    voucher = Voucher(
        date="2025-04-01",
        type="Credit Note",
        rows=[
            {"type": "Dr", "account": "Sales", "debit": 100, "inventory": [
                {"item_id": "S-LAPTOP", "quantity": 1, "amount": 100}
            ]},
            {"type": "Cr", "account": "Customer", "credit": 100},
        ]
    )
    _, items = apply_voucher(ledgers, stock_items, voucher, 1)
    assert items[0].current_balance is None


def test_unknown_stock_item_is_skipped(ledgers, stock_items):
    voucher = purchase(3, 300)
    voucher.rows[0].inventory[0] = InventoryAllocation(item_name="Ghost", quantity=3, amount=300)
    _, items = apply_voucher(ledgers, stock_items, voucher, 1)
    assert all(item.current_balance is None for item in items)


def test_first_touch_seeds_from_opening_figures():
    item = StockItem(name="Chair", opening_stock=4, opening_rate=50)
    assert item.opening_value == 200

    value_allocation(item, InventoryAllocation(quantity=4, rate=60), "Purchase", 1)
    assert item.current_balance == 8
    assert item.current_value == pytest.approx(440)
    assert item.current_rate == pytest.approx(55)


def test_validate_balanced():
    validate_balanced(sales_voucher())

    voucher = sales_voucher()
    voucher.rows[0].debit = 100
    with pytest.raises(UnbalancedVoucherError) as exc_info:
        validate_balanced(voucher)
    assert exc_info.value.code == "UNBALANCED_VOUCHER"
