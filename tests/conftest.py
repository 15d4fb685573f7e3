"""
Shared fixtures: in-memory document store and a small chart of accounts
"""

import os
from pathlib import Path

# Must be set before ledgerbook.config is first imported
os.environ.setdefault("LEDGERBOOK_CONFIG_PATH", str(Path(__file__).parent / "config.yaml"))

import pytest

from ledgerbook.models import Ledger, StockItem, Voucher
from ledgerbook.services.document_store import MemoryDocumentStore
from ledgerbook.utils.constants import TABLE_LEDGERS, TABLE_STOCK_ITEMS


def make_ledgers():
    return [
        Ledger(id="L-CUST", name="Customer", group="Sundry Debtors", gstin="27AAACA1234A1Z5"),
        Ledger(id="L-RETAIL", name="Walk-in Buyer", group="Sundry Debtors"),
        Ledger(id="L-SUPP", name="Supplier", group="Sundry Creditors", gstin="27AAACS9876B1Z2"),
        Ledger(id="L-SALES", name="Sales", group="Sales Accounts", type="Cr"),
        Ledger(id="L-PURCH", name="Purchase", group="Purchase Accounts"),
        Ledger(id="L-CGST", name="Output-CGST", group="Duties & Taxes", type="Cr"),
        Ledger(id="L-SGST", name="Output-SGST", group="Duties & Taxes", type="Cr"),
        Ledger(id="L-IGST", name="Output IGST", group="Duties & Taxes", type="Cr"),
        Ledger(id="L-ICGST", name="Input CGST", group="Duties & Taxes"),
        Ledger(id="L-ISGST", name="Input SGST", group="Duties & Taxes"),
        Ledger(id="L-CASH", name="Cash", group="Cash-in-hand"),
    ]


def make_stock_items():
    return [
        StockItem(id="S-LAPTOP", name="Laptop", unit="Nos", hsn_code="8471", gst_rate=18),
        StockItem(id="S-DESK", name="Desk", unit="Nos", hsn_code="9403", gst_rate=18),
    ]


def sales_voucher(voucher_id="V-SALE-1", voucher_no="INV-1", party="Customer", date="2025-04-10"):
    """Dr party 118, Cr Sales 100, Cr Output-CGST 9, Cr Output-SGST 9"""
    return Voucher(
        id=voucher_id,
        voucher_no=voucher_no,
        date=date,
        type="Sales",
        rows=[
            {"type": "Dr", "account": party, "debit": 118},
            {"type": "Cr", "account": "Sales", "credit": 100},
            {"type": "Cr", "account": "Output-CGST", "credit": 9},
            {"type": "Cr", "account": "Output-SGST", "credit": 9},
        ]
    )


@pytest.fixture
def ledgers():
    return make_ledgers()


@pytest.fixture
def stock_items():
    return make_stock_items()


@pytest.fixture
async def store():
    store = MemoryDocumentStore()
    await store.write(TABLE_LEDGERS, [ledger.model_dump() for ledger in make_ledgers()])
    await store.write(TABLE_STOCK_ITEMS, [item.model_dump() for item in make_stock_items()])
    return store
