"""
Store-backed voucher posting, replacement, removal and audit trail
"""

import pytest

from ledgerbook.config import config, PostingConfig
from ledgerbook.exceptions import (
    DuplicateVoucherError,
    StoreNotInitializedError,
    UnbalancedVoucherError,
    VoucherNotFoundError,
)
from ledgerbook.models import Voucher
from ledgerbook.services.audit_service import AuditService
from ledgerbook.services.document_store import MemoryDocumentStore
from ledgerbook.services.ledger_service import LedgerService
from ledgerbook.services.voucher_service import VoucherService
from ledgerbook.utils.constants import TABLE_LEDGERS, TABLE_STOCK_ITEMS, TABLE_VOUCHERS

from conftest import sales_voucher


class FailingLedgerWriteStore(MemoryDocumentStore):
    """Raises on the Nth write of the ledgers table"""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on
        self.ledger_writes = 0
        self.armed = False

    async def write(self, name, records, scope=None):
        if self.armed and name == TABLE_LEDGERS:
            self.ledger_writes += 1
            if self.ledger_writes == self.fail_on:
                raise OSError("disk unavailable")
        await super().write(name, records, scope)


async def balances(store, scope=None):
    records = await store.read(TABLE_LEDGERS, scope) or []
    return {record["name"]: (record["balance"], record["type"]) for record in records}


@pytest.fixture
def service(store):
    return VoucherService(store)


async def test_post_appends_and_applies(service, store):
    await service.post(sales_voucher())

    assert [v.id for v in await service.load_vouchers()] == ["V-SALE-1"]
    after = await balances(store)
    assert after["Customer"] == (118, "Dr")
    assert after["Sales"] == (100, "Cr")


async def test_remove_restores_balances(service, store):
    await service.post(sales_voucher("V-OPEN", "INV-0"))
    before = await balances(store)
    await service.post(sales_voucher())
    removed = await service.remove("V-SALE-1")

    assert removed.voucher_no == "INV-1"
    assert [v.id for v in await service.load_vouchers()] == ["V-OPEN"]
    after = await balances(store)
    for name in ("Customer", "Sales", "Output-CGST", "Output-SGST"):
        assert after[name] == before[name]


async def test_duplicate_id_is_rejected(service, store):
    await service.post(sales_voucher())
    with pytest.raises(DuplicateVoucherError) as exc_info:
        await service.post(sales_voucher())
    assert exc_info.value.voucher_id == "V-SALE-1"

    assert len(await service.load_vouchers()) == 1
    assert (await balances(store))["Customer"] == (118, "Dr")

    await service.remove("V-SALE-1")
    assert await service.load_vouchers() == []
    assert (await balances(store))["Customer"] == (0, "Dr")


async def test_remove_drops_one_entry_per_reversal(service, store):
    # History written before ids were enforced can hold the same id twice
    await service.post(sales_voucher())
    await service.post(sales_voucher("V-SALE-2", "INV-2"))
    records = await store.read(TABLE_VOUCHERS)
    records[1]["id"] = "V-SALE-1"
    await store.write(TABLE_VOUCHERS, records)

    await service.remove("V-SALE-1")
    assert [v.voucher_no for v in await service.load_vouchers()] == ["INV-2"]
    assert (await balances(store))["Customer"] == (118, "Dr")

    await service.remove("V-SALE-1")
    assert await service.load_vouchers() == []
    assert (await balances(store))["Customer"] == (0, "Dr")


async def test_remove_unknown_voucher(service):
    with pytest.raises(VoucherNotFoundError) as exc_info:
        await service.remove("V-NOPE")
    assert exc_info.value.voucher_id == "V-NOPE"


async def test_replace_reverses_old_version(service, store):
    await service.post(sales_voucher())
    revised = Voucher(
        id="V-SALE-1",
        voucher_no="INV-1",
        date="2025-04-10",
        type="Sales",
        rows=[
            {"type": "Dr", "account": "Customer", "debit": 236},
            {"type": "Cr", "account": "Sales", "credit": 200},
            {"type": "Cr", "account": "Output-CGST", "credit": 18},
            {"type": "Cr", "account": "Output-SGST", "credit": 18},
        ]
    )
    await service.replace(revised)

    vouchers = await service.load_vouchers()
    assert len(vouchers) == 1
    assert vouchers[0].rows[0].debit == 236
    after = await balances(store)
    assert after["Customer"] == (236, "Dr")
    assert after["Sales"] == (200, "Cr")


async def test_replace_missing_voucher_posts_it(service, store):
    await service.replace(sales_voucher())
    assert len(await service.load_vouchers()) == 1
    assert (await balances(store))["Customer"] == (118, "Dr")


async def test_post_fills_missing_number(service):
    await service.post(sales_voucher("V1", "INV-007"))
    posted = await service.post(sales_voucher("V2", ""))
    assert posted.voucher_no == "INV-008"
    assert await service.next_number("Sales") == "INV-009"
    assert await service.next_number("Purchase") == "1"


async def test_inventory_is_valued_on_post_and_remove(service, store):
    voucher = Voucher(
        id="V-PUR-1",
        date="2025-04-01",
        type="Purchase",
        rows=[
            {"type": "Dr", "account": "Purchase", "debit": 1000, "inventory": [
                {"item_id": "S-LAPTOP", "quantity": 10, "rate": 100}
            ]},
            {"type": "Cr", "account": "Supplier", "credit": 1000},
        ]
    )
    await service.post(voucher)
    items = {item["id"]: item for item in await store.read(TABLE_STOCK_ITEMS)}
    assert items["S-LAPTOP"]["current_balance"] == 10
    assert items["S-LAPTOP"]["current_rate"] == 100

    await service.remove("V-PUR-1")
    items = {item["id"]: item for item in await store.read(TABLE_STOCK_ITEMS)}
    assert items["S-LAPTOP"]["current_balance"] == 0


async def test_enforce_balanced(store):
    service = VoucherService(store, posting=PostingConfig(enforce_balanced=True))
    voucher = sales_voucher()
    voucher.rows[0].debit = 100

    with pytest.raises(UnbalancedVoucherError):
        await service.post(voucher)
    assert await store.read(TABLE_VOUCHERS) is None


async def test_unbalanced_voucher_posts_by_default(service):
    voucher = sales_voucher()
    voucher.rows[0].debit = 100
    await service.post(voucher)
    assert len(await service.load_vouchers()) == 1


async def test_company_scopes_are_isolated(service, store):
    await service.post(sales_voucher(), scope="acme")
    assert await service.load_vouchers() == []
    assert len(await service.load_vouchers("acme")) == 1


async def test_missing_store():
    service = VoucherService(None)
    with pytest.raises(StoreNotInitializedError):
        await service.post(sales_voucher())


class TestBulkRemove:

    async def test_all_succeed(self, service):
        for i in range(1, 4):
            await service.post(sales_voucher(f"V{i}", f"INV-{i}"))

        result = await service.remove_many(["V1", "V2", "V3"])
        assert result.message == "3 of 3 completed"
        assert await service.load_vouchers() == []

    async def test_failure_does_not_stop_the_loop(self):
        store = FailingLedgerWriteStore(fail_on=2)
        await LedgerService(store).ensure_defaults()
        service = VoucherService(store)
        for i in range(1, 4):
            await service.post(Voucher(
                id=f"V{i}", voucher_no=str(i), date="2025-04-01", type="Receipt",
                rows=[
                    {"type": "Dr", "account": "Cash", "debit": 10},
                    {"type": "Cr", "account": "Bank Account", "credit": 10},
                ]
            ))

        store.armed = True
        result = await service.remove_many(["V1", "V2", "V3"])

        assert (result.completed, result.total) == (2, 3)
        assert result.message == "2 of 3 completed"
        assert result.removed == ["V1", "V3"]
        assert [failure.voucher_id for failure in result.failed] == ["V2"]
        assert result.failed[0].code == "STORE_ERROR"
        assert [v.id for v in await service.load_vouchers()] == ["V2"]
        # V2's impact is still in place
        assert (await balances(store))["Cash"] == (10, "Dr")

    async def test_unknown_ids_are_reported(self, service):
        await service.post(sales_voucher("V1", "INV-1"))
        result = await service.remove_many(["V1", "V-NOPE"])
        assert result.message == "1 of 2 completed"
        assert result.failed[0].code == "VOUCHER_NOT_FOUND"


class TestAuditTrail:

    async def test_voucher_lifecycle_is_audited(self, service):
        await service.post(sales_voucher())
        await service.replace(sales_voucher().model_copy(update={"narration": "corrected"}))
        await service.remove("V-SALE-1")

        logs = await service.audit.get_logs()
        assert [entry["action"] for entry in logs] == ["DELETE", "UPDATE", "CREATE"]
        assert logs[1]["changes"] == {"narration": {"old": "", "new": "corrected"}}
        assert all(entry["entity_id"] == "V-SALE-1" for entry in logs)

    async def test_filters(self, service):
        await service.post(sales_voucher("V1", "INV-1"))
        await service.post(sales_voucher("V2", "INV-2"))
        await service.remove("V1")

        audit = service.audit
        assert len(await audit.get_logs(action="delete")) == 1
        assert len(await audit.get_logs(entity_id="V2")) == 1
        assert len(await audit.get_logs(limit=2)) == 2

    async def test_log_is_capped(self, store):
        audit = AuditService(store, max_entries=3)
        for i in range(5):
            await audit.log(None, "CREATE", "VOUCHER", f"V{i}", "created")

        logs = await audit.get_logs()
        assert [entry["entity_id"] for entry in logs] == ["V4", "V3", "V2"]

    async def test_disabled_audit_writes_nothing(self, store):
        audit = AuditService(store, enabled=False)
        await audit.log(None, "CREATE", "VOUCHER", "V1", "created")
        assert await audit.get_logs() == []

    async def test_settings_follow_live_config(self, store, monkeypatch):
        audit = AuditService(store)
        monkeypatch.setattr(config.audit, "enabled", False)
        await audit.log(None, "CREATE", "VOUCHER", "V1", "created")
        assert await audit.get_logs() == []

        monkeypatch.setattr(config.audit, "enabled", True)
        monkeypatch.setattr(config.audit, "max_entries", 1)
        await audit.log(None, "CREATE", "VOUCHER", "V2", "created")
        await audit.log(None, "CREATE", "VOUCHER", "V3", "created")
        assert [entry["entity_id"] for entry in await audit.get_logs()] == ["V3"]


class TestLedgerService:

    async def test_ensure_defaults_is_idempotent(self):
        store = MemoryDocumentStore()
        service = LedgerService(store)

        assert await service.ensure_defaults() is True
        names = [ledger.name for ledger in await service.list_ledgers()]
        assert names == ["Bank Account", "Cash", "Purchase Account", "Sales Account"]
        assert await service.ensure_defaults() is False

    async def test_ensure_defaults_matches_names_case_insensitively(self, store):
        service = LedgerService(store)
        # "Cash" already exists in the fixture chart
        await service.ensure_defaults()
        names = [ledger.name.lower() for ledger in await service.list_ledgers()]
        assert names.count("cash") == 1

    async def test_save_ledger_upserts(self, store):
        service = LedgerService(store)
        ledgers = await service.list_ledgers(group="Sundry Debtors")
        customer = next(ledger for ledger in ledgers if ledger.name == "Customer")

        await service.save_ledger(customer.model_copy(update={"state": "Goa"}))
        ledgers = await service.list_ledgers(group="Sundry Debtors")
        assert len(ledgers) == 2
        assert next(l for l in ledgers if l.name == "Customer").state == "Goa"
