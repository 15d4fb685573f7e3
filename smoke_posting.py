"""
Posting Smoke Script
====================
Posts, replaces and deletes vouchers against a running server and checks
balances, reports and the audit trail.

Run: python run.py   (in another terminal)
     python smoke_posting.py
"""

import sys
import io
sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')

import requests
from datetime import datetime

BASE_URL = "http://localhost:8000"
COMPANY = "SMOKE TEST CO"

LEDGERS = [
    {"id": "SMK-CUST", "name": "Customer", "group": "Sundry Debtors", "gstin": "27AAACA1234A1Z5"},
    {"id": "SMK-SALES", "name": "Sales", "group": "Sales Accounts", "type": "Cr"},
    {"id": "SMK-CGST", "name": "Output-CGST", "group": "Duties & Taxes", "type": "Cr"},
    {"id": "SMK-SGST", "name": "Output-SGST", "group": "Duties & Taxes", "type": "Cr"},
]

results = []


def print_header(title):
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)


def print_result(test_name, status, details=""):
    icon = "✅" if status else "❌"
    results.append((test_name, status))
    print(f"{icon} {test_name}: {details}")


def params(**extra):
    return {"company": COMPANY, **extra}


def sales_voucher(voucher_id, amount):
    tax = round(amount * 0.09, 2)
    return {
        "id": voucher_id,
        "voucher_no": "",
        "date": datetime.now().strftime("%Y-%m-%d"),
        "type": "Sales",
        "rows": [
            {"type": "Dr", "account": "Customer", "debit": amount + 2 * tax},
            {"type": "Cr", "account": "Sales", "credit": amount},
            {"type": "Cr", "account": "Output-CGST", "credit": tax},
            {"type": "Cr", "account": "Output-SGST", "credit": tax},
        ]
    }


def ledger_balances():
    r = requests.get(f"{BASE_URL}/api/ledgers", params=params())
    return {ledger["name"]: (ledger["balance"], ledger["type"]) for ledger in r.json()["data"]}


def run_smoke():
    """Main smoke run"""
    print_header("🧾 POSTING SMOKE TEST")
    print(f"Company: {COMPANY}")
    print(f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    # Step 1: Masters
    print_header("Step 1: Ledgers")
    for ledger in LEDGERS:
        requests.post(f"{BASE_URL}/api/ledgers", json=ledger, params=params())
    before = ledger_balances()
    print_result("Ledgers saved", len(before) >= len(LEDGERS), f"{len(before)} ledgers")

    # Step 2: Post
    print_header("Step 2: Post vouchers")
    stamp = datetime.now().strftime("%H%M%S")
    ids = [f"SMK-{stamp}-{i}" for i in range(1, 4)]
    for i, voucher_id in enumerate(ids, start=1):
        r = requests.post(f"{BASE_URL}/api/vouchers", json=sales_voucher(voucher_id, 100 * i), params=params())
        print_result(f"Post {voucher_id}", r.status_code == 201, r.json().get("message", ""))

    # Step 3: Replace
    print_header("Step 3: Replace first voucher")
    r = requests.put(f"{BASE_URL}/api/vouchers/{ids[0]}", json=sales_voucher(ids[0], 150), params=params())
    print_result("Replace", r.status_code == 200, r.json().get("message", ""))

    # Step 4: Reports
    print_header("Step 4: Reports")
    gstr1 = requests.get(f"{BASE_URL}/api/reports/gstr1", params=params()).json()
    print(f"  B2B vouchers: {gstr1['b2b']['count']} | Taxable: {gstr1['b2b']['taxable_value']}")
    print_result("GSTR-1", gstr1["b2b"]["count"] >= 3, f"{gstr1['counts']}")

    trial = requests.get(f"{BASE_URL}/api/reports/trial-balance", params=params()).json()
    print_result("Trial balance", abs(trial["difference"]) < 0.01, f"difference {trial['difference']}")

    # Step 5: Bulk delete
    print_header("Step 5: Bulk delete")
    r = requests.post(
        f"{BASE_URL}/api/vouchers/bulk-delete",
        json={"voucher_ids": ids + ["SMK-MISSING"]},
        params=params()
    )
    bulk = r.json()
    print_result("Bulk delete", bulk["completed"] == len(ids), bulk["message"])

    after = ledger_balances()
    restored = all(abs(after[name][0] - before[name][0]) < 0.01 for name in before)
    print_result("Balances restored", restored)

    # Step 6: Audit
    print_header("Step 6: Audit trail")
    history = requests.get(
        f"{BASE_URL}/api/audit/history", params=params(entity_type="VOUCHER", limit=20)
    ).json()
    actions = [record["action"] for record in history["records"]]
    print(f"  Recent actions: {actions[:8]}")
    print_result("Audit logging", {"CREATE", "UPDATE", "DELETE"} <= set(actions))

    # Final Summary
    print_header("🎉 POSTING SMOKE TEST - SUMMARY")
    passed = sum(1 for _, status in results if status)
    print(f"  {passed} of {len(results)} checks passed")
    print("\n" + "=" * 60)
    print("  Test completed at", datetime.now().strftime('%Y-%m-%d %H:%M:%S'))
    print("=" * 60)
    return passed == len(results)


if __name__ == "__main__":
    sys.exit(0 if run_smoke() else 1)
