"""
Voucher number generation
"""

import pytest

from ledgerbook.models import Voucher
from ledgerbook.services.numbering import increment_number, next_voucher_number


def voucher(voucher_id, voucher_no, voucher_type="Sales"):
    return Voucher(id=voucher_id, voucher_no=voucher_no, date="2025-04-01", type=voucher_type)


@pytest.mark.parametrize("previous, expected", [
    ("INV-001", "INV-002"),
    ("INV-005", "INV-006"),
    ("009", "010"),
    ("99", "100"),
    ("INV", "INV-1"),
    ("", "1"),
])
def test_increment_number(previous, expected):
    assert increment_number(previous) == expected


def test_first_voucher_of_type_is_one():
    assert next_voucher_number([voucher("V1", "P-7", "Purchase")], "Sales") == "1"


def test_next_number_follows_latest_voucher_of_type():
    history = [
        voucher("V1", "INV-001"),
        voucher("V2", "INV-002"),
        voucher("V3", "PUR-050", "Purchase"),
    ]
    assert next_voucher_number(history, "Sales") == "INV-003"
    assert next_voucher_number(history, "Purchase") == "PUR-051"


def test_latest_is_by_id_not_by_list_order():
    history = [voucher("V9", "INV-010"), voucher("V2", "INV-002")]
    assert next_voucher_number(history, "Sales") == "INV-011"
