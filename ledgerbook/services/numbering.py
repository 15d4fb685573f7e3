"""
Voucher Numbering Module
Derives the next document number for a voucher type from voucher history
"""

import re
from typing import Iterable

from ..models.transaction import Voucher

_TRAILING_DIGITS = re.compile(r'^(.*?)(\d+)$')


def increment_number(previous: str) -> str:
    """Increment the trailing digit run, keeping its zero padding

    "INV-005" -> "INV-006", "009" -> "010", "INV" -> "INV-1"
    """
    if not previous:
        return "1"

    match = _TRAILING_DIGITS.match(previous)
    if not match:
        return f"{previous}-1"

    prefix, digits = match.groups()
    return f"{prefix}{str(int(digits) + 1).zfill(len(digits))}"


def next_voucher_number(vouchers: Iterable[Voucher], voucher_type: str) -> str:
    """Next number for `voucher_type`, based on the most recent voucher of that type

    Voucher ids are time-ordered, so the greatest id is the latest voucher.
    """
    same_type = [v for v in vouchers if v.type == voucher_type]
    if not same_type:
        return "1"

    latest = max(same_type, key=lambda v: v.id)
    return increment_number(latest.voucher_no)
