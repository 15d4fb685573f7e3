"""
Helper Functions Module
Utility functions used across the application
"""

import re
from datetime import date, datetime
from typing import Any, List, Optional, Tuple, Union
from uuid import uuid4

from .constants import BalanceSide

_NATURAL_CHUNK = re.compile(r'(\d+)')

MONTH_MAP = {
    'jan': '01', 'feb': '02', 'mar': '03', 'apr': '04',
    'may': '05', 'jun': '06', 'jul': '07', 'aug': '08',
    'sep': '09', 'oct': '10', 'nov': '11', 'dec': '12'
}


def parse_voucher_date(value: Union[str, date, None]) -> Optional[str]:
    """Normalize a voucher date to ISO format (YYYY-MM-DD)"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    
    date_str = value.strip()
    
    # Format: YYYY-MM-DD or full ISO timestamp
    if len(date_str) >= 10 and date_str[4] == '-' and date_str[7] == '-':
        return date_str[:10]
    
    # Format: YYYYMMDD (e.g., 20250401)
    if len(date_str) == 8 and date_str.isdigit():
        return f"{date_str[:4]}-{date_str[4:6]}-{date_str[6:8]}"
    
    # Format: d-MMM-yy or dd-MMM-yyyy (e.g., 1-Apr-25)
    parts = date_str.split('-')
    if len(parts) == 3:
        day = parts[0].zfill(2)
        month = MONTH_MAP.get(parts[1].lower()[:3])
        year = parts[2]
        if month and day.isdigit() and year.isdigit():
            if len(year) == 2:
                year = '20' + year if int(year) < 50 else '19' + year
            return f"{year}-{month}-{day}"
    
    raise ValueError(f"Unrecognized date: {value}")


def to_signed(balance: float, side: str) -> float:
    """Convert a magnitude + Dr/Cr tag into a signed amount (Dr positive)"""
    return balance if side == BalanceSide.DEBIT else -balance


def split_signed(amount: float) -> Tuple[float, str]:
    """Split a signed amount back into magnitude and Dr/Cr tag"""
    return abs(amount), BalanceSide.DEBIT if amount >= 0 else BalanceSide.CREDIT


def natural_sort_key(value: str) -> List[Any]:
    """Sort key that compares embedded digit runs numerically ("INV-2" < "INV-10")"""
    return [
        (0, int(chunk), chunk) if chunk.isdigit() else (1, chunk.lower(), chunk)
        for chunk in _NATURAL_CHUNK.split(value or "")
        if chunk
    ]


def contains_any(text: str, tokens: List[str]) -> bool:
    """Case-insensitive substring match against a token list"""
    lowered = (text or "").lower()
    return any(token.lower() in lowered for token in tokens)


def round_amount(value: float, places: int = 2) -> float:
    """Round a currency amount, folding -0.0 to 0.0"""
    rounded = round(value, places)
    return rounded + 0.0


def get_current_timestamp() -> str:
    """Get current timestamp in ISO format"""
    return datetime.now().isoformat()


def new_record_id(prefix: str = "") -> str:
    """Time-ordered record identity (lexicographic order follows creation order)"""
    stamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
    return f"{prefix}{stamp}-{uuid4().hex[:6]}"
