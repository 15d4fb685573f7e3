"""
Ledgerbook Exception Hierarchy

All accounting-core errors inherit from LedgerbookError so callers can
catch them with a single except clause. Nothing in the core retries;
every error propagates to the caller unchanged.
"""

from typing import Any, Dict, Optional

from .utils.constants import ErrorCode


class LedgerbookError(Exception):
    """Base exception for all ledgerbook errors"""
    
    code = ErrorCode.UNKNOWN_ERROR
    
    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}
    
    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class StoreNotInitializedError(LedgerbookError):
    """Raised when an operation runs without a document store handle"""
    code = ErrorCode.STORE_NOT_INITIALIZED


class VoucherNotFoundError(LedgerbookError):
    """Raised when a voucher id is not present in history"""
    code = ErrorCode.VOUCHER_NOT_FOUND
    
    def __init__(self, voucher_id: str):
        super().__init__(f"Voucher not found: {voucher_id}", details={"voucher_id": voucher_id})
        self.voucher_id = voucher_id


class DuplicateVoucherError(LedgerbookError):
    """Raised when posting a voucher whose id is already in history"""
    code = ErrorCode.DUPLICATE_VOUCHER

    def __init__(self, voucher_id: str):
        super().__init__(f"Voucher already posted: {voucher_id}", details={"voucher_id": voucher_id})
        self.voucher_id = voucher_id


class LedgerNotFoundError(LedgerbookError):
    """Raised by reports when the requested ledger does not exist"""
    code = ErrorCode.LEDGER_NOT_FOUND
    
    def __init__(self, ledger_id: str):
        super().__init__(f"Ledger not found: {ledger_id}", details={"ledger_id": ledger_id})
        self.ledger_id = ledger_id


class UnbalancedVoucherError(LedgerbookError):
    """Raised when debit and credit totals of a voucher differ"""
    code = ErrorCode.UNBALANCED_VOUCHER
    
    def __init__(self, voucher_id: str, total_debit: float, total_credit: float):
        super().__init__(
            f"Voucher {voucher_id} is unbalanced: Dr {total_debit:.2f} != Cr {total_credit:.2f}",
            details={"voucher_id": voucher_id, "total_debit": total_debit, "total_credit": total_credit}
        )
