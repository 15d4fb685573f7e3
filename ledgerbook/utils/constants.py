"""
Constants Module
Application-wide constants
"""

# Application Info
APP_NAME = "Ledgerbook Accounting Core"
APP_VERSION = "1.0.0"

# Document Store Tables (one JSON document per table per company scope)
TABLE_LEDGERS = "ledgers"
TABLE_VOUCHERS = "vouchers"
TABLE_STOCK_ITEMS = "stock_items"
TABLE_AUDIT_LOGS = "audit_logs"


# Balance side tags
class BalanceSide:
    DEBIT = "Dr"
    CREDIT = "Cr"


# Voucher Types
class VoucherKind:
    SALES = "Sales"
    PURCHASE = "Purchase"
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    CONTRA = "Contra"
    JOURNAL = "Journal"
    CREDIT_NOTE = "Credit Note"
    DEBIT_NOTE = "Debit Note"


VOUCHER_TYPES = [
    VoucherKind.SALES,
    VoucherKind.PURCHASE,
    VoucherKind.PAYMENT,
    VoucherKind.RECEIPT,
    VoucherKind.CONTRA,
    VoucherKind.JOURNAL,
    VoucherKind.CREDIT_NOTE,
    VoucherKind.DEBIT_NOTE
]

# Voucher types that take part in tax returns
TAX_RELEVANT_TYPES = [
    VoucherKind.SALES,
    VoucherKind.PURCHASE,
    VoucherKind.CREDIT_NOTE,
    VoucherKind.DEBIT_NOTE
]

NOTE_TYPES = [VoucherKind.CREDIT_NOTE, VoucherKind.DEBIT_NOTE]


# Tax return categories
class TaxCategory:
    B2B = "B2B"
    B2CL = "B2CL"
    B2CS = "B2CS"
    CDNR = "CDNR"
    CDNUR = "CDNUR"
    EXP = "EXP"
    NIL = "NIL"


# Standard group families used by trial balance / group summary
ACCOUNT_GROUPS = {
    "Assets": ["Bank Accounts", "Cash-in-hand", "Sundry Debtors", "Fixed Assets"],
    "Liabilities": ["Sundry Creditors", "Loans (Liability)", "Duties & Taxes"],
    "Income": ["Sales Accounts", "Direct Incomes", "Indirect Incomes"],
    "Expenses": ["Purchase Accounts", "Direct Expenses", "Indirect Expenses"],
}

# Ledgers every company is expected to carry
DEFAULT_LEDGERS = [
    {"name": "Cash", "group": "Cash-in-hand", "type": BalanceSide.DEBIT},
    {"name": "Sales Account", "group": "Sales Accounts", "type": BalanceSide.CREDIT},
    {"name": "Purchase Account", "group": "Purchase Accounts", "type": BalanceSide.DEBIT},
    {"name": "Bank Account", "group": "Bank Accounts", "type": BalanceSide.DEBIT},
]


# Audit actions / entities
class AuditAction:
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditEntity:
    VOUCHER = "VOUCHER"
    LEDGER = "LEDGER"
    STOCK_ITEM = "STOCK_ITEM"


# Error Codes
class ErrorCode:
    STORE_NOT_INITIALIZED = "STORE_NOT_INITIALIZED"
    STORE_ERROR = "STORE_ERROR"
    VOUCHER_NOT_FOUND = "VOUCHER_NOT_FOUND"
    DUPLICATE_VOUCHER = "DUPLICATE_VOUCHER"
    LEDGER_NOT_FOUND = "LEDGER_NOT_FOUND"
    UNBALANCED_VOUCHER = "UNBALANCED_VOUCHER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Health Status
class HealthStatus:
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
