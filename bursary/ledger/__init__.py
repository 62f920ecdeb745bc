"""Pure ledger calculations: currency conversion, allocations, balances and summaries."""

from bursary.ledger.accounts import (
    ACCOUNTS,
    LEGACY_ALIASES,
    Account,
    check_payment_ceiling,
    find_account,
    get_account,
    list_accounts,
)
from bursary.ledger.allocation import (
    allocation_breakdown,
    allocation_mismatch,
    available_balance,
    generate_allocations,
    payment_matches_account,
)
from bursary.ledger.currency import EXCHANGE_RATES, Currency, convert, format_amount, to_usd
from bursary.ledger.reconciler import (
    BalanceAdjustment,
    BalanceReconciler,
    Reconciliation,
    StudentBalance,
    adjustments_for_create,
    adjustments_for_delete,
    adjustments_for_update,
    apply_adjustment,
    outstanding_for,
)
from bursary.ledger.records import (
    Allocation,
    ExpenseRecord,
    PaymentRecord,
    PaymentStatus,
    StudentRecord,
    StudentStatus,
)
from bursary.ledger.summary import (
    AccountMetrics,
    ExpenseSummary,
    FinancialSummary,
    account_metrics,
    defaulters,
    summarize,
    summarize_expenses,
)

__all__ = [
    "ACCOUNTS",
    "LEGACY_ALIASES",
    "Account",
    "AccountMetrics",
    "Allocation",
    "BalanceAdjustment",
    "BalanceReconciler",
    "Currency",
    "EXCHANGE_RATES",
    "ExpenseRecord",
    "ExpenseSummary",
    "FinancialSummary",
    "PaymentRecord",
    "PaymentStatus",
    "Reconciliation",
    "StudentBalance",
    "StudentRecord",
    "StudentStatus",
    "account_metrics",
    "adjustments_for_create",
    "adjustments_for_delete",
    "adjustments_for_update",
    "allocation_breakdown",
    "allocation_mismatch",
    "apply_adjustment",
    "available_balance",
    "check_payment_ceiling",
    "convert",
    "defaulters",
    "find_account",
    "format_amount",
    "generate_allocations",
    "get_account",
    "list_accounts",
    "outstanding_for",
    "payment_matches_account",
    "summarize",
    "summarize_expenses",
    "to_usd",
]
