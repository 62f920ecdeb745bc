"""Percentage-based budget allocation for receipt-book accounts.

Allocations are snapshotted on a payment when it is recorded. Category
balances are never stored: they are re-derived from payments and expenses on
every read.
"""

from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Union

from bursary.core.exceptions import AllocationSumMismatch, UnknownAccount
from bursary.core.logging import get_logger
from bursary.ledger.accounts import find_account, get_account, legacy_aliases
from bursary.ledger.currency import Currency, Number, parse_currency, to_decimal
from bursary.ledger.records import Allocation, ExpenseRecord, PaymentRecord

logger = get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_REL_TOL = Decimal("1e-6")


def generate_allocations(amount: Number, account_id: Optional[str]) -> List[Allocation]:
    """
    Split a payment amount across the account's budget categories.

    Categories come out in the table's declaration order. An account with no
    table gets no allocation and the amount stays unsplit at account level.
    Ceiling checks are the caller's job and happen before this.
    """
    account = find_account(account_id)
    if account is None or not account.has_allocation_table:
        logger.debug(
            "No allocation table for account",
            extra={"account_id": account_id, "error": str(UnknownAccount(account_id))},
        )
        return []

    value = to_decimal(amount)
    return [
        Allocation(category=category, percentage=percentage, amount=value * percentage / HUNDRED)
        for category, percentage in account.percentages.items()
    ]


def payment_matches_account(payment: PaymentRecord, account_id: str) -> bool:
    """Whether a payment belongs to a receipt-book account, old ids included."""
    if payment.account_id is not None:
        if payment.account_id == account_id:
            return True
        if payment.account_id in legacy_aliases(account_id):
            return True

    # Last resort: payments recorded before account ids existed are only
    # identifiable by the wording of their description.
    account = find_account(account_id)
    if account is None:
        return False
    description = payment.description or ""
    if account.keyword:
        return account.keyword in description.lower() or account.name in description
    # Books without a keyword also need the currency to line up
    return payment.currency is account.currency and account.name in description


def allocated_amount(payment: PaymentRecord, category: str, percentage: Decimal) -> Decimal:
    """
    Amount of one payment that went to ``category``.

    Stored allocations are taken verbatim; payments recorded before allocation
    tracking get the percentage applied on the fly.
    """
    if payment.has_allocations:
        for allocation in payment.allocations:
            if allocation.category == category:
                return allocation.amount
        return ZERO
    return payment.amount * percentage / HUNDRED


def available_balance(
    account_id: str,
    category: str,
    currency: Union[str, Currency],
    payments: Iterable[PaymentRecord],
    expenses: Iterable[ExpenseRecord],
) -> Decimal:
    """
    Money left in one allocation category: allocated minus spent, floored at 0.

    Payments count when completed, in ``currency`` and belonging to the
    account. Expenses count when their account id and allocation category
    match exactly; legacy ids do not apply to expenses.
    """
    code = parse_currency(currency)
    account = find_account(account_id)
    percentage = account.percentage_for(category) if account is not None else None

    total_allocated = ZERO
    if percentage is not None:
        for payment in payments:
            if not payment.is_completed or payment.currency is not code:
                continue
            if not payment_matches_account(payment, account_id):
                continue
            total_allocated += allocated_amount(payment, category, percentage)

    total_spent = ZERO
    for expense in expenses:
        if expense.account_id == account_id and expense.allocation_category == category:
            total_spent += expense.amount

    return max(ZERO, total_allocated - total_spent)


def allocation_breakdown(
    account_id: str,
    payments: Sequence[PaymentRecord],
    expenses: Sequence[ExpenseRecord],
    currency: Optional[Union[str, Currency]] = None,
) -> Dict[str, Decimal]:
    """Available balance for every category of an account, in table order."""
    account = get_account(account_id)
    code = parse_currency(currency) if currency is not None else account.currency
    return {
        category: available_balance(account_id, category, code, payments, expenses)
        for category in account.categories
    }


def allocation_mismatch(
    amount: Number,
    allocations: Optional[Sequence[Allocation]],
    payment_id=None,
    rel_tol: Decimal = DEFAULT_REL_TOL,
) -> Optional[AllocationSumMismatch]:
    """
    Integrity check for stored allocations.

    Returns the warning when the allocation amounts drift from the payment
    amount by more than ``rel_tol``; returns None when they agree or nothing
    is stored. Never raises.
    """
    if not allocations:
        return None
    expected = to_decimal(amount)
    actual = sum((a.amount for a in allocations), ZERO)
    tolerance = max(abs(expected) * rel_tol, Decimal("1e-9"))
    if abs(actual - expected) <= tolerance:
        return None
    return AllocationSumMismatch(payment_id, expected, actual)
