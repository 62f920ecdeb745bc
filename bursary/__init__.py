"""School bursary backend: fee balances, multi-currency payments and receipt-book allocations."""

__version__ = "1.0.0"
