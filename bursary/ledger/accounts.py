"""Receipt-book accounts and their budget allocation tables.

This is versioned configuration owned by the ledger, not database state.
Percentages for every account that has a table add up to 100.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from bursary.core.exceptions import PaymentCeilingExceeded, UnknownAccount
from bursary.ledger.currency import Currency, to_decimal


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    currency: Currency
    description: str = ""
    # Largest amount a single receipt may carry; None means unlimited.
    ceiling: Optional[Decimal] = None
    percentages: Mapping[str, Decimal] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)
    # Matched against payment descriptions as a last resort.
    keyword: Optional[str] = None

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(self.percentages)

    @property
    def has_allocation_table(self) -> bool:
        return bool(self.percentages)

    def percentage_for(self, category: str) -> Optional[Decimal]:
        return self.percentages.get(category)

    def label_for(self, category: str) -> str:
        return self.labels.get(category, category.replace("_", " ").title())


def _table(*pairs: Tuple[str, int]) -> Mapping[str, Decimal]:
    return MappingProxyType({category: Decimal(pct) for category, pct in pairs})


GENERAL_FEES_TABLE = _table(
    ("building", 30),
    ("tuition", 20),
    ("gpf", 10),
    ("sports", 10),
    ("ra", 10),
    ("nash_bspz", 10),
    ("textbooks", 5),
    ("practical_fee", 5),
)

GENERAL_FEES_LABELS = MappingProxyType({
    "building": "Building",
    "tuition": "Tuition",
    "gpf": "GPF",
    "sports": "Sports",
    "ra": "RA",
    "nash_bspz": "Nash/BSPZ",
    "textbooks": "Textbooks",
    "practical_fee": "Practical Fee",
})

PROJECTS_TABLE = _table(
    ("salaries", 50),
    ("projects", 30),
    ("practical_equipment", 20),
)

PROJECTS_LABELS = MappingProxyType({
    "salaries": "Salaries",
    "projects": "Projects",
    "practical_equipment": "Practical Equipment",
})


ACCOUNTS: Mapping[str, Account] = MappingProxyType({
    account.id: account
    for account in (
        Account(
            id="406",
            name="Tuition Receipt Book",
            currency=Currency.ZAR,
            description="R1000 Tuition Receipt Book - Tuition Fees",
            ceiling=Decimal("1000"),
            percentages=GENERAL_FEES_TABLE,
            labels=GENERAL_FEES_LABELS,
            keyword="tuition",
        ),
        Account(
            id="408",
            name="Projects Receipt Book",
            currency=Currency.ZAR,
            description="R300 Projects Receipt Book - School Projects & Development",
            ceiling=Decimal("300"),
            percentages=PROJECTS_TABLE,
            labels=PROJECTS_LABELS,
            keyword="project",
        ),
        Account(
            id="405",
            name="Nostro",
            currency=Currency.USD,
            description="USD Nostro Receipt Book - Foreign Currency Transactions",
            ceiling=Decimal("70"),
            percentages=GENERAL_FEES_TABLE,
            labels=GENERAL_FEES_LABELS,
            keyword="nostro",
        ),
        Account(
            id="402",
            name="Account 402",
            currency=Currency.ZIG,
            description="ZiG Receipt Book - Local Currency Payments",
        ),
        Account(
            id="401",
            name="USD SiG Account",
            currency=Currency.USD,
            description="USD SiG Receipt Book - USD Currency Transactions Only",
        ),
    )
})

# Account ids were renumbered; payments recorded before that still carry the
# old id. Maps the current id to the ids its payments used to be filed under.
LEGACY_ALIASES: Mapping[str, FrozenSet[str]] = MappingProxyType({
    "406": frozenset({"405"}),
    "408": frozenset({"406"}),
    "405": frozenset({"408"}),
})


def find_account(account_id: Optional[str]) -> Optional[Account]:
    if account_id is None:
        return None
    return ACCOUNTS.get(str(account_id))


def get_account(account_id: Optional[str]) -> Account:
    account = find_account(account_id)
    if account is None:
        raise UnknownAccount(account_id)
    return account


def legacy_aliases(account_id: str) -> FrozenSet[str]:
    return LEGACY_ALIASES.get(account_id, frozenset())


def list_accounts() -> Tuple[Account, ...]:
    return tuple(ACCOUNTS.values())


def check_payment_ceiling(amount, account_id: Optional[str]) -> None:
    """
    Reject a receipt larger than its receipt book allows.

    Unknown accounts and accounts without a ceiling accept any amount.
    """
    account = find_account(account_id)
    if account is None or account.ceiling is None:
        return
    value = to_decimal(amount)
    if value > account.ceiling:
        raise PaymentCeilingExceeded(account.id, value, account.ceiling)

