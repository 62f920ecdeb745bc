"""Shared pytest fixtures for unit and integration tests."""

import os
import uuid
from datetime import date
from decimal import Decimal

import pytest

# Load .env so DATABASE_URL is available for the requires_db check
from dotenv import load_dotenv

load_dotenv()

from httpx import ASGITransport, AsyncClient

from bursary.main import app
from bursary.config import settings
from bursary.ledger import Currency, ExpenseRecord, PaymentRecord, PaymentStatus, StudentRecord

# Skip integration tests if DATABASE_URL not set
requires_db = pytest.mark.skipif(
    not os.getenv("DATABASE_URL"),
    reason="DATABASE_URL must be set",
)


def _get_api_base() -> str:
    """API base URL. With TEST_USE_LIVE_SERVER=true, hit a running server instead of the ASGI app."""
    if os.getenv("TEST_USE_LIVE_SERVER", "").lower() == "true":
        base = os.getenv("LIVE_SERVER_URL", "http://localhost:8000")
        return f"{base}{settings.API_V1_PREFIX}"
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return _get_api_base()


@pytest.fixture
async def async_client(api_base: str):
    use_live = os.getenv("TEST_USE_LIVE_SERVER", "").lower() == "true"
    if use_live:
        client = AsyncClient(base_url=api_base, timeout=30.0)
    else:
        transport = ASGITransport(app=app)
        client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()


@pytest.fixture
def unique_suffix() -> str:
    """Unique suffix for test data to avoid collisions."""
    return str(uuid.uuid4())[:8]


# ---------------------------------------------------------------------------
# Record builders for the ledger unit tests
# ---------------------------------------------------------------------------

def make_payment(
    amount,
    currency=Currency.USD,
    payment_date=date(2024, 1, 15),
    student_id=None,
    status=PaymentStatus.COMPLETED,
    account_id=None,
    description="",
    allocations=None,
    **kwargs,
) -> PaymentRecord:
    return PaymentRecord(
        id=kwargs.pop("id", uuid.uuid4()),
        student_id=student_id or uuid.uuid4(),
        amount=Decimal(str(amount)),
        currency=currency,
        payment_date=payment_date,
        status=status,
        account_id=account_id,
        description=description,
        allocations=tuple(allocations) if allocations is not None else None,
        **kwargs,
    )


def make_expense(
    amount,
    currency=Currency.USD,
    expense_date=date(2024, 1, 15),
    category="Supplies",
    account_id=None,
    allocation_category=None,
) -> ExpenseRecord:
    return ExpenseRecord(
        id=uuid.uuid4(),
        amount=Decimal(str(amount)),
        currency=currency,
        category=category,
        date=expense_date,
        account_id=account_id,
        allocation_category=allocation_category,
    )


def make_student(total_fees, paid_amount="0", **kwargs) -> StudentRecord:
    total = Decimal(str(total_fees))
    paid = Decimal(str(paid_amount))
    return StudentRecord(
        id=kwargs.pop("id", uuid.uuid4()),
        total_fees=total,
        paid_amount=paid,
        outstanding_balance=max(Decimal("0"), total - paid),
        **kwargs,
    )


@pytest.fixture
async def db_ready():
    """
    Create the tables and drop pooled connections afterwards.

    asyncpg connections are tied to the event loop that opened them, and each
    test runs on its own loop.
    """
    from bursary.database import close_db, init_db

    await init_db()
    yield
    await close_db()


@pytest.fixture
async def student(async_client: AsyncClient, api_base: str, db_ready, unique_suffix: str) -> dict:
    """Enroll a student owing 1000 with 400 already paid."""
    resp = await async_client.post(
        f"{api_base}/students",
        json={
            "first_name": "Tendai",
            "last_name": f"Test{unique_suffix}",
            "admission_number": f"ADM-{unique_suffix}",
            "total_fees": "1000",
            "paid_amount": "400",
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
