"""Shared fixtures for the Vehicle Ledger test suite."""

from datetime import date
from decimal import Decimal

import pytest

from vehicle_ledger.config import ImportSettings
from vehicle_ledger.models.entries import (
    ExpenseEntry,
    FuelEntry,
    IncomeEntry,
    Vehicle,
)


@pytest.fixture
def settings() -> ImportSettings:
    """Import settings with built-in defaults only (no .env, no environment)."""
    return ImportSettings(_env_file=None)


@pytest.fixture
def roster() -> list[Vehicle]:
    return [
        Vehicle(id="v1", name="My Car"),
        Vehicle(id="v2", name="Work Van"),
    ]


@pytest.fixture
def fuel_entry() -> FuelEntry:
    return FuelEntry(
        vehicle_id="v1",
        date=date(2024, 1, 15),
        time="14:30",
        fuel_company="Shell",
        fuel_type="Petrol",
        mileage=Decimal("15000"),
        volume=Decimal("45.50"),
        cost=Decimal("350"),
        location="Central",
        payment_type="Credit Card",
        tyre_pressure=Decimal("32"),
        tags=["highway", "city"],
        notes="Regular fill-up",
    )


@pytest.fixture
def expense_entry() -> ExpenseEntry:
    return ExpenseEntry(
        vehicle_id="v1",
        date=date(2024, 1, 20),
        category="Parking",
        amount=Decimal("50"),
        notes="Shopping mall parking",
    )


@pytest.fixture
def income_entry() -> IncomeEntry:
    return IncomeEntry(
        vehicle_id="v2",
        date=date(2024, 1, 25),
        category="Ride Sharing",
        amount=Decimal("800"),
    )
