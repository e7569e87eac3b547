"""
CSV Column Contract

The importer and the exporter share these header lists. Column names and
column order are identical in both directions; that identity is what makes
an exported file importable again.
"""

from vehicle_ledger.models.entries import EntryKind


CAR_NAME = "Car Name"
DATE = "Date"
TIME = "Time"
FUEL_COMPANY = "Fuel Company"
FUEL_TYPE = "Fuel Type"
MILEAGE = "Mileage"
DISTANCE_UNIT = "Distance Unit"
VOLUME = "Volume"
VOLUME_UNIT = "Volume Unit"
COST = "Cost"
CURRENCY = "Currency"
LOCATION = "Location"
PARTIAL_FUEL_UP = "Partial Fuel Up"
PAYMENT_TYPE = "Payment Type"
TYRE_PRESSURE = "Tyre Pressure"
TYRE_PRESSURE_UNIT = "Tyre Pressure Unit"
TAGS = "Tags"
NOTES = "Notes"
CATEGORY = "Category"
AMOUNT = "Amount"

FUEL_COLUMNS = [
    CAR_NAME,
    DATE,
    TIME,
    FUEL_COMPANY,
    FUEL_TYPE,
    MILEAGE,
    DISTANCE_UNIT,
    VOLUME,
    VOLUME_UNIT,
    COST,
    CURRENCY,
    LOCATION,
    PARTIAL_FUEL_UP,
    PAYMENT_TYPE,
    TYRE_PRESSURE,
    TYRE_PRESSURE_UNIT,
    TAGS,
    NOTES,
]

CATEGORIZED_COLUMNS = [
    CAR_NAME,
    DATE,
    CATEGORY,
    AMOUNT,
    CURRENCY,
    NOTES,
]

REQUIRED_COLUMNS: dict[EntryKind, list[str]] = {
    EntryKind.FUEL: [CAR_NAME, DATE, MILEAGE, VOLUME, COST],
    EntryKind.EXPENSE: [CAR_NAME, DATE, CATEGORY, AMOUNT],
    EntryKind.INCOME: [CAR_NAME, DATE, CATEGORY, AMOUNT],
}

NUMERIC_COLUMNS: dict[EntryKind, list[str]] = {
    EntryKind.FUEL: [MILEAGE, VOLUME, COST, TYRE_PRESSURE],
    EntryKind.EXPENSE: [AMOUNT],
    EntryKind.INCOME: [AMOUNT],
}

TAG_SEPARATOR = ";"
TRUE_TOKENS = frozenset({"yes", "true"})


def columns_for(kind: EntryKind) -> list[str]:
    """Header row for an entry kind, in file order."""
    if kind == EntryKind.FUEL:
        return list(FUEL_COLUMNS)
    return list(CATEGORIZED_COLUMNS)
