"""Sample CSV files users can download, fill in and import."""

import csv
import io

from vehicle_ledger.interchange import columns as col
from vehicle_ledger.models.entries import EntryKind

SAMPLE_VEHICLE_NAME = "My Car"

SAMPLE_ROWS: dict[EntryKind, list[list[str]]] = {
    EntryKind.FUEL: [
        ["My Car", "2024-01-15", "14:30", "Shell", "Petrol", "15000", "km", "45",
         "liters", "350", "HKD", "Central", "No", "Credit Card", "32", "psi",
         "highway; city", "Regular fill-up"],
        ["My Car", "2024-01-20", "09:15", "Caltex", "Petrol", "15250", "km", "40",
         "liters", "320", "HKD", "Tsim Sha Tsui", "No", "Cash", "32", "psi",
         "city", "Morning commute"],
    ],
    EntryKind.EXPENSE: [
        ["My Car", "2024-01-15", "Service", "500", "HKD", "Oil change and filter replacement"],
        ["My Car", "2024-01-20", "Parking", "50", "HKD", "Shopping mall parking"],
        ["My Car", "2024-01-25", "Insurance", "2000", "HKD", "Annual insurance premium"],
    ],
    EntryKind.INCOME: [
        ["My Car", "2024-01-15", "Ride Sharing", "800", "HKD", "Uber driving earnings"],
        ["My Car", "2024-01-20", "Delivery Services", "450", "HKD", "Food delivery income"],
        ["My Car", "2024-01-25", "Mileage Reimbursement", "300", "HKD", "Business trip reimbursement"],
    ],
}

SAMPLE_FILENAMES = {
    EntryKind.FUEL: "fuel_entries_sample.csv",
    EntryKind.EXPENSE: "expenses_sample.csv",
    EntryKind.INCOME: "income_sample.csv",
}


def sample_csv(kind: EntryKind) -> str:
    """Header row plus a few realistic example rows for an entry kind."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(col.columns_for(kind))
    writer.writerows(SAMPLE_ROWS[kind])
    return buffer.getvalue()
