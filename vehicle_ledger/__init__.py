"""
Vehicle Ledger - CSV Interchange Package

Bulk import and export of fuel, expense and income entries for a
personal vehicle-expense tracker.

DESIGN PRINCIPLES:
1. Parse softly, validate strictly
2. Report every problem in a row at once
3. Warnings inform, they never block
4. One bad row never stops the batch
5. Whatever we export, we can import again
"""

__version__ = "1.0.0"
__author__ = "Vehicle Ledger Team"
