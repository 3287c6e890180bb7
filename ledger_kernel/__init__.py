"""
Ledger Kernel

The general-ledger core of a small-business ERP:
- Double-entry validation of journal entries before persistence
- Trial balance derived from posted journal lines (no stored balances)
- Chart of accounts directory and journal entry store
- Sequential entry numbering and an activity log
"""

__version__ = "0.1.0"
