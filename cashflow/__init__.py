"""
Cashflow - Personal Finance Tracker

A single-user personal finance tracker that records income and expense
transactions, derives monthly aggregates, tracks category budgets and
savings goals, and moves data in and out as CSV or JSON backups.

DESIGN PRINCIPLES:
1. All state lives in a local key-value medium
2. Storage failures never crash the app, but they are always reported
3. Every derived number is recomputed from the stored records
4. One user per device, data scoped by user id
5. Storage backend is swappable
"""

__version__ = "0.2.0"
__author__ = "Cashflow Team"
