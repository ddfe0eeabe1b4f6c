"""
ATM Simulator

A single-account ATM simulation with PIN-gated sessions, Decimal balance
arithmetic, a bounded mini-statement ledger and plain-text persistence.
"""

__version__ = "1.0.0"
