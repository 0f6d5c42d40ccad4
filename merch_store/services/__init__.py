"""Services Layer — stores, user directory, transfer engine and read-side queries.

Invariants:
    - Stores wrap one AsyncSession and never commit; the caller owns the unit of work
    - Only the transfer engine mutates balances

Design Decisions:
    - One file per store for locality
"""
