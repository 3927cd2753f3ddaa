"""Services Layer: imperative shell around the pure rules in core/.

Invariants:
    - Each public write is one transaction (services/transaction.atomic)
    - Services take an AsyncSession in their constructor; routes build them per request
"""
