"""Infrastructure Layer: database, logging and identity adapters.

Invariants:
    - Infrastructure never imports domain services
"""
