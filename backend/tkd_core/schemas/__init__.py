"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary; services re-check domain rules

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
