"""Pydantic Schemas — response contracts for API endpoints.

Invariants:
    - Schemas describe what leaves the system; inbound product data is
      validated by core/validation.py
    - Domain types from core/ used for enum fields
"""
