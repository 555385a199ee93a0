"""Shopfront — validated product catalog service and its edge gateway.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
