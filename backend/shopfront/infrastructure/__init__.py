"""Infrastructure Layer — store access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/ or gateway/
    - All driver exceptions mapped to core/errors.py types before leaving this layer
"""
