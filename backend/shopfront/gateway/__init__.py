"""Gateway Tier — edge process that relays /api traffic to the product service.

Invariants:
    - The gateway never validates business payloads
    - Its own /health never depends on the upstream
"""
