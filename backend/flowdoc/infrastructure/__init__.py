"""Infrastructure Layer: process-level concerns (logging setup).

Invariants:
    - Nothing in infrastructure/ holds domain state
"""
