"""Core Layer: pure domain logic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from api/, schemas/, or infrastructure/
    - Navigation operations are deterministic and never raise on missing state

Design Decisions:
    - Functional core separated from imperative shell
"""
