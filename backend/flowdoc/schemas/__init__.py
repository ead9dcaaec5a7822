"""Schemas Layer: Pydantic models for API request/response validation.

Invariants:
    - Schemas never import from api/ (no circular deps)
"""
