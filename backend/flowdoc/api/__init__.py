"""API Layer: FastAPI routers and global error handlers.

Invariants:
    - Routes translate HTTP to core calls; no navigation logic lives here
"""
