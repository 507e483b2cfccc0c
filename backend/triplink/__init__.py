"""
TripLink Backend — Application Package
========================================

Layers:

    ┌─────────────────────────────────────┐
    │      Routes + Middleware (HTTP)     │  ← status codes, auth header, JSON
    ├─────────────────────────────────────┤
    │     Services + Permissions          │  ← business rules, capability checks
    ├─────────────────────────────────────┤
    │     Schemas (Pydantic) / Models     │  ← validation, ORM rows
    ├─────────────────────────────────────┤
    │   Repository helpers / Database     │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
