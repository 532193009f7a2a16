"""
Chill Gamer Backend — Application Package
==========================================

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Store Access)     │  ← one store round-trip per operation
    ├─────────────────────────────────────┤
    │   Collections & Schemas (Data)      │  ← index definitions + Pydantic bodies
    ├─────────────────────────────────────┤
    │     Database (Persistence)          │  ← injected pymongo async client
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
