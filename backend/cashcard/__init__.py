"""
Cash Card Service - Application Package
=========================================

A REST service for cash cards: create, fetch by id, and list with
pagination and sorting.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP status codes, headers, codec
    ├─────────────────────────────────────┤
    │   Services (Resource Handler,       │  ← Operation rules, pagination resolver
    │            Pagination Resolver)     │
    ├─────────────────────────────────────┤
    │     Repositories (Record Store)     │  ← CashCardStore contract + SQLAlchemy
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
