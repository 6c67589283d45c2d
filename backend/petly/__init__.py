"""
Petly Backend: Application Package Initializer
================================================

What: Marks the `petly` directory as a Python package.
Who:  Imported by uvicorn (`petly.main:app`), Alembic, pytest and the
      breed sync job (`python -m petly.sync_breeds`).

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP, auth checks, status codes
    ├─────────────────────────────────────┤
    │   Services (stores, catalog, merge) │  ← Business rules, SQL assembly
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy tables + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Local data (shelters, adopters, adoptable dogs, favorites) lives in
    PostgreSQL. Remote data comes live from the Petfinder API and is merged
    with local results by `petly.services.merger`.
"""

__version__ = "1.0.0"
