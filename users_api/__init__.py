"""
Users API — Application Package Initializer
============================================

What:  Marks the `users_api` directory as a Python package.
Who:   Imported by uvicorn (`users_api.main:app`), Alembic, and pytest.

Architecture Note:
    The service is split into thin layers, each importable on its own:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← method + path → one service call
    ├─────────────────────────────────────┤
    │       Services (Resource Handler)   │  ← existence checks, status mapping
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │     Stores (Document persistence)   │  ← MongoDB (motor) or async SQLAlchemy
    └─────────────────────────────────────┘

    Routes never talk to a store directly, and services never build HTTP
    responses; exceptions raised by services are mapped to status codes by
    the handlers registered in `users_api.main`.
"""

__version__ = "1.0.0"
