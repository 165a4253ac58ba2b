"""
Calendar Server.

- api/: HTTP endpoints (FastAPI routers)
- core/: Configuration, logging, errors, middleware, concurrency
- models/: Event entity
- repositories/: In-memory event store
- schemas/: Request and response schemas
- services/: Scheduling rules and event ID generation
"""

__version__ = "1.0.0"
