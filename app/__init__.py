"""
Bundlebase: a role-aware REST API over PostgreSQL bundle schemas.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - records: Role-scoped CRUD on bundle tables, shaped as JSON by PostgreSQL.
    - bundles: Installing, uninstalling and describing bundles (one schema each).

Layers:
    - domain: Pure logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: SQLAlchemy and filesystem adapters implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
