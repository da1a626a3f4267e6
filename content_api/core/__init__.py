"""
Core application utilities: settings, logging, errors and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with request context (correlation id, site id)
- The typed error taxonomy raised by services
- Dependency helpers (DB session, services, request principal, role gates)
"""
