"""
Domain and I/O models for farmops.

- domain/: enumerations and business rules shared across layers
- io/: Pydantic request/response schemas for the API
"""
