"""farmops.

Multi-tenant farm-operations management API.

High-level architecture
-----------------------

A *farm* is the tenant. Every farm-scoped resource lives under
``/api/v1/farms/{farm_id}`` and is gated by the caller's role on that farm.

Core subpackages
----------------

- ``farmops.core``:

  - Logging and monitoring configuration.
  - The error taxonomy shared by services and HTTP handlers.
  - SQLModel entities, repositories and API I/O schemas.

- ``farmops.server``:

  - The FastAPI application, routers, authentication/tenant dependencies.
  - Domain services: production scheduling, storefront checkout, dashboard
    forecasts and PDF document generation.

Typical order lifecycle
-----------------------

1. An order is taken by staff or through the public storefront.
2. Each item is scheduled backwards from its harvest date and the production
   tasks (soak, seed, move to light, harvest) are generated.
3. Completing tasks advances the item status; once every item is harvested
   the order is ready.
4. Documents (packing slip, invoice, delivery receipt, bill of lading) are
   rendered from the order and payments are recorded against it.
"""
