"""
FastAPI application for issuing and verifying student certificates.

The application is split into ``core`` (configuration, storage and
security primitives), ``schemas`` (Pydantic payloads), ``services``
(business logic) and ``api`` (HTTP routes).
"""
