"""
Service layer abstraction.

Each service encapsulates the business logic for one domain and talks
to the SQLite store from ``core.db``.  API handlers call services and
translate their exceptions into HTTP responses.
"""
